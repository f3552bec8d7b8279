"""Read-through / write-through bridge between a store and a key-value backend.

Each store owns one ``StorageSlot`` under its own key. A slot never raises:
read problems come back in a ``LoadResult`` and write problems in a
``SaveResult``, both logged here.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Generic, Optional, TypeVar

from pydantic import TypeAdapter, ValidationError

from notekeeper.errors import StorageReadError, StorageWriteError
from notekeeper.ports import KeyValueStore

logger = logging.getLogger(__name__)

T = TypeVar("T")

DATA_DIR = Path(__file__).parent / "data"

SOURCE_STORAGE = "storage"
SOURCE_DEFAULT = "default"


@dataclass
class LoadResult(Generic[T]):
    """Outcome of loading a collection."""

    value: T
    source: str
    error: Optional[StorageReadError] = None

    @property
    def from_storage(self) -> bool:
        return self.source == SOURCE_STORAGE


@dataclass
class SaveResult:
    """Outcome of persisting a collection."""

    key: str
    error: Optional[StorageWriteError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class StorageSlot(Generic[T]):
    """A single JSON value stored under ``key``."""

    def __init__(self, kv: KeyValueStore, key: str, adapter: TypeAdapter[T]) -> None:
        self._kv = kv
        self._key = key
        self._adapter = adapter

    @property
    def key(self) -> str:
        return self._key

    def read(self, fallback: Callable[[], T]) -> LoadResult[T]:
        """Return the stored value, or ``fallback()`` on a miss or bad data."""
        try:
            raw = self._kv.get(self._key)
        except Exception as exc:
            return self._fall_back(fallback, StorageReadError(self._key, str(exc)))

        if not raw:
            logger.info("No stored data under '%s', using bundled defaults", self._key)
            return LoadResult(value=fallback(), source=SOURCE_DEFAULT)

        try:
            value = self._adapter.validate_json(raw)
        except ValidationError as exc:
            reason = f"{exc.error_count()} validation error(s)"
            return self._fall_back(fallback, StorageReadError(self._key, reason))

        logger.info("Loaded '%s' from storage", self._key)
        return LoadResult(value=value, source=SOURCE_STORAGE)

    def write(self, value: T) -> SaveResult:
        """Serialize the whole value and store it. Errors are logged, not raised."""
        try:
            payload = self._adapter.dump_json(value, by_alias=True, exclude_none=True)
            self._kv.set(self._key, payload.decode("utf-8"))
        except Exception as exc:
            error = StorageWriteError(self._key, str(exc))
            logger.error("Failed to save '%s': %s", self._key, exc)
            return SaveResult(key=self._key, error=error)
        return SaveResult(key=self._key)

    def _fall_back(self, fallback: Callable[[], T], error: StorageReadError) -> LoadResult[T]:
        logger.warning("%s; using bundled defaults", error)
        return LoadResult(value=fallback(), source=SOURCE_DEFAULT, error=error)


def read_bundled(name: str) -> Any:
    """Parse a bundled dataset from the package ``data`` directory."""
    return json.loads((DATA_DIR / name).read_text(encoding="utf-8"))


def pretty_json(adapter: TypeAdapter[T], value: T) -> str:
    """Serialize ``value`` with 2-space indentation, as used for exports."""
    return adapter.dump_json(value, indent=2, by_alias=True, exclude_none=True).decode("utf-8")
