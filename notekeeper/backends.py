"""Key-value backends for durable storage.

``JsonFileKeyValueStore`` is the default: a single local JSON file holding
every key. ``RedisKeyValueStore`` keeps the same contract on a Redis server.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Optional

import redis

logger = logging.getLogger(__name__)


class MemoryKeyValueStore:
    """Dict-backed store. Data is lost when the process exits."""

    def __init__(self, initial: Optional[dict[str, str]] = None) -> None:
        self._data: dict[str, str] = dict(initial or {})
        self.writes = 0

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value
        self.writes += 1


class JsonFileKeyValueStore:
    """All keys in one JSON object on disk. A missing file reads as empty."""

    def __init__(self, path: Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _read_all(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        data = json.loads(self._path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"{self._path} does not contain a JSON object")
        return data

    def get(self, key: str) -> Optional[str]:
        value = self._read_all().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        """Rewrite the file with ``key`` set, via a temp file and atomic replace.

        An unreadable file is moved aside to ``<name>.corrupt`` and replaced.
        """
        try:
            data = self._read_all()
        except ValueError as exc:
            backup = self._path.with_name(f"{self._path.name}.corrupt")
            logger.warning("Replacing unreadable %s (kept as %s): %s", self._path, backup, exc)
            os.replace(self._path, backup)
            data = {}
        data[key] = value
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self._path.parent, prefix=f".{self._path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh, indent=2, ensure_ascii=False)
            os.replace(tmp_name, self._path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise


class RedisKeyValueStore:
    """Stores each key as a Redis string, optionally namespaced by ``prefix``."""

    def __init__(self, redis_url: str, prefix: str = "") -> None:
        self._redis_url = redis_url
        self._prefix = prefix
        self._client: redis.Redis = redis.Redis.from_url(redis_url, decode_responses=True)
        logger.info("Redis storage configured: %s", redis_url)

    def _key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    def get(self, key: str) -> Optional[str]:
        return self._client.get(self._key(key))

    def set(self, key: str, value: str) -> None:
        self._client.set(self._key(key), value)

    def close(self) -> None:
        self._client.close()
