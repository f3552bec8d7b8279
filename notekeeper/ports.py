"""Ports (interfaces) the stores depend on.

Stores only talk to these protocols, so the durable backend, the export
target and the clipboard can be swapped (or faked in tests).
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Protocol


class KeyValueStore(Protocol):
    """Durable string key-value storage."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...


class ExportSink(Protocol):
    """Destination for exported backup files."""

    def deliver(self, filename: str, payload: str) -> Path:
        ...


class ClipboardStrategy(Protocol):
    """One way of putting text on the system clipboard."""

    name: str

    async def write_text(self, text: str) -> None:
        ...
