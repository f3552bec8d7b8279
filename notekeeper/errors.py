"""Error types for recoverable storage and clipboard failures.

None of these are raised out of a store operation. They are captured in
result objects (see ``notekeeper.persistence``) or logged and turned into a
boolean outcome.
"""

from __future__ import annotations


class NotekeeperError(Exception):
    """Base class for notekeeper errors."""


class StorageReadError(NotekeeperError):
    """Stored data could not be read, parsed or validated."""

    def __init__(self, key: str, reason: str) -> None:
        super().__init__(f"Failed to read '{key}': {reason}")
        self.key = key
        self.reason = reason


class StorageWriteError(NotekeeperError):
    """The collection could not be serialized or written."""

    def __init__(self, key: str, reason: str) -> None:
        super().__init__(f"Failed to write '{key}': {reason}")
        self.key = key
        self.reason = reason


class ClipboardError(NotekeeperError):
    """A clipboard strategy could not place text on the clipboard."""
