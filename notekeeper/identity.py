"""Id and timestamp generation for new entities."""

from __future__ import annotations

import re
from datetime import UTC, datetime
from typing import Callable

Clock = Callable[[], datetime]

_WHITESPACE = re.compile(r"\s+")


def utc_now() -> datetime:
    return datetime.now(UTC)


def slugify(name: str) -> str:
    """Lower-case ``name`` and collapse each whitespace run to one hyphen."""
    return _WHITESPACE.sub("-", name.lower())


class StampSource:
    """Millisecond creation stamps that never repeat within one store.

    Two ids generated in the same millisecond get consecutive stamps.
    """

    def __init__(self, clock: Clock = utc_now) -> None:
        self._clock = clock
        self._last = 0

    def now(self) -> datetime:
        return self._clock()

    def next(self) -> tuple[int, datetime]:
        """Return a fresh stamp and the moment it was taken."""
        moment = self._clock()
        stamp = int(moment.timestamp() * 1000)
        if stamp <= self._last:
            stamp = self._last + 1
        self._last = stamp
        return stamp, moment
