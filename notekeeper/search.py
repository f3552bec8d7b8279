"""Case-insensitive substring matching shared by both stores."""

from __future__ import annotations

from typing import Iterable


def normalize_query(query: str | None) -> str:
    """Trim and case-fold a search query. ``None`` counts as blank."""
    return (query or "").strip().casefold()


def matches(needle: str, haystacks: Iterable[str]) -> bool:
    """True if the normalized ``needle`` occurs in any of ``haystacks``."""
    return any(needle in text.casefold() for text in haystacks)
