"""In-memory note collection grouped by category, persisted on every change."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Mapping, Optional

from notekeeper.export import DirectoryExportSink, backup_filename
from notekeeper.identity import Clock, StampSource, slugify, utc_now
from notekeeper.models import (
    NOTES_ADAPTER,
    CategorySummary,
    Note,
    NoteCollection,
    NoteUpdate,
)
from notekeeper.persistence import (
    LoadResult,
    SaveResult,
    StorageSlot,
    pretty_json,
    read_bundled,
)
from notekeeper.ports import ExportSink, KeyValueStore
from notekeeper.search import matches, normalize_query

logger = logging.getLogger(__name__)

NOTES_KEY = "notes-data"
DEFAULT_NOTES_FILE = "notes.json"


def default_notes() -> NoteCollection:
    """Fresh copy of the bundled notes dataset."""
    return NOTES_ADAPTER.validate_python(read_bundled(DEFAULT_NOTES_FILE))


class NoteStore:
    """Notes keyed by category; each list is newest-first."""

    def __init__(
        self,
        kv: KeyValueStore,
        key: str = NOTES_KEY,
        export_sink: Optional[ExportSink] = None,
        clock: Clock = utc_now,
    ) -> None:
        self._slot = StorageSlot(kv, key, NOTES_ADAPTER)
        self._export_sink = export_sink or DirectoryExportSink(Path.cwd())
        self._stamps = StampSource(clock)
        self._notes: NoteCollection = {}
        self._initialized = False
        self.load()

    # ------------------------------------------------------------------
    # Loading / saving
    # ------------------------------------------------------------------

    @property
    def initialized(self) -> bool:
        return self._initialized

    def load(self) -> LoadResult[NoteCollection]:
        """Replace in-memory state with stored notes, or the bundled defaults."""
        result = self._slot.read(default_notes)
        self._notes = result.value
        self._initialized = True
        logger.info(
            "Notes ready: %d categories, %d notes (%s)",
            len(self._notes),
            self.total_count(),
            result.source,
        )
        return result

    def save_to_storage(self) -> SaveResult:
        """Write the whole mapping under the notes key."""
        return self._slot.write(self._notes)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_categories(self) -> list[CategorySummary]:
        return [
            CategorySummary(name=name, count=len(notes))
            for name, notes in self._notes.items()
        ]

    def list_category_names(self) -> list[str]:
        return list(self._notes)

    def get_by_category(self, category: str) -> list[Note]:
        """Copy of the category's notes; empty for an unknown category."""
        return list(self._notes.get(category, ()))

    def get(self, category: str, note_id: str) -> Optional[Note]:
        index = self._find(category, note_id)
        if index is None:
            return None
        return self._notes[category][index]

    def total_count(self) -> int:
        return sum(len(notes) for notes in self._notes.values())

    def snapshot(self) -> NoteCollection:
        """Copy of the whole mapping. Notes are immutable, so a shallow copy per list suffices."""
        return {name: list(notes) for name, notes in self._notes.items()}

    def search(self, category: Optional[str], query: Optional[str]) -> list[Note]:
        """Notes of ``category`` whose title or content contains ``query``.

        A missing or unknown category yields nothing; a blank query yields the
        whole category in its stored order.
        """
        if not category or category not in self._notes:
            return []

        needle = normalize_query(query)
        notes = self._notes[category]
        if not needle:
            return list(notes)
        return [n for n in notes if matches(needle, (n.title, n.content))]

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add(self, category: str, title: str, content: str) -> Note:
        """Create a note at the head of ``category``, creating the category if needed."""
        notes = self._notes.setdefault(category, [])
        stamp, created = self._stamps.next()
        note = Note(
            id=f"{slugify(category)}-{stamp}",
            title=title,
            content=content,
            created_at=created.isoformat(),
        )
        notes.insert(0, note)
        self.save_to_storage()
        logger.info("Added note %s to '%s'", note.id, category)
        return note

    def delete(self, category: str, note_id: str) -> bool:
        index = self._find(category, note_id)
        if index is None:
            return False

        del self._notes[category][index]
        self.save_to_storage()
        logger.info("Deleted note %s from '%s'", note_id, category)
        return True

    def update(
        self,
        category: str,
        note_id: str,
        changes: NoteUpdate | Mapping[str, Any],
    ) -> bool:
        """Merge ``changes`` into an existing note and stamp ``updatedAt``.

        Raises ``pydantic.ValidationError`` if ``changes`` names a field that
        cannot be edited.
        """
        index = self._find(category, note_id)
        if index is None:
            return False

        if not isinstance(changes, NoteUpdate):
            changes = NoteUpdate.model_validate(changes)

        current = self._notes[category][index]
        merged = {
            **current.model_dump(),
            **changes.model_dump(exclude_unset=True, exclude_none=True),
            "updated_at": self._timestamp(),
        }
        self._notes[category][index] = Note.model_validate(merged)
        self.save_to_storage()
        logger.info("Updated note %s in '%s'", note_id, category)
        return True

    def add_category(self, name: str) -> bool:
        """Create an empty category. Returns False if it already exists."""
        if name in self._notes:
            return False

        self._notes[name] = []
        self.save_to_storage()
        logger.info("Added category '%s'", name)
        return True

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    def export(self) -> Path:
        """Write the whole mapping as pretty JSON to the export sink."""
        filename = backup_filename("notes", self._stamps.now())
        return self._export_sink.deliver(filename, pretty_json(NOTES_ADAPTER, self._notes))

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _find(self, category: str, note_id: str) -> Optional[int]:
        for index, note in enumerate(self._notes.get(category, ())):
            if note.id == note_id:
                return index
        return None

    def _timestamp(self) -> str:
        return self._stamps.now().isoformat()
