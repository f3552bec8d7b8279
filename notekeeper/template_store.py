"""In-memory template list, persisted on every change."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional

from notekeeper.clipboard import ClipboardChain, default_chain
from notekeeper.export import DirectoryExportSink, backup_filename
from notekeeper.identity import Clock, StampSource, utc_now
from notekeeper.models import TEMPLATES_ADAPTER, Template, TemplateBundle, TemplateUpdate
from notekeeper.persistence import (
    LoadResult,
    SaveResult,
    StorageSlot,
    read_bundled,
)
from notekeeper.ports import ExportSink, KeyValueStore
from notekeeper.search import matches, normalize_query

logger = logging.getLogger(__name__)

TEMPLATES_KEY = "templates-data"
DEFAULT_TEMPLATES_FILE = "templates.json"
ID_PREFIX = "tmpl-"


def default_templates() -> list[Template]:
    """Fresh copy of the bundled template list."""
    return TemplateBundle.model_validate(read_bundled(DEFAULT_TEMPLATES_FILE)).templates


class TemplateStore:
    """Templates in insertion order."""

    def __init__(
        self,
        kv: KeyValueStore,
        key: str = TEMPLATES_KEY,
        export_sink: Optional[ExportSink] = None,
        clipboard: Optional[ClipboardChain] = None,
        clock: Clock = utc_now,
    ) -> None:
        self._slot = StorageSlot(kv, key, TEMPLATES_ADAPTER)
        self._export_sink = export_sink or DirectoryExportSink(Path.cwd())
        self._clipboard = clipboard or default_chain()
        self._stamps = StampSource(clock)
        self._templates: list[Template] = []
        self._initialized = False
        self.load()

    @property
    def initialized(self) -> bool:
        return self._initialized

    def load(self) -> LoadResult[list[Template]]:
        """Replace in-memory state with stored templates, or the bundled defaults."""
        result = self._slot.read(default_templates)
        self._templates = result.value
        self._initialized = True
        logger.info("Templates ready: %d (%s)", len(self._templates), result.source)
        return result

    def save_to_storage(self) -> SaveResult:
        return self._slot.write(self._templates)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def count(self) -> int:
        return len(self._templates)

    def list_all(self) -> list[Template]:
        return list(self._templates)

    def snapshot(self) -> list[Template]:
        return self.list_all()

    def all_tags(self) -> list[str]:
        """Every tag used by any template, deduplicated and sorted."""
        return sorted({tag for t in self._templates for tag in t.tags})

    def get_by_id(self, template_id: str) -> Optional[Template]:
        index = self._find(template_id)
        return None if index is None else self._templates[index]

    def search(self, query: Optional[str]) -> list[Template]:
        """Templates whose title, description, any tag or content contains ``query``."""
        needle = normalize_query(query)
        if not needle:
            return list(self._templates)
        return [
            t
            for t in self._templates
            if matches(needle, (t.title, t.description, *t.tags, t.content))
        ]

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add(
        self,
        title: str,
        description: str,
        content: str,
        tags: Optional[Iterable[str]] = None,
    ) -> Template:
        """Append a new template to the end of the list."""
        stamp, created = self._stamps.next()
        template = Template(
            id=f"{ID_PREFIX}{stamp}",
            title=title,
            description=description,
            tags=list(tags or ()),
            content=content,
            created_at=created.isoformat(),
        )
        self._templates.append(template)
        self.save_to_storage()
        logger.info("Added template %s '%s'", template.id, template.title)
        return template

    def update(self, template_id: str, changes: TemplateUpdate | Mapping[str, Any]) -> bool:
        """Merge ``changes`` into a template and stamp ``updatedAt``."""
        index = self._find(template_id)
        if index is None:
            return False

        if not isinstance(changes, TemplateUpdate):
            changes = TemplateUpdate.model_validate(changes)

        merged = {
            **self._templates[index].model_dump(),
            **changes.model_dump(exclude_unset=True, exclude_none=True),
            "updated_at": self._stamps.now().isoformat(),
        }
        self._templates[index] = Template.model_validate(merged)
        self.save_to_storage()
        logger.info("Updated template %s", template_id)
        return True

    def delete(self, template_id: str) -> bool:
        index = self._find(template_id)
        if index is None:
            return False

        del self._templates[index]
        self.save_to_storage()
        logger.info("Deleted template %s", template_id)
        return True

    # ------------------------------------------------------------------
    # Side effects
    # ------------------------------------------------------------------

    async def copy_to_clipboard(self, template_id: str) -> bool:
        """Put a template's content on the clipboard. False if unknown or every strategy fails."""
        template = self.get_by_id(template_id)
        if template is None:
            return False
        return await self._clipboard.copy(template.content)

    def export(self) -> Path:
        """Write ``{"templates": [...]}`` as pretty JSON to the export sink."""
        bundle = TemplateBundle(templates=list(self._templates))
        payload = bundle.model_dump_json(indent=2, by_alias=True, exclude_none=True)
        filename = backup_filename("templates", self._stamps.now())
        return self._export_sink.deliver(filename, payload)

    def _find(self, template_id: str) -> Optional[int]:
        for index, template in enumerate(self._templates):
            if template.id == template_id:
                return index
        return None
