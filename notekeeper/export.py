"""Backup file export."""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path

logger = logging.getLogger(__name__)


def backup_filename(prefix: str, when: datetime) -> str:
    """``<prefix>-backup-<YYYY-MM-DD>.json`` for the date of ``when``."""
    return f"{prefix}-backup-{when.date().isoformat()}.json"


class DirectoryExportSink:
    """Writes exported files into a local directory."""

    def __init__(self, directory: Path) -> None:
        self._directory = Path(directory)

    @property
    def directory(self) -> Path:
        return self._directory

    def deliver(self, filename: str, payload: str) -> Path:
        """Write ``payload`` to ``directory/filename``, replacing any previous file."""
        self._directory.mkdir(parents=True, exist_ok=True)
        target = self._directory / filename
        target.write_text(payload, encoding="utf-8")
        logger.info("Exported %d bytes to %s", len(payload), target)
        return target
