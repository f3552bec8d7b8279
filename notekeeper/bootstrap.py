"""Wire both stores to the backend, export sink and clipboard chosen in settings."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from notekeeper.backends import JsonFileKeyValueStore, MemoryKeyValueStore, RedisKeyValueStore
from notekeeper.clipboard import default_chain
from notekeeper.config import Settings, configure_logging
from notekeeper.export import DirectoryExportSink
from notekeeper.note_store import NoteStore
from notekeeper.ports import KeyValueStore
from notekeeper.template_store import TemplateStore

logger = logging.getLogger(__name__)


@dataclass
class Stores:
    """The two stores, sharing one durable backend."""

    notes: NoteStore
    templates: TemplateStore
    backend: KeyValueStore


def build_key_value_store(settings: Settings) -> KeyValueStore:
    if settings.storage_backend == "redis":
        return RedisKeyValueStore(settings.redis_url, prefix=settings.redis_prefix)
    if settings.storage_backend == "memory":
        return MemoryKeyValueStore()
    return JsonFileKeyValueStore(settings.storage_path)


def create_stores(settings: Optional[Settings] = None, *, setup_logging: bool = False) -> Stores:
    """Build a NoteStore and a TemplateStore from ``settings`` (env by default)."""
    settings = settings or Settings()
    if setup_logging:
        configure_logging(settings.log_level)

    backend = build_key_value_store(settings)
    sink = DirectoryExportSink(settings.export_dir)
    logger.info("Using %s storage backend", settings.storage_backend)

    return Stores(
        notes=NoteStore(backend, key=settings.notes_key, export_sink=sink),
        templates=TemplateStore(
            backend,
            key=settings.templates_key,
            export_sink=sink,
            clipboard=default_chain(),
        ),
        backend=backend,
    )
