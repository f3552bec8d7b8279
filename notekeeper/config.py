"""Settings loaded from environment variables and ``.env``."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings

LOG_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"


class Settings(BaseSettings):
    """Application settings. Every field can be set as ``NOTEKEEPER_<NAME>``."""

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "NOTEKEEPER_",
    }

    # Durable storage
    storage_backend: Literal["memory", "file", "redis"] = "file"
    storage_path: Path = Path("notekeeper_storage.json")
    redis_url: str = "redis://localhost:6379"
    redis_prefix: str = "notekeeper:"

    # Storage keys
    notes_key: str = "notes-data"
    templates_key: str = "templates-data"

    # Exports
    export_dir: Path = Path(".")

    log_level: str = "INFO"


def configure_logging(level: str = "INFO") -> None:
    """Install the project's log format on the root logger."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
