"""Environment-driven configuration for the segmentation service."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional

from docseg.ingest.chunking import (
    DEFAULT_MAX_CHUNK_SIZE,
    DEFAULT_MIN_CHUNK_SIZE,
    DEFAULT_OVERLAP,
    ChunkingOptions,
)

LOGGER = logging.getLogger(__name__)

_FALSE_VALUES = {"0", "false", "no", "off"}
_TRUE_VALUES = {"1", "true", "yes", "on"}


def _int_from_env(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        LOGGER.warning("Invalid integer for %s: %s; using default %s", name, value, default)
        return default


def _bool_from_env(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    flag = value.strip().lower()
    if flag in _FALSE_VALUES:
        return False
    if flag in _TRUE_VALUES:
        return True
    LOGGER.warning("Invalid boolean for %s: %s; using default %s", name, value, default)
    return default


@dataclass(slots=True, frozen=True)
class Settings:
    chunking: ChunkingOptions
    merge_small_chunks: bool = True
    merge_min_size: Optional[int] = None
    max_workers: Optional[int] = None
    log_dir: Path = Path("logs")


def load_settings() -> Settings:
    """Read settings from the process environment."""

    chunking = ChunkingOptions(
        max_chunk_size=_int_from_env("DOCSEG_MAX_CHUNK_SIZE", DEFAULT_MAX_CHUNK_SIZE),
        min_chunk_size=_int_from_env("DOCSEG_MIN_CHUNK_SIZE", DEFAULT_MIN_CHUNK_SIZE),
        overlap=_int_from_env("DOCSEG_OVERLAP", DEFAULT_OVERLAP),
        preserve_sentences=_bool_from_env("DOCSEG_PRESERVE_SENTENCES", True),
    ).clamped()
    max_workers = _int_from_env("DOCSEG_MAX_WORKERS", 0)
    merge_min_size = _int_from_env("DOCSEG_MERGE_MIN_SIZE", 0)
    return Settings(
        chunking=chunking,
        merge_small_chunks=_bool_from_env("DOCSEG_MERGE_SMALL_CHUNKS", True),
        merge_min_size=merge_min_size if merge_min_size > 0 else None,
        max_workers=max_workers if max_workers > 0 else None,
        log_dir=Path(os.getenv("DOCSEG_LOG_DIR", "logs")),
    )


@lru_cache()
def get_settings() -> Settings:
    """Return cached settings."""

    return load_settings()


def reset_settings_cache() -> None:
    """Clear the cached settings (primarily for testing)."""

    get_settings.cache_clear()  # type: ignore[attr-defined]
