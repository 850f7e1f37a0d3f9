"""Runtime configuration for the history engine."""
from __future__ import annotations

import os
from functools import lru_cache
from typing import Optional

from pydantic import BaseModel

DEFAULT_EDITOR_VERSION = "0.0.0"
DEFAULT_INTERVAL_MS = 5 * 60 * 1000
DEFAULT_PATCH_BACKEND = "lines"


def _get_env(name: str, default: Optional[str] = None) -> Optional[str]:
    return os.getenv(name, default)


def _get_int_env(name: str, default: int) -> int:
    raw = _get_env(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return default


class HistorySettings(BaseModel):
    editor_version: str = DEFAULT_EDITOR_VERSION
    interval_ms: int = DEFAULT_INTERVAL_MS
    patch_backend: str = DEFAULT_PATCH_BACKEND


@lru_cache(maxsize=1)
def get_settings() -> HistorySettings:
    return HistorySettings(
        editor_version=_get_env("SCRIPT_HISTORY_EDITOR_VERSION") or DEFAULT_EDITOR_VERSION,
        interval_ms=_get_int_env("SCRIPT_HISTORY_INTERVAL_MS", DEFAULT_INTERVAL_MS),
        patch_backend=(_get_env("SCRIPT_HISTORY_PATCH_BACKEND") or DEFAULT_PATCH_BACKEND).strip().lower(),
    )


def reset_settings() -> None:
    """Drop cached settings so the next read picks up the environment again."""
    get_settings.cache_clear()
