"""Snapshot differ: turn two project snapshots into one backward history entry."""
from __future__ import annotations

import time
from typing import Any, Callable, List, Optional

from script_history.config import get_settings
from script_history.models import (
    FileAddedChange,
    FileChange,
    FileEditedChange,
    FileRemovedChange,
    HistoryEntry,
    ScriptText,
)
from script_history.tracking import is_tracked

DiffFn = Callable[[str, str], Any]


def now_ms() -> int:
    return int(time.time() * 1000)


def diff_script_text(
    old_version: ScriptText,
    new_version: ScriptText,
    diff: DiffFn,
    *,
    clock: Optional[Callable[[], int]] = None,
    editor_version: Optional[str] = None,
) -> Optional[HistoryEntry]:
    """
    Describe how to get from `new_version` back to `old_version`.

    Only tracked files are compared. Returns None when nothing tracked
    changed; callers should not log an entry in that case.
    """
    changes: List[FileChange] = []

    for filename, old_value in old_version.items():
        if not is_tracked(filename):
            continue
        if filename not in new_version:
            changes.append(FileRemovedChange(filename=filename, value=old_value))
        elif new_version[filename] != old_value:
            changes.append(
                FileEditedChange(filename=filename, patch=diff(new_version[filename], old_value))
            )

    for filename, new_value in new_version.items():
        if not is_tracked(filename):
            continue
        if filename not in old_version:
            changes.append(FileAddedChange(filename=filename, value=new_value))

    if not changes:
        return None

    return HistoryEntry(
        timestamp=(clock or now_ms)(),
        editor_version=get_settings().editor_version if editor_version is None else editor_version,
        changes=changes,
    )
