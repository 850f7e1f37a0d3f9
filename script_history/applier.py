"""Backward-patch applier: roll a snapshot back through history entries."""
from __future__ import annotations

from typing import Any, Callable, Iterable

from script_history.errors import CorruptHistory
from script_history.models import HistoryEntry, ScriptText

PatchFn = Callable[[Any, str], str]


def apply_diff(text: ScriptText, entry: HistoryEntry, patch: PatchFn) -> ScriptText:
    """Return the snapshot that existed before `entry`. `text` is not modified."""
    result = dict(text)
    for change in entry.changes:
        if change.type == "added":
            result.pop(change.filename, None)
        elif change.type == "removed":
            result[change.filename] = change.value
        else:
            if change.filename not in text:
                raise CorruptHistory(
                    f"edited file missing from snapshot: {change.filename}",
                    details={"filename": change.filename, "timestamp": entry.timestamp},
                )
            result[change.filename] = patch(change.patch, text[change.filename])
    return result


def apply_history(text: ScriptText, entries: Iterable[HistoryEntry], patch: PatchFn) -> ScriptText:
    """Roll back through `entries` newest-first and return the oldest snapshot."""
    current = text
    for entry in reversed(list(entries)):
        current = apply_diff(current, entry, patch)
    return current
