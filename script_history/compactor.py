"""
History compactor.

Walks a history log newest to oldest and folds every run of entries that
sit within `interval` of the run's newest entry into a single entry.
Entries outside [min_time, max_time] are kept as they are.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from script_history.applier import PatchFn, apply_diff
from script_history.differ import DiffFn, diff_script_text
from script_history.errors import CorruptHistory, InvalidArgument
from script_history.models import CollapseHistoryOptions, HistoryEntry, ScriptText

logger = logging.getLogger(__name__)


@dataclass
class _Group:
    index: int  # newest entry of the group
    time: int
    version: str
    text: ScriptText  # snapshot right after the newest entry


def _check_history(history: Sequence[HistoryEntry], options: CollapseHistoryOptions) -> None:
    if not history:
        raise InvalidArgument("cannot collapse an empty history")
    if options.interval <= 0:
        raise InvalidArgument(
            "interval must be positive", details={"interval": options.interval}
        )
    for i in range(1, len(history)):
        if history[i].timestamp < history[i - 1].timestamp:
            raise CorruptHistory(
                "history is not sorted by timestamp",
                details={
                    "index": i,
                    "timestamp": history[i].timestamp,
                    "previous": history[i - 1].timestamp,
                },
            )


def _flush(
    history: Sequence[HistoryEntry],
    group: _Group,
    oldest_index: int,
    current: ScriptText,
    diff: DiffFn,
) -> Optional[HistoryEntry]:
    # A group holding one entry keeps the original patch payloads.
    if group.index == oldest_index:
        return history[group.index]

    merged = diff_script_text(current, group.text, diff)
    if merged is None:
        logger.debug(f"Entries {oldest_index}..{group.index} cancel out; dropping group")
        return None

    logger.debug(
        f"Merged entries {oldest_index}..{group.index} into one entry @ {group.time}"
    )
    return HistoryEntry(
        timestamp=group.time,
        editor_version=group.version,
        changes=merged.changes,
    )


def collapse_history(
    history: Sequence[HistoryEntry],
    text: ScriptText,
    options: CollapseHistoryOptions,
    diff: DiffFn,
    patch: PatchFn,
) -> List[HistoryEntry]:
    """
    Return a shorter history equivalent to `history` at `options.interval` granularity.

    `text` is the current project snapshot, i.e. the state after the newest
    entry. Neither `history` nor `text` is modified; on error nothing is returned.
    """
    entries = list(history)
    _check_history(entries, options)

    interval = options.interval
    min_time = 0 if options.min_time is None else options.min_time
    max_time = entries[-1].timestamp if options.max_time is None else options.max_time

    # Built newest first, reversed on return.
    collapsed: List[HistoryEntry] = []
    current: ScriptText = dict(text)
    group: Optional[_Group] = None

    def emit(entry: Optional[HistoryEntry]) -> None:
        if entry is not None:
            collapsed.append(entry)

    for i in range(len(entries) - 1, -1, -1):
        entry = entries[i]

        if entry.timestamp > max_time:
            collapsed.append(entry)
            current = apply_diff(current, entry, patch)
            continue

        if entry.timestamp < min_time:
            if group is not None:
                emit(_flush(entries, group, i + 1, current, diff))
                group = None
            collapsed.append(entry)
            continue

        if group is not None and group.time - entry.timestamp <= interval:
            current = apply_diff(current, entry, patch)
            continue

        if group is not None:
            emit(_flush(entries, group, i + 1, current, diff))

        group = _Group(
            index=i,
            time=entry.timestamp,
            version=entry.editor_version,
            text=dict(current),
        )
        current = apply_diff(current, entry, patch)

    if group is not None:
        emit(_flush(entries, group, 0, current, diff))

    collapsed.reverse()
    logger.info(
        f"Collapsed history from {len(entries)} to {len(collapsed)} entries "
        f"(interval={interval}ms, window=[{min_time}, {max_time}])"
    )
    return collapsed
