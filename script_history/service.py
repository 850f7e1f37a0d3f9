"""History service bundling a patch strategy with clock and editor version."""
from __future__ import annotations

import logging
from typing import Callable, List, Optional, Sequence

from script_history.applier import apply_diff
from script_history.compactor import collapse_history
from script_history.config import get_settings
from script_history.differ import now_ms, diff_script_text
from script_history.models import CollapseHistoryOptions, HistoryEntry, HistoryFile, ScriptText
from script_history.patching import PatchStrategy, patch_strategy_from_env

logger = logging.getLogger(__name__)


class HistoryService:
    def __init__(
        self,
        strategy: Optional[PatchStrategy] = None,
        clock: Optional[Callable[[], int]] = None,
        editor_version: Optional[str] = None,
    ) -> None:
        self.strategy = strategy or patch_strategy_from_env()
        self._clock = clock or now_ms
        self.editor_version = get_settings().editor_version if editor_version is None else editor_version

    def diff(self, old_version: ScriptText, new_version: ScriptText) -> Optional[HistoryEntry]:
        return diff_script_text(
            old_version,
            new_version,
            self.strategy.diff,
            clock=self._clock,
            editor_version=self.editor_version,
        )

    def apply(self, text: ScriptText, entry: HistoryEntry) -> ScriptText:
        return apply_diff(text, entry, self.strategy.patch)

    def collapse(
        self,
        history: Sequence[HistoryEntry],
        text: ScriptText,
        options: Optional[CollapseHistoryOptions] = None,
    ) -> List[HistoryEntry]:
        options = options or CollapseHistoryOptions(interval=get_settings().interval_ms)
        return collapse_history(history, text, options, self.strategy.diff, self.strategy.patch)

    def record_edit(self, history: HistoryFile, previous: ScriptText, current: ScriptText) -> HistoryFile:
        """Append the change from `previous` to `current`; returns a new HistoryFile."""
        entry = self.diff(previous, current)
        if entry is None:
            return history
        if history.entries and entry.timestamp < history.entries[-1].timestamp:
            # Keep the log sorted even if the clock went backwards.
            entry = entry.model_copy(update={"timestamp": history.entries[-1].timestamp})
        logger.debug(f"Recorded {len(entry.changes)} file change(s) @ {entry.timestamp}")
        return HistoryFile(entries=[*history.entries, entry])

    def restore(self, text: ScriptText, history: Sequence[HistoryEntry], timestamp: int) -> ScriptText:
        """
        Snapshot of the project as it was at `timestamp`.

        Rolls `text` back through every entry newer than `timestamp`.
        """
        current = dict(text)
        for entry in reversed(list(history)):
            if entry.timestamp <= timestamp:
                break
            current = self.apply(current, entry)
        return current


_svc: Optional[HistoryService] = None


def get_history_service() -> HistoryService:
    global _svc
    if _svc is None:
        _svc = HistoryService()
    return _svc


def set_history_service(service: Optional[HistoryService]) -> None:
    global _svc
    _svc = service
