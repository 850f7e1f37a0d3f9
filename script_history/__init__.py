"""Script history - backward-patch history logs and their compaction."""

from .models import (
    ScriptText,
    FileAddedChange,
    FileRemovedChange,
    FileEditedChange,
    FileChange,
    HistoryEntry,
    HistoryFile,
    CollapseHistoryOptions,
)
from .errors import HistoryError, CorruptHistory, InvalidArgument
from .tracking import is_tracked
from .patching import PatchStrategy, LinePatchStrategy, FullTextPatchStrategy, patch_strategy_from_env
from .differ import diff_script_text
from .applier import apply_diff, apply_history
from .compactor import collapse_history
from .service import HistoryService, get_history_service, set_history_service

__all__ = [
    "ScriptText",
    "FileAddedChange",
    "FileRemovedChange",
    "FileEditedChange",
    "FileChange",
    "HistoryEntry",
    "HistoryFile",
    "CollapseHistoryOptions",
    "HistoryError",
    "CorruptHistory",
    "InvalidArgument",
    "is_tracked",
    "PatchStrategy",
    "LinePatchStrategy",
    "FullTextPatchStrategy",
    "patch_strategy_from_env",
    "diff_script_text",
    "apply_diff",
    "apply_history",
    "collapse_history",
    "HistoryService",
    "get_history_service",
    "set_history_service",
]
