from __future__ import annotations

from typing import Callable, List, Sequence, Tuple

import pytest

from script_history.config import reset_settings
from script_history.differ import diff_script_text
from script_history.models import HistoryEntry, ScriptText
from script_history.patching import LinePatchStrategy


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    for name in (
        "SCRIPT_HISTORY_EDITOR_VERSION",
        "SCRIPT_HISTORY_INTERVAL_MS",
        "SCRIPT_HISTORY_PATCH_BACKEND",
    ):
        monkeypatch.delenv(name, raising=False)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def strategy() -> LinePatchStrategy:
    return LinePatchStrategy()


@pytest.fixture
def build_history(strategy) -> Callable[..., Tuple[List[HistoryEntry], ScriptText]]:
    """
    Build a log from consecutive snapshots.

    Entry i takes snapshots[i + 1] back to snapshots[i] and is stamped with
    timestamps[i]. Returns (history, current snapshot).
    """
    def _build(snapshots: Sequence[ScriptText], timestamps: Sequence[int]):
        assert len(snapshots) == len(timestamps) + 1
        history = []
        for i, ts in enumerate(timestamps):
            entry = diff_script_text(
                snapshots[i],
                snapshots[i + 1],
                strategy.diff,
                clock=lambda ts=ts: ts,
                editor_version=f"1.0.{i}",
            )
            assert entry is not None
            history.append(entry)
        return history, dict(snapshots[-1])

    return _build
