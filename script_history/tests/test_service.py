"""
Tests for the history service and its configuration.
"""
import pytest

from script_history.config import DEFAULT_INTERVAL_MS, get_settings, reset_settings
from script_history.models import CollapseHistoryOptions, HistoryFile
from script_history.patching import FullTextPatchStrategy, LinePatchStrategy
from script_history import service as service_module
from script_history.service import HistoryService, get_history_service, set_history_service


class FakeClock:
    def __init__(self, start=1000, step=10):
        self.now = start
        self.step = step

    def __call__(self):
        value = self.now
        self.now += self.step
        return value


@pytest.fixture
def svc():
    return HistoryService(strategy=LinePatchStrategy(), clock=FakeClock(), editor_version="3.0.0")


def _edits():
    return [
        {"main.ts": "a\n"},
        {"main.ts": "a\nb\n"},
        {"main.ts": "a\nb\n", "pxt.json": "{}"},
        {"main.ts": "b\n", "pxt.json": "{}"},
    ]


def _record_all(svc, snapshots):
    history = HistoryFile()
    previous = {}
    for snapshot in snapshots:
        history = svc.record_edit(history, previous, snapshot)
        previous = snapshot
    return history


class TestHistoryService:

    def test_record_edit_appends_entries(self, svc):
        history = _record_all(svc, _edits())

        assert [e.timestamp for e in history.entries] == [1000, 1010, 1020, 1030]
        assert all(e.editor_version == "3.0.0" for e in history.entries)

    def test_record_edit_without_changes_keeps_history(self, svc):
        history = _record_all(svc, _edits())
        same = svc.record_edit(history, {"main.ts": "b\n"}, {"main.ts": "b\n", "notes.md": "x"})
        assert same is history

    def test_record_edit_keeps_log_sorted(self):
        svc = HistoryService(strategy=LinePatchStrategy(), clock=FakeClock(start=500, step=-100))
        history = HistoryFile()
        history = svc.record_edit(history, {}, {"main.ts": "a"})
        history = svc.record_edit(history, {"main.ts": "a"}, {"main.ts": "b"})
        assert [e.timestamp for e in history.entries] == [500, 500]

    def test_restore(self, svc):
        snapshots = _edits()
        history = _record_all(svc, snapshots)
        current = snapshots[-1]

        assert svc.restore(current, history.entries, 1030) == snapshots[3]
        assert svc.restore(current, history.entries, 1025) == snapshots[2]
        assert svc.restore(current, history.entries, 1000) == snapshots[0]
        assert svc.restore(current, history.entries, 0) == {}

    def test_collapse_then_restore(self, svc):
        snapshots = _edits()
        history = _record_all(svc, snapshots)
        current = snapshots[-1]

        compacted = svc.collapse(history.entries, current, CollapseHistoryOptions(interval=15))

        assert [e.timestamp for e in compacted] == [1010, 1030]
        assert svc.restore(current, compacted, 1010) == snapshots[1]
        assert svc.restore(current, compacted, 999) == {}

    def test_collapse_uses_configured_interval(self, svc):
        history = _record_all(svc, _edits())
        compacted = svc.collapse(history.entries, _edits()[-1])
        # default interval spans the whole log
        assert len(compacted) == 1
        assert compacted[0].timestamp == 1030

    def test_apply_and_diff_use_strategy(self):
        svc = HistoryService(strategy=FullTextPatchStrategy(), clock=lambda: 5, editor_version="1")
        entry = svc.diff({"main.ts": "old"}, {"main.ts": "new"})
        assert entry.changes[0].patch == "old"
        assert svc.apply({"main.ts": "new"}, entry) == {"main.ts": "old"}

    def test_explicit_empty_editor_version_is_kept(self):
        svc = HistoryService(strategy=LinePatchStrategy(), clock=lambda: 1, editor_version="")
        assert svc.editor_version == ""
        assert svc.diff({}, {"main.ts": "x"}).editor_version == ""

    def test_singleton(self, monkeypatch):
        monkeypatch.setattr(service_module, "_svc", None)
        first = get_history_service()
        assert get_history_service() is first
        assert isinstance(first.strategy, LinePatchStrategy)

        replacement = HistoryService(strategy=FullTextPatchStrategy())
        set_history_service(replacement)
        assert get_history_service() is replacement
        set_history_service(None)


class TestSettings:

    def test_defaults(self):
        settings = get_settings()
        assert settings.editor_version == "0.0.0"
        assert settings.interval_ms == DEFAULT_INTERVAL_MS
        assert settings.patch_backend == "lines"

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("SCRIPT_HISTORY_EDITOR_VERSION", "5.2.1")
        monkeypatch.setenv("SCRIPT_HISTORY_INTERVAL_MS", "60000")
        monkeypatch.setenv("SCRIPT_HISTORY_PATCH_BACKEND", " Full ")
        reset_settings()

        settings = get_settings()
        assert settings.editor_version == "5.2.1"
        assert settings.interval_ms == 60000
        assert settings.patch_backend == "full"
        assert isinstance(HistoryService().strategy, FullTextPatchStrategy)

    def test_bad_interval_falls_back(self, monkeypatch):
        monkeypatch.setenv("SCRIPT_HISTORY_INTERVAL_MS", "five minutes")
        reset_settings()
        assert get_settings().interval_ms == DEFAULT_INTERVAL_MS
