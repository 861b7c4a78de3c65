"""
Unit tests for the in-process session store.
"""

import pytest

from config import config

from executor.execute import SessionContext
from memory.session_store import SessionStore
from schemas.analysis import AnalysisResult, ChannelDrillDown, DeepVideoReport


@pytest.fixture
def store():
    return SessionStore()


class TestSessionStore:
    """Credentials and last results per session."""

    def test_unknown_session(self, store):
        assert store.get("nope") is None
        assert len(store) == 0

    def test_set_credentials_creates_session(self, store, full_context):
        state = store.set_credentials("s1", full_context)

        assert state.context is full_context
        assert state.last_analysis is None
        assert store.get("s1") is state
        assert len(store) == 1

    def test_results_survive_credential_change(self, store, full_context, model_only_context):
        store.set_credentials("s1", full_context)
        store.store_analysis("s1", AnalysisResult(summary="first"))

        store.set_credentials("s1", model_only_context)

        state = store.get("s1")
        assert state.context is model_only_context
        assert state.last_analysis.summary == "first"

    def test_store_results(self, store, full_context):
        store.set_credentials("s1", full_context)
        store.store_analysis("s1", AnalysisResult(summary="a"))
        store.store_video_report("s1", DeepVideoReport(video_id="v1"))

        state = store.get("s1")
        assert state.last_analysis.summary == "a"
        assert state.last_video_report.video_id == "v1"

    def test_results_for_unknown_session_are_dropped(self, store):
        store.store_analysis("ghost", AnalysisResult())
        store.store_drill_down("ghost", "X", ChannelDrillDown())
        assert store.get("ghost") is None

    def test_states_are_replaced_not_mutated(self, store, full_context):
        before = store.set_credentials("s1", full_context)
        store.store_analysis("s1", AnalysisResult(summary="a"))

        assert before.last_analysis is None
        assert store.get("s1") is not before

    def test_drill_down_cache_evicts_oldest(self, store, full_context):
        store.set_credentials("s1", full_context)
        for i in range(SessionStore.MAX_DRILL_DOWNS + 2):
            store.store_drill_down("s1", f"channel-{i}", ChannelDrillDown(channel_name=f"channel-{i}"))

        drill_downs = store.get("s1").drill_downs
        assert len(drill_downs) == SessionStore.MAX_DRILL_DOWNS
        assert "channel-0" not in drill_downs
        assert "channel-1" not in drill_downs
        assert f"channel-{SessionStore.MAX_DRILL_DOWNS + 1}" in drill_downs

    def test_repeat_drill_down_replaces_entry(self, store, full_context):
        store.set_credentials("s1", full_context)
        store.store_drill_down("s1", "X", ChannelDrillDown(originator_score=10))
        store.store_drill_down("s1", "X", ChannelDrillDown(originator_score=90))

        drill_downs = store.get("s1").drill_downs
        assert len(drill_downs) == 1
        assert drill_downs["X"].originator_score == 90

    def test_delete_and_clear(self, store, full_context):
        store.set_credentials("s1", full_context)
        store.set_credentials("s2", SessionContext(model_api_key="k"))

        assert store.delete("s1") is True
        assert store.delete("s1") is False
        store.clear()
        assert len(store) == 0

    def test_oldest_session_is_evicted(self, full_context):
        store = SessionStore(max_sessions=2)
        for session_id in ("s1", "s2", "s3"):
            store.set_credentials(session_id, full_context)

        assert len(store) == 2
        assert store.get("s1") is None
        assert store.get("s3") is not None

    def test_recent_activity_protects_session(self, full_context):
        store = SessionStore(max_sessions=2)
        store.set_credentials("s1", full_context)
        store.set_credentials("s2", full_context)
        store.store_analysis("s1", AnalysisResult(summary="kept"))

        store.set_credentials("s3", full_context)

        assert store.get("s2") is None
        assert store.get("s1").last_analysis.summary == "kept"

    def test_session_cap_defaults_to_config(self, monkeypatch):
        monkeypatch.setattr(config.server, "max_sessions", 42)
        assert SessionStore().max_sessions == 42
