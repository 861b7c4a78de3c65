"""
In-process session store.

Handles, per browser session:
- Credentials (model key, optional platform key)
- The last result of each analysis variant

Lives for the lifetime of the server process and is owned by the HTTP
layer. Nothing here is written to durable storage. Values are replaced
wholesale, never mutated in place.
"""

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Optional

from config import config
from executor.execute import SessionContext
from schemas.analysis import AnalysisResult, ChannelDrillDown, DeepVideoReport

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionState:
    """Everything remembered for one session."""

    context: SessionContext
    last_analysis: Optional[AnalysisResult] = None
    last_video_report: Optional[DeepVideoReport] = None
    drill_downs: dict[str, ChannelDrillDown] = field(default_factory=dict)
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class SessionStore:
    """
    Process-wide session store.

    All methods are synchronous and run on the event loop thread, so no
    locking is needed. Sessions are kept in least-recently-updated order;
    once more than max_sessions exist the stalest one is evicted.
    """

    # Drill-downs cached per session, oldest evicted first
    MAX_DRILL_DOWNS = 20

    def __init__(self, max_sessions: Optional[int] = None) -> None:
        self.max_sessions = config.server.max_sessions if max_sessions is None else max_sessions
        self._sessions: dict[str, SessionState] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def get(self, session_id: str) -> Optional[SessionState]:
        return self._sessions.get(session_id)

    def set_credentials(self, session_id: str, context: SessionContext) -> SessionState:
        """
        Store credentials, keeping any results already held by the session.
        """
        existing = self._sessions.pop(session_id, None)
        if existing is None:
            state = SessionState(context=context)
            logger.info(f"Session created: {session_id}")
        else:
            state = replace(existing, context=context, updated_at=datetime.now(timezone.utc))
            logger.info(f"Session credentials replaced: {session_id}")
        self._sessions[session_id] = state
        self._evict()
        return state

    def store_analysis(self, session_id: str, result: AnalysisResult) -> None:
        self._update(session_id, last_analysis=result)

    def store_video_report(self, session_id: str, report: DeepVideoReport) -> None:
        self._update(session_id, last_video_report=report)

    def store_drill_down(self, session_id: str, channel_name: str, drill_down: ChannelDrillDown) -> None:
        state = self._sessions.get(session_id)
        if state is None:
            return
        drill_downs = {k: v for k, v in state.drill_downs.items() if k != channel_name}
        drill_downs[channel_name] = drill_down
        while len(drill_downs) > self.MAX_DRILL_DOWNS:
            drill_downs.pop(next(iter(drill_downs)))
        self._update(session_id, drill_downs=drill_downs)

    def _update(self, session_id: str, **changes) -> None:
        state = self._sessions.get(session_id)
        if state is None:
            # Session was deleted while the request was in flight
            logger.debug(f"Dropping result for unknown session: {session_id}")
            return
        del self._sessions[session_id]
        self._sessions[session_id] = replace(
            state, updated_at=datetime.now(timezone.utc), **changes
        )

    def _evict(self) -> None:
        while len(self._sessions) > self.max_sessions:
            stale_id = next(iter(self._sessions))
            del self._sessions[stale_id]
            logger.info(f"Session evicted: {stale_id}")

    def delete(self, session_id: str) -> bool:
        removed = self._sessions.pop(session_id, None) is not None
        if removed:
            logger.info(f"Session deleted: {session_id}")
        return removed

    def clear(self) -> None:
        self._sessions.clear()
