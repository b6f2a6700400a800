"""
Learning session tracking.

A session is opened at study/review start, collects an append-only log of
timestamped actions and is closed exactly once. Closed sessions are never
reopened.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Callable, Iterable, Optional, Union

from loguru import logger

from wordbank.clock import ensure_utc, utc_now
from wordbank.errors import ConflictError, NotFoundError
from wordbank.schemas import (
    LearningSession,
    SessionAction,
    SessionActionKind,
    SessionType,
)
from wordbank.store.database import RecordStore
from wordbank.store.models import LearningSessionRow
from wordbank.store.repository import RecordRepository


class LearningSessionRepository(RecordRepository[LearningSession]):
    model = LearningSessionRow
    schema = LearningSession
    resource = "LearningSession"

    def get_by_type(self, session_type: Union[SessionType, str]) -> list[LearningSession]:
        value = SessionType(session_type).value
        with self.store.session_scope() as session:
            return self._fetch(session, LearningSessionRow.type == value, order_by=LearningSessionRow.started_at)

    def get_ended(self) -> list[LearningSession]:
        with self.store.session_scope() as session:
            return self._fetch(session, LearningSessionRow.ended_at.isnot(None), order_by=LearningSessionRow.ended_at)

    def get_active(self) -> list[LearningSession]:
        with self.store.session_scope() as session:
            return self._fetch(session, LearningSessionRow.ended_at.is_(None), order_by=LearningSessionRow.started_at)


class LearningSessionTracker:
    """
    Records study/review sessions for statistics.

    Concurrent active sessions are allowed; nothing enforces a single
    global active session.
    """

    def __init__(self, store: RecordStore, clock: Callable[[], datetime] = utc_now):
        self.sessions = LearningSessionRepository(store)
        self._clock = clock

    def _now(self) -> datetime:
        return ensure_utc(self._clock())

    def _require(self, session_id: str) -> LearningSession:
        session = self.sessions.get_by_id(session_id)
        if session is None:
            raise NotFoundError("LearningSession", session_id)
        return session

    def start(
        self,
        session_type: Union[SessionType, str],
        word_ids: Iterable[str] = ()
    ) -> LearningSession:
        """
        Create and persist a new active session.

        Args:
            session_type: study or review
            word_ids: Words touched by this session

        Returns:
            The new session (ended_at=None, duration_ms=0)
        """
        session = LearningSession(
            type=SessionType(session_type),
            word_ids=list(word_ids),
            started_at=self._now(),
        )
        self.sessions.create(session)
        logger.info(f"Created {session.type} session {session.id} ({len(session.word_ids)} words)")
        return session

    def end(self, session_id: str) -> LearningSession:
        """
        Close a session, fixing ended_at and duration_ms.

        Raises:
            NotFoundError: if the session does not exist
            ConflictError: if the session has already ended
        """
        session = self._require(session_id)
        if session.ended_at is not None:
            raise ConflictError(f"LearningSession {session_id} already ended")

        ended_at = max(self._now(), session.started_at)
        duration_ms = int((ended_at - session.started_at).total_seconds() * 1000)
        ended = session.model_copy(update={"ended_at": ended_at, "duration_ms": duration_ms})
        self.sessions.update(ended)

        logger.info(f"Ended session {session_id}: duration_ms={duration_ms} actions={len(ended.actions)}")
        return ended

    def append_action(
        self,
        session_id: str,
        kind: Union[SessionActionKind, str],
        word_id: Optional[str] = None,
        metadata: Optional[dict[str, Any]] = None
    ) -> SessionAction:
        """
        Append an action to an active session's log.

        The action is timestamped here, never by the caller, and never
        earlier than the previous action in the log.

        Raises:
            NotFoundError: if the session does not exist
            ConflictError: if the session has already ended
        """
        session = self._require(session_id)
        if session.ended_at is not None:
            raise ConflictError(f"LearningSession {session_id} already ended")

        timestamp = self._now()
        if session.actions:
            timestamp = max(timestamp, session.actions[-1].timestamp)

        action = SessionAction(
            kind=SessionActionKind(kind),
            timestamp=timestamp,
            word_id=word_id,
            metadata=metadata or {},
        )
        self.sessions.update(session.model_copy(update={"actions": [*session.actions, action]}))

        logger.debug(f"Added {action.kind} action to session {session_id}")
        return action

    # ---- Queries ----

    def get_by_id(self, session_id: str) -> Optional[LearningSession]:
        return self.sessions.get_by_id(session_id)

    def get_all(self) -> list[LearningSession]:
        return self.sessions.get_all()

    def get_by_type(self, session_type: Union[SessionType, str]) -> list[LearningSession]:
        return self.sessions.get_by_type(session_type)

    def get_active_sessions(self) -> list[LearningSession]:
        return self.sessions.get_active()

    def get_ended_sessions(self) -> list[LearningSession]:
        return self.sessions.get_ended()

    def delete(self, session_id: str) -> None:
        self.sessions.delete(session_id)
