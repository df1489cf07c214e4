"""
Session persistence.

A session is loaded and saved as one unit. Reads are scoped to an
owner: a session that belongs to someone else looks exactly like a
missing one. Stored sessions are copies, so mutating a loaded session
has no effect until it is saved.
"""

import logging
from typing import Protocol

from prepcoach.core.exceptions import PersistenceError
from prepcoach.models.interview import (
    InterviewSession,
    InterviewType,
    Ownable,
    SessionStatus,
)

logger = logging.getLogger(__name__)


class SessionStore(Protocol):
    """Atomic per-session load/save, scoped to an owner."""

    async def get(self, session_id: str, owner_id: str) -> InterviewSession | None: ...

    async def save(self, session: InterviewSession) -> None: ...

    async def delete(self, session_id: str, owner_id: str) -> bool: ...

    async def list_for_owner(
        self,
        owner_id: str,
        status: SessionStatus | None = None,
        interview_type: InterviewType | None = None,
        skip: int = 0,
        limit: int = 20,
    ) -> list[InterviewSession]: ...

    async def count_for_owner(
        self,
        owner_id: str,
        status: SessionStatus | None = None,
        interview_type: InterviewType | None = None,
    ) -> int: ...

    async def recent_question_texts(
        self,
        owner_id: str,
        interview_type: InterviewType,
        session_limit: int = 5,
    ) -> list[str]: ...


def is_owned_by(resource: Ownable, owner_id: str) -> bool:
    return resource.get_owner_id() == owner_id


class InMemorySessionStore:
    """
    Dict-backed SessionStore.

    Suitable for development and tests; swap for a document store in
    production.
    """

    def __init__(self):
        self._sessions: dict[str, InterviewSession] = {}

    async def get(self, session_id: str, owner_id: str) -> InterviewSession | None:
        session = self._sessions.get(session_id)
        if session is None or not is_owned_by(session, owner_id):
            return None
        return session.model_copy(deep=True)

    async def save(self, session: InterviewSession) -> None:
        existing = self._sessions.get(session.id)
        if existing is not None and not is_owned_by(existing, session.get_owner_id()):
            raise PersistenceError(f"Session {session.id} belongs to another owner")
        self._sessions[session.id] = session.model_copy(deep=True)

    async def delete(self, session_id: str, owner_id: str) -> bool:
        session = self._sessions.get(session_id)
        if session is None or not is_owned_by(session, owner_id):
            return False
        del self._sessions[session_id]
        return True

    def _filtered(
        self,
        owner_id: str,
        status: SessionStatus | None,
        interview_type: InterviewType | None,
    ) -> list[InterviewSession]:
        sessions = [
            session for session in self._sessions.values()
            if is_owned_by(session, owner_id)
            and (status is None or session.status == status)
            and (interview_type is None or session.type == interview_type)
        ]
        return sorted(sessions, key=lambda s: s.created_at, reverse=True)

    async def list_for_owner(
        self,
        owner_id: str,
        status: SessionStatus | None = None,
        interview_type: InterviewType | None = None,
        skip: int = 0,
        limit: int = 20,
    ) -> list[InterviewSession]:
        sessions = self._filtered(owner_id, status, interview_type)
        return [session.model_copy(deep=True) for session in sessions[skip:skip + limit]]

    async def count_for_owner(
        self,
        owner_id: str,
        status: SessionStatus | None = None,
        interview_type: InterviewType | None = None,
    ) -> int:
        return len(self._filtered(owner_id, status, interview_type))

    async def recent_question_texts(
        self,
        owner_id: str,
        interview_type: InterviewType,
        session_limit: int = 5,
    ) -> list[str]:
        """Question texts from the owner's newest sessions of a type, de-duplicated."""
        texts: list[str] = []
        seen: set[str] = set()
        for session in self._filtered(owner_id, None, interview_type)[:session_limit]:
            for text in session.question_texts():
                if text not in seen:
                    seen.add(text)
                    texts.append(text)
        return texts
