"""In-memory implementations of SessionStore and PersonaStore."""

import asyncio
from collections.abc import Collection
from typing import Any

from parley.sessions.models import Persona, Session, SessionStatus
from parley.sessions.store import PersonaStore, SessionStore


class InMemorySessionStore(SessionStore):
    """In-memory SessionStore for testing and development.

    Guarded updates run under a single asyncio.Lock, which gives the same
    check-and-write atomicity a conditional UPDATE gives in PostgreSQL.
    """

    def __init__(self) -> None:
        self._sessions: dict[str, Session] = {}
        self._lock = asyncio.Lock()

    async def get(self, session_id: str) -> Session | None:
        session = self._sessions.get(session_id)
        return session.model_copy() if session else None

    async def save(self, session: Session) -> str:
        self._sessions[session.session_id] = session.model_copy()
        return session.session_id

    async def get_with_status(
        self, session_id: str, status: SessionStatus
    ) -> Session | None:
        session = self._sessions.get(session_id)
        if session is None or session.status != status:
            return None
        return session.model_copy()

    async def compare_and_set_status(
        self,
        session_id: str,
        expected: Collection[SessionStatus],
        target: SessionStatus,
        **fields: Any,
    ) -> Session | None:
        async with self._lock:
            session = self._sessions.get(session_id)
            if session is None or session.status not in expected:
                return None
            updated = session.model_copy(update={**fields, "status": target})
            self._sessions[session_id] = updated
            return updated.model_copy()

    async def update_fields(self, session_id: str, **fields: Any) -> Session | None:
        async with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                return None
            updated = session.model_copy(update=fields)
            self._sessions[session_id] = updated
            return updated.model_copy()


class InMemoryPersonaStore(PersonaStore):
    """In-memory PersonaStore for testing and development."""

    def __init__(self) -> None:
        self._personas: dict[str, Persona] = {}

    async def get(self, persona_id: str) -> Persona | None:
        persona = self._personas.get(persona_id)
        return persona.model_copy() if persona else None

    async def save(self, persona: Persona) -> str:
        self._personas[persona.persona_id] = persona.model_copy()
        return persona.persona_id
