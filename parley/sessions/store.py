"""SessionStore and PersonaStore abstract interfaces."""

from abc import ABC, abstractmethod
from collections.abc import Collection
from typing import Any

from parley.sessions.models import Persona, Session, SessionStatus


class SessionStore(ABC):
    """Abstract interface for session storage.

    Status changes go through compare_and_set_status so that concurrent
    deliveries of the same event converge to a single transition.
    """

    @abstractmethod
    async def get(self, session_id: str) -> Session | None:
        """Get a session by ID."""
        pass

    @abstractmethod
    async def save(self, session: Session) -> str:
        """Insert or replace a session, returning its ID."""
        pass

    @abstractmethod
    async def get_with_status(
        self, session_id: str, status: SessionStatus
    ) -> Session | None:
        """Get a session only if it is currently in the given status."""
        pass

    @abstractmethod
    async def compare_and_set_status(
        self,
        session_id: str,
        expected: Collection[SessionStatus],
        target: SessionStatus,
        **fields: Any,
    ) -> Session | None:
        """Atomically move a session to target if its status is in expected.

        Extra keyword fields (e.g. started_at) are written in the same update.

        Returns:
            The updated session, or None if no row matched the guard
        """
        pass

    @abstractmethod
    async def update_fields(self, session_id: str, **fields: Any) -> Session | None:
        """Set fields regardless of status; None if the session doesn't exist."""
        pass


class PersonaStore(ABC):
    """Abstract interface for persona storage."""

    @abstractmethod
    async def get(self, persona_id: str) -> Persona | None:
        """Get a persona by ID."""
        pass

    @abstractmethod
    async def save(self, persona: Persona) -> str:
        """Insert or replace a persona, returning its ID."""
        pass
