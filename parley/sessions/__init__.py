"""Session lifecycle: models, stores and the status state machine."""

from parley.sessions.lifecycle import (
    ALLOWED_TRANSITIONS,
    LifecycleManager,
    can_transition,
)
from parley.sessions.models import (
    Persona,
    PersonaIdentity,
    Session,
    SessionStatus,
    avatar_uri,
    utc_now,
)
from parley.sessions.store import PersonaStore, SessionStore

__all__ = [
    "ALLOWED_TRANSITIONS",
    "LifecycleManager",
    "can_transition",
    "Persona",
    "PersonaIdentity",
    "Session",
    "SessionStatus",
    "avatar_uri",
    "utc_now",
    "PersonaStore",
    "SessionStore",
]
