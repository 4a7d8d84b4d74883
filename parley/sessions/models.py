"""Session and persona models."""

from datetime import UTC, datetime
from enum import Enum
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict, Field


def utc_now() -> datetime:
    """Return current UTC time."""
    return datetime.now(UTC)


class SessionStatus(str, Enum):
    """Lifecycle status of a call/meeting session."""

    SCHEDULED = "scheduled"
    ACTIVE = "active"
    PROCESSING = "processing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Session(BaseModel):
    """A single live call/meeting instance.

    The session id doubles as the call id on the video transport and the
    channel id on the chat platform.
    """

    model_config = ConfigDict(frozen=False, validate_assignment=True)

    session_id: str = Field(..., min_length=1, description="Session / call identifier")
    persona_id: str = Field(..., min_length=1, description="Owning persona")
    status: SessionStatus = Field(
        default=SessionStatus.SCHEDULED, description="Lifecycle status"
    )
    started_at: datetime | None = Field(default=None, description="When the call went live")
    ended_at: datetime | None = Field(default=None, description="When the call ended")
    transcript_url: str | None = Field(default=None, description="Transcript reference")
    recording_url: str | None = Field(default=None, description="Recording reference")
    summary: str | None = Field(
        default=None, description="Post-session summary written by the summary workflow"
    )


class PersonaIdentity(BaseModel):
    """How a persona appears in the chat platform's user directory."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    image: str | None = None


class Persona(BaseModel):
    """A named AI identity with free-text behavioral instructions.

    Instructions are opaque: they are only ever concatenated with the
    policy wrapper, never rewritten.
    """

    model_config = ConfigDict(frozen=False, validate_assignment=True)

    persona_id: str = Field(..., min_length=1, description="Persona identifier")
    name: str = Field(..., description="Display name")
    instructions: str = Field(default="", description="Tone, scope and ethics instructions")

    def identity(
        self,
        avatar_base_url: str = "https://api.dicebear.com/9.x",
        avatar_variant: str = "botttsNeutral",
    ) -> PersonaIdentity:
        """Build the chat identity, with an avatar seeded by the display name."""
        return PersonaIdentity(
            id=self.persona_id,
            name=self.name,
            image=avatar_uri(self.name, avatar_variant, avatar_base_url),
        )


def avatar_uri(seed: str, variant: str, base_url: str) -> str:
    """Deterministic avatar URL on the external avatar service."""
    return f"{base_url.rstrip('/')}/{variant}/svg?seed={quote(seed)}"
