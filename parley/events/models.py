"""Inbound event models.

Each transport event kind maps to one frozen model carrying only the fields
its handler needs. parse_event reads the wire envelope and returns the
model, or None for kinds this service does not handle.
"""

from collections.abc import Callable
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from parley.api.exceptions import InvalidRequestError


class _Event(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    session_id: str = Field(..., min_length=1)


class SessionStartedEvent(_Event):
    """call.session_started"""


class ParticipantLeftEvent(_Event):
    """call.session_participant_left"""


class SessionEndedEvent(_Event):
    """call.session_ended"""


class TranscriptReadyEvent(_Event):
    """call.transcription_ready"""

    transcript_url: str = Field(..., min_length=1)


class RecordingReadyEvent(_Event):
    """call.recording_ready"""

    recording_url: str = Field(..., min_length=1)


class ChatMessageEvent(BaseModel):
    """message.new

    The channel id is the session id. message_id is absent on some
    deliveries, in which case the event cannot be deduplicated.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    message_id: str | None = None
    author_id: str = Field(..., min_length=1)
    channel_id: str = Field(..., min_length=1)
    text: str = Field(..., min_length=1)

    @property
    def session_id(self) -> str:
        return self.channel_id


InboundEvent = (
    SessionStartedEvent
    | ParticipantLeftEvent
    | SessionEndedEvent
    | TranscriptReadyEvent
    | RecordingReadyEvent
    | ChatMessageEvent
)


def _get(payload: Any, *path: str) -> Any:
    """Walk nested dicts, returning None on the first missing step."""
    for key in path:
        if not isinstance(payload, dict):
            return None
        payload = payload.get(key)
    return payload


def _call_id_from_cid(payload: dict[str, Any]) -> str | None:
    """call_cid is "<type>:<id>"; the id is the session id."""
    cid = payload.get("call_cid")
    if not isinstance(cid, str):
        return None
    parts = cid.split(":")
    return parts[1] if len(parts) > 1 else None


_PARSERS: dict[str, Callable[[dict[str, Any]], InboundEvent]] = {
    "call.session_started": lambda p: SessionStartedEvent(
        session_id=_get(p, "call", "custom", "meetingId"),
    ),
    "call.session_participant_left": lambda p: ParticipantLeftEvent(
        session_id=_call_id_from_cid(p),
    ),
    "call.session_ended": lambda p: SessionEndedEvent(
        session_id=_get(p, "call", "custom", "meetingId"),
    ),
    "call.transcription_ready": lambda p: TranscriptReadyEvent(
        session_id=_call_id_from_cid(p),
        transcript_url=_get(p, "call_transcription", "url"),
    ),
    "call.recording_ready": lambda p: RecordingReadyEvent(
        session_id=_call_id_from_cid(p),
        recording_url=_get(p, "call_recording", "url"),
    ),
    "message.new": lambda p: ChatMessageEvent(
        message_id=_get(p, "message", "id") or None,
        author_id=_get(p, "user", "id"),
        channel_id=p.get("channel_id"),
        text=_get(p, "message", "text"),
    ),
}

SUPPORTED_EVENT_TYPES = frozenset(_PARSERS)


def parse_event(payload: dict[str, Any]) -> InboundEvent | None:
    """Build the event model for a decoded webhook body.

    Returns:
        The event, or None when the type is missing or not handled

    Raises:
        InvalidRequestError: The type is handled but required fields are
            missing or malformed
    """
    event_type = payload.get("type")
    parser = _PARSERS.get(event_type) if isinstance(event_type, str) else None
    if parser is None:
        return None

    try:
        return parser(payload)
    except ValidationError as e:
        raise InvalidRequestError("Missing required fields") from e
