"""Inbound webhook events.

The dispatcher lives in parley.events.dispatcher; it depends on the
handlers, which in turn consume these models.
"""

from parley.events.models import (
    SUPPORTED_EVENT_TYPES,
    ChatMessageEvent,
    InboundEvent,
    ParticipantLeftEvent,
    RecordingReadyEvent,
    SessionEndedEvent,
    SessionStartedEvent,
    TranscriptReadyEvent,
    parse_event,
)

__all__ = [
    "SUPPORTED_EVENT_TYPES",
    "ChatMessageEvent",
    "InboundEvent",
    "ParticipantLeftEvent",
    "RecordingReadyEvent",
    "SessionEndedEvent",
    "SessionStartedEvent",
    "TranscriptReadyEvent",
    "parse_event",
]
