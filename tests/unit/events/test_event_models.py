"""Unit tests for inbound event parsing."""

import pytest
from pydantic import ValidationError

from parley.api.exceptions import InvalidRequestError
from parley.events.models import (
    SUPPORTED_EVENT_TYPES,
    ChatMessageEvent,
    ParticipantLeftEvent,
    RecordingReadyEvent,
    SessionEndedEvent,
    SessionStartedEvent,
    TranscriptReadyEvent,
    parse_event,
)


class TestParseEvent:
    """Tests for parse_event."""

    def test_supported_types(self) -> None:
        assert SUPPORTED_EVENT_TYPES == {
            "call.session_started",
            "call.session_participant_left",
            "call.session_ended",
            "call.transcription_ready",
            "call.recording_ready",
            "message.new",
        }

    def test_session_started_reads_custom_meeting_id(self) -> None:
        event = parse_event(
            {"type": "call.session_started", "call": {"custom": {"meetingId": "m1"}}}
        )
        assert event == SessionStartedEvent(session_id="m1")

    def test_session_ended_reads_custom_meeting_id(self) -> None:
        event = parse_event(
            {"type": "call.session_ended", "call": {"custom": {"meetingId": "m1"}}}
        )
        assert event == SessionEndedEvent(session_id="m1")

    def test_participant_left_splits_call_cid(self) -> None:
        event = parse_event(
            {"type": "call.session_participant_left", "call_cid": "default:m1"}
        )
        assert event == ParticipantLeftEvent(session_id="m1")

    def test_transcription_ready(self) -> None:
        event = parse_event({
            "type": "call.transcription_ready",
            "call_cid": "default:m1",
            "call_transcription": {"url": "https://x/t.jsonl"},
        })
        assert event == TranscriptReadyEvent(
            session_id="m1", transcript_url="https://x/t.jsonl"
        )

    def test_recording_ready(self) -> None:
        event = parse_event({
            "type": "call.recording_ready",
            "call_cid": "default:m1",
            "call_recording": {"url": "https://x/r.mp4"},
        })
        assert event == RecordingReadyEvent(session_id="m1", recording_url="https://x/r.mp4")

    def test_message_new(self) -> None:
        event = parse_event({
            "type": "message.new",
            "channel_id": "m1",
            "user": {"id": "u1"},
            "message": {"id": "msg-1", "text": "What next?"},
        })
        assert event == ChatMessageEvent(
            message_id="msg-1", author_id="u1", channel_id="m1", text="What next?"
        )
        assert event.session_id == "m1"

    def test_message_new_without_id(self) -> None:
        event = parse_event({
            "type": "message.new",
            "channel_id": "m1",
            "user": {"id": "u1"},
            "message": {"text": "hi"},
        })
        assert isinstance(event, ChatMessageEvent)
        assert event.message_id is None

    @pytest.mark.parametrize("payload", [{}, {"type": "call.created"}, {"type": 7}])
    def test_unknown_or_missing_type_is_none(self, payload) -> None:
        assert parse_event(payload) is None

    @pytest.mark.parametrize(
        "payload",
        [
            {"type": "call.session_started", "call": {}},
            {"type": "call.session_ended"},
            {"type": "call.session_participant_left", "call_cid": "no-colon"},
            {"type": "call.transcription_ready", "call_cid": "default:m1"},
            {"type": "call.recording_ready", "call_cid": "default:m1", "call_recording": {}},
            {"type": "message.new", "channel_id": "m1", "message": {"text": "hi"}},
            {"type": "message.new", "channel_id": "m1", "user": {"id": "u1"}, "message": {}},
            {"type": "message.new", "user": {"id": "u1"}, "message": {"text": "hi"}},
        ],
    )
    def test_missing_fields_raise_invalid_request(self, payload) -> None:
        with pytest.raises(InvalidRequestError) as exc_info:
            parse_event(payload)
        assert exc_info.value.message == "Missing required fields"

    def test_events_are_frozen(self) -> None:
        event = SessionStartedEvent(session_id="m1")
        with pytest.raises(ValidationError):
            event.session_id = "m2"  # type: ignore[misc]
