"""Webhook event dispatcher.

Authenticates a raw delivery, parses it into an InboundEvent, suppresses
redelivered chat messages and routes the event to its handler.
"""

import json
from collections.abc import Awaitable, Callable
from typing import Any

from parley.api.exceptions import (
    InvalidRequestError,
    ParleyAPIError,
    UnauthorizedError,
)
from parley.api.models.webhook import DispatchResult
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
from parley.grounding.responder import GroundedResponder
from parley.idempotency.dedupe import DedupeCache
from parley.live.activator import LiveSessionActivator
from parley.observability.logging import get_logger
from parley.observability.metrics import DEDUPE_SUPPRESSED, WEBHOOK_EVENTS
from parley.providers.chat.base import ChatPlatform
from parley.sessions.lifecycle import LifecycleManager

logger = get_logger(__name__)

Handler = Callable[[Any], Awaitable[None]]


class EventDispatcher:
    """Entry point for every webhook delivery.

    The API key header is checked for presence only; it is not compared
    against a stored secret. Authenticity rests on the body signature.
    """

    def __init__(
        self,
        chat_platform: ChatPlatform,
        dedupe_cache: DedupeCache,
        lifecycle: LifecycleManager,
        activator: LiveSessionActivator,
        responder: GroundedResponder,
    ) -> None:
        self._chat = chat_platform
        self._dedupe = dedupe_cache
        self._lifecycle = lifecycle
        self._activator = activator
        self._responder = responder

        self._handlers: dict[type[InboundEvent], Handler] = {  # type: ignore[valid-type]
            SessionStartedEvent: self._on_session_started,
            ParticipantLeftEvent: self._on_participant_left,
            SessionEndedEvent: self._on_session_ended,
            TranscriptReadyEvent: self._on_transcript_ready,
            RecordingReadyEvent: self._on_recording_ready,
            ChatMessageEvent: self._on_chat_message,
        }

    async def dispatch(
        self,
        body: bytes,
        signature: str | None,
        api_key: str | None,
    ) -> DispatchResult:
        """Authenticate, parse, dedupe and route one delivery.

        Raises:
            UnauthorizedError: Missing headers or bad signature
            InvalidRequestError: Malformed body or missing event fields
            ParleyAPIError: Whatever the event handler raises
        """
        if not signature or not api_key:
            raise UnauthorizedError("Missing signature or API key")

        if not self._chat.verify_webhook(body, signature):
            logger.warning("webhook_signature_invalid")
            raise UnauthorizedError("Invalid signature")

        payload = self._decode(body)
        kind = payload.get("type")
        kind_label = (
            kind if isinstance(kind, str) and kind in SUPPORTED_EVENT_TYPES else "unknown"
        )

        event = parse_event(payload)
        if event is None:
            WEBHOOK_EVENTS.labels(kind=kind_label, outcome="ignored").inc()
            logger.info("webhook_event_ignored", kind=kind if isinstance(kind, str) else None)
            return DispatchResult()

        logger.info(
            "webhook_event_received",
            kind=kind_label,
            session_id=event.session_id,
        )

        if isinstance(event, ChatMessageEvent) and self._dedupe.seen_recently(
            event.message_id
        ):
            DEDUPE_SUPPRESSED.inc()
            WEBHOOK_EVENTS.labels(kind=kind_label, outcome="deduped").inc()
            logger.info("dedupe_suppressed", message_id=event.message_id)
            return DispatchResult(deduped=True)

        try:
            await self._handlers[type(event)](event)
        except ParleyAPIError as e:
            WEBHOOK_EVENTS.labels(kind=kind_label, outcome=e.error_code.value.lower()).inc()
            raise

        WEBHOOK_EVENTS.labels(kind=kind_label, outcome="ok").inc()
        return DispatchResult()

    def _decode(self, body: bytes) -> dict[str, Any]:
        try:
            payload = json.loads(body)
        except (ValueError, UnicodeDecodeError) as e:
            raise InvalidRequestError("Invalid JSON body") from e

        if not isinstance(payload, dict):
            raise InvalidRequestError("Invalid JSON body")
        return payload

    async def _on_session_started(self, event: SessionStartedEvent) -> None:
        session = await self._lifecycle.on_session_started(event.session_id)
        await self._activator.activate(session)

    async def _on_participant_left(self, event: ParticipantLeftEvent) -> None:
        await self._lifecycle.on_participant_left(event.session_id)

    async def _on_session_ended(self, event: SessionEndedEvent) -> None:
        await self._lifecycle.on_session_ended(event.session_id)

    async def _on_transcript_ready(self, event: TranscriptReadyEvent) -> None:
        await self._lifecycle.on_transcript_ready(event.session_id, event.transcript_url)

    async def _on_recording_ready(self, event: RecordingReadyEvent) -> None:
        await self._lifecycle.on_recording_ready(event.session_id, event.recording_url)

    async def _on_chat_message(self, event: ChatMessageEvent) -> None:
        await self._responder.respond(event)
