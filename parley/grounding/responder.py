"""Answers post-session chat messages from recorded facts only."""

from parley.api.exceptions import (
    DownstreamError,
    PersonaNotFoundError,
    SessionNotFoundError,
)
from parley.config.models.persona import PersonaConfig
from parley.db.errors import StoreError
from parley.events.models import ChatMessageEvent
from parley.grounding.completion import CompletionInvoker
from parley.grounding.prompt import build_conversation_window, build_grounded_instructions
from parley.grounding.publisher import CHANNEL_KIND, ResponsePublisher
from parley.observability.logging import get_logger
from parley.providers.chat.base import ChatPlatform, ChatPlatformError
from parley.sessions.models import SessionStatus
from parley.sessions.store import PersonaStore, SessionStore

logger = get_logger(__name__)


class GroundedResponder:
    """Handles a chat message on a completed session's channel.

    The reply is grounded on the session summary and a bounded window of
    channel history, then posted as the session's persona.
    """

    def __init__(
        self,
        session_store: SessionStore,
        persona_store: PersonaStore,
        chat_platform: ChatPlatform,
        completion: CompletionInvoker,
        publisher: ResponsePublisher,
        persona_config: PersonaConfig,
    ) -> None:
        self._sessions = session_store
        self._personas = persona_store
        self._chat = chat_platform
        self._completion = completion
        self._publisher = publisher
        self._config = persona_config

    async def respond(self, event: ChatMessageEvent) -> None:
        """Compose and publish a reply.

        Raises:
            SessionNotFoundError: No completed session for this channel
            PersonaNotFoundError: The session's persona does not exist
            NoResponseError: The model produced no text
            DownstreamError: A collaborator failed
        """
        try:
            session = await self._sessions.get_with_status(
                event.channel_id, SessionStatus.COMPLETED
            )
            if session is None:
                raise SessionNotFoundError("Session not found or not completed")

            persona = await self._personas.get(session.persona_id)
        except StoreError as e:
            raise DownstreamError("Failed to load session") from e

        if persona is None:
            raise PersonaNotFoundError("Persona not found")

        if event.author_id == persona.persona_id:
            logger.debug("own_message_ignored", session_id=session.session_id)
            return

        instructions = build_grounded_instructions(
            self._config.policy_wrapper, session.summary, persona.instructions
        )

        try:
            history = await self._chat.channel(CHANNEL_KIND, event.channel_id).fetch_history(
                self._config.history_fetch_limit
            )
        except ChatPlatformError as e:
            raise DownstreamError("Failed to fetch channel history") from e

        window = build_conversation_window(
            history,
            persona_id=persona.persona_id,
            limit=self._config.history_window,
            exclude_message_id=event.message_id,
        )

        reply = await self._completion.complete(instructions, window, event.text)

        identity = persona.identity(
            avatar_base_url=self._config.avatar_base_url,
            avatar_variant=self._config.avatar_variant,
        )
        await self._publisher.publish(event.channel_id, identity, reply)

        logger.info(
            "grounded_reply_sent",
            session_id=session.session_id,
            window_size=len(window),
        )
