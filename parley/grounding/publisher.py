"""Posts replies to the chat channel as the persona."""

from parley.api.exceptions import DownstreamError
from parley.observability.logging import get_logger
from parley.providers.chat.base import ChatPlatform, ChatPlatformError
from parley.sessions.models import PersonaIdentity

logger = get_logger(__name__)

CHANNEL_KIND = "messaging"


class ResponsePublisher:
    """Upserts the persona identity, then sends the message.

    The upsert always completes before the send so the message renders
    with the persona's current name and avatar.
    """

    def __init__(self, chat_platform: ChatPlatform) -> None:
        self._chat = chat_platform

    async def publish(self, channel_id: str, identity: PersonaIdentity, text: str) -> None:
        try:
            await self._chat.upsert_identity(identity)
            await self._chat.channel(CHANNEL_KIND, channel_id).send_message(text, identity)
        except ChatPlatformError as e:
            logger.error("response_publish_failed", channel_id=channel_id, error=str(e))
            raise DownstreamError("Failed to publish response") from e

        logger.info("response_published", channel_id=channel_id, persona_id=identity.id)
