"""Chat platform backed by the stream-chat async SDK."""

from typing import Any

from stream_chat import StreamChatAsync

from parley.observability.logging import get_logger
from parley.providers.chat.base import (
    ChatChannel,
    ChatMessage,
    ChatPlatform,
    ChatPlatformError,
)
from parley.sessions.models import PersonaIdentity

logger = get_logger(__name__)


class StreamChatChannel(ChatChannel):
    """Channel handle wrapping an SDK channel."""

    def __init__(self, kind: str, channel_id: str, channel: Any) -> None:
        super().__init__(kind, channel_id)
        self._channel = channel

    async def fetch_history(self, limit: int) -> list[ChatMessage]:
        try:
            response = await self._channel.query(messages={"limit": limit})
        except Exception as e:
            raise ChatPlatformError(f"Failed to fetch channel history: {e}") from e

        messages = []
        for raw in response.get("messages", []):
            user = raw.get("user") or {}
            messages.append(
                ChatMessage(id=raw.get("id"), user_id=user.get("id"), text=raw.get("text"))
            )
        return messages

    async def send_message(self, text: str, identity: PersonaIdentity) -> None:
        try:
            await self._channel.send_message({"text": text}, identity.id)
        except Exception as e:
            raise ChatPlatformError(f"Failed to send message: {e}") from e

        logger.info(
            "chat_message_sent",
            channel_id=self.channel_id,
            user_id=identity.id,
        )


class StreamChatPlatform(ChatPlatform):
    """ChatPlatform over StreamChatAsync.

    Webhook signatures are verified with the SDK's own primitive, keyed by
    the API secret.
    """

    def __init__(self, api_key: str, api_secret: str) -> None:
        self._client = StreamChatAsync(api_key=api_key, api_secret=api_secret)

    def verify_webhook(self, body: bytes, signature: str) -> bool:
        return bool(self._client.verify_webhook(body, signature))

    def channel(self, kind: str, channel_id: str) -> ChatChannel:
        return StreamChatChannel(kind, channel_id, self._client.channel(kind, channel_id))

    async def upsert_identity(self, identity: PersonaIdentity) -> None:
        try:
            await self._client.upsert_user(identity.model_dump(exclude_none=True))
        except Exception as e:
            raise ChatPlatformError(f"Failed to upsert user: {e}") from e

        logger.debug("chat_identity_upserted", user_id=identity.id)

    async def close(self) -> None:
        """Close the SDK's HTTP session."""
        await self._client.close()
