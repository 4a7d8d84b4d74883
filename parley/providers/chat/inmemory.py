"""In-memory chat platform for tests and local development."""

import hmac

from parley.providers.chat.base import (
    ChatChannel,
    ChatMessage,
    ChatPlatform,
    sign_body,
)
from parley.sessions.models import PersonaIdentity


class InMemoryChatChannel(ChatChannel):
    """Channel whose history lives on the owning platform."""

    def __init__(self, platform: "InMemoryChatPlatform", kind: str, channel_id: str) -> None:
        super().__init__(kind, channel_id)
        self._platform = platform

    @property
    def messages(self) -> list[ChatMessage]:
        return self._platform.messages.setdefault((self.kind, self.channel_id), [])

    async def fetch_history(self, limit: int) -> list[ChatMessage]:
        return list(self.messages[-limit:])

    async def send_message(self, text: str, identity: PersonaIdentity) -> None:
        self._platform.sent.append((self.channel_id, text, identity))
        self.messages.append(ChatMessage(id=None, user_id=identity.id, text=text))


class InMemoryChatPlatform(ChatPlatform):
    """ChatPlatform keeping channels, identities and sends in memory.

    Signatures are HMAC-SHA256 over the raw body keyed by api_secret, the
    same scheme the transport uses.
    """

    def __init__(self, api_secret: str = "test-secret") -> None:
        self._api_secret = api_secret
        self.messages: dict[tuple[str, str], list[ChatMessage]] = {}
        self.identities: dict[str, PersonaIdentity] = {}
        self.sent: list[tuple[str, str, PersonaIdentity]] = []
        self.calls: list[str] = []

    def verify_webhook(self, body: bytes, signature: str) -> bool:
        return hmac.compare_digest(sign_body(body, self._api_secret), signature)

    def channel(self, kind: str, channel_id: str) -> ChatChannel:
        return InMemoryChatChannel(self, kind, channel_id)

    async def upsert_identity(self, identity: PersonaIdentity) -> None:
        self.calls.append("upsert_identity")
        self.identities[identity.id] = identity

    def add_message(
        self, channel_id: str, user_id: str, text: str, message_id: str | None = None,
        kind: str = "messaging",
    ) -> None:
        """Seed channel history (test utility)."""
        self.messages.setdefault((kind, channel_id), []).append(
            ChatMessage(id=message_id, user_id=user_id, text=text)
        )
