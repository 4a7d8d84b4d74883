"""Chat platform contract."""

import hashlib
import hmac
from abc import ABC, abstractmethod

from pydantic import BaseModel

from parley.sessions.models import PersonaIdentity


class ChatPlatformError(Exception):
    """Raised when the chat platform call fails."""

    pass


class ChatMessage(BaseModel):
    """A message as retained in channel history."""

    id: str | None = None
    user_id: str | None = None
    text: str | None = None


def sign_body(body: bytes, secret: str) -> str:
    """HMAC-SHA256 hex digest of a raw webhook body."""
    return hmac.new(secret.encode(), body, hashlib.sha256).hexdigest()


class ChatChannel(ABC):
    """A single chat channel."""

    def __init__(self, kind: str, channel_id: str) -> None:
        self.kind = kind
        self.channel_id = channel_id

    @abstractmethod
    async def fetch_history(self, limit: int) -> list[ChatMessage]:
        """Return up to `limit` most recent messages, oldest first."""
        pass

    @abstractmethod
    async def send_message(self, text: str, identity: PersonaIdentity) -> None:
        """Post a message attributed to the given identity."""
        pass


class ChatPlatform(ABC):
    """Chat platform client."""

    @abstractmethod
    def verify_webhook(self, body: bytes, signature: str) -> bool:
        """Check the transport's signature over the raw webhook body."""
        pass

    @abstractmethod
    def channel(self, kind: str, channel_id: str) -> ChatChannel:
        """Get a handle to a channel."""
        pass

    @abstractmethod
    async def upsert_identity(self, identity: PersonaIdentity) -> None:
        """Create or update a user in the platform's directory."""
        pass
