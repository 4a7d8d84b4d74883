"""Chat platform providers.

- StreamChatPlatform: the transport's async chat SDK
- InMemoryChatPlatform: local channels and HMAC verification for tests
"""

from parley.providers.chat.base import (
    ChatChannel,
    ChatMessage,
    ChatPlatform,
    ChatPlatformError,
    sign_body,
)
from parley.providers.chat.inmemory import InMemoryChatPlatform
from parley.providers.chat.stream import StreamChatPlatform

__all__ = [
    "ChatChannel",
    "ChatMessage",
    "ChatPlatform",
    "ChatPlatformError",
    "sign_body",
    "InMemoryChatPlatform",
    "StreamChatPlatform",
]
