"""LLM provider layer.

LLMExecutor routes a model string to an Agno model class; MockLLMProvider
returns canned responses for tests.
"""

from parley.providers.llm.base import (
    LLMMessage,
    LLMProvider,
    LLMResponse,
    ProviderError,
    RateLimitError,
    TokenUsage,
)
from parley.providers.llm.executor import LLMExecutor, create_executor
from parley.providers.llm.mock import MockLLMProvider

__all__ = [
    "LLMMessage",
    "LLMProvider",
    "LLMResponse",
    "ProviderError",
    "RateLimitError",
    "TokenUsage",
    "LLMExecutor",
    "create_executor",
    "MockLLMProvider",
]
