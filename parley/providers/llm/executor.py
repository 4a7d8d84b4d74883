"""LLM Executor - runs one completion through Agno.

The model string prefix selects the Agno model class:
- OpenRouter for openrouter/* models
- Claude for anthropic/* models
- OpenAIChat for openai/* models
- Groq for groq/* models
- mock/* returns a canned response without any network call

There are no fallback models and no retries: a failed call surfaces as
ProviderError to the caller.
"""

from __future__ import annotations

import asyncio
import time
from typing import TYPE_CHECKING, Any

from parley.observability.logging import get_logger
from parley.providers.llm.base import (
    LLMMessage,
    LLMProvider,
    LLMResponse,
    ProviderError,
    RateLimitError,
    TokenUsage,
)

if TYPE_CHECKING:
    from agno.agent import Agent

logger = get_logger(__name__)


class LLMExecutor(LLMProvider):
    """Executes LLM calls for a single configured model using Agno.

    Model string format:
        openrouter/anthropic/claude-3-haiku -> OpenRouter(id="anthropic/claude-3-haiku")
        anthropic/claude-3-haiku -> Claude(id="claude-3-haiku")
        openai/gpt-4.1 -> OpenAIChat(id="gpt-4.1")
        groq/llama-3.1-70b -> Groq(id="llama-3.1-70b")
        mock/test -> Mock response (for testing)

    Example:
        executor = LLMExecutor(model="openai/gpt-4.1", timeout=60.0)

        response = await executor.generate(
            messages=[LLMMessage(role="user", content="Hello")],
            max_tokens=700,
            temperature=0.2,
        )
    """

    def __init__(self, model: str, timeout: float = 60.0) -> None:
        """Initialize the executor.

        Args:
            model: Model string (e.g., 'openai/gpt-4.1')
            timeout: Request timeout in seconds
        """
        self._model = model
        self._timeout = timeout

        # Agno configures sampling at model creation, so models are cached
        # per (max_tokens, temperature). Agents carry per-call instructions
        # and are built fresh for every call.
        self._models: dict[tuple[int, float], Any] = {}

    @property
    def provider_name(self) -> str:
        return self._parse_model(self._model)[0]

    @property
    def model(self) -> str:
        """Model this executor calls."""
        return self._model

    async def generate(
        self,
        messages: list[LLMMessage],
        *,
        max_tokens: int = 1024,
        temperature: float = 0.7,
        **kwargs: Any,  # noqa: ARG002
    ) -> LLMResponse:
        """Generate text from messages with exactly one attempt.

        Args:
            messages: Conversation messages; the first system message becomes
                the agent instructions
            max_tokens: Maximum tokens to generate
            temperature: Sampling temperature

        Returns:
            LLMResponse with generated content and metadata

        Raises:
            RateLimitError: Provider reported a rate limit
            ProviderError: Any other provider or timeout failure
        """
        provider_type, _ = self._parse_model(self._model)
        if provider_type == "mock":
            return self._mock_response(self._model)

        input_text = self._format_messages_for_agno(messages)
        agent = self._create_agent(
            max_tokens, temperature, self._get_system_prompt(messages)
        )

        start_time = time.perf_counter()

        try:
            run_response = await asyncio.wait_for(
                agent.arun(input_text), timeout=self._timeout
            )
        except asyncio.TimeoutError as e:
            raise ProviderError(f"LLM call timed out after {self._timeout}s") from e
        except Exception as e:
            error_msg = str(e).lower()
            if "rate" in error_msg and "limit" in error_msg:
                raise RateLimitError(f"Rate limited: {e}") from e
            raise ProviderError(f"Agno execution failed: {e}") from e

        content = run_response.content if run_response.content else ""
        if not isinstance(content, str):
            content = str(content)

        latency_ms = (time.perf_counter() - start_time) * 1000

        logger.debug(
            "executor_generate_complete",
            model=self._model,
            latency_ms=round(latency_ms, 2),
            content_length=len(content),
        )

        return LLMResponse(
            content=content,
            model=self._model,
            finish_reason="stop",
            usage=None,  # Agno doesn't expose token usage consistently
            metadata={
                "latency_ms": latency_ms,
                "provider": provider_type,
            },
        )

    # ========================================================================
    # Internal: Agno-based execution
    # ========================================================================

    def _create_agent(
        self, max_tokens: int, temperature: float, system_prompt: str | None
    ) -> Agent:
        """Build an Agno agent for one call on the cached model."""
        from agno.agent import Agent

        return Agent(
            model=self._get_or_create_model(max_tokens, temperature),
            instructions=[system_prompt] if system_prompt else None,
            num_history_messages=0,  # history is passed in the input
            markdown=False,
        )

    def _get_or_create_model(self, max_tokens: int, temperature: float) -> Any:
        """Get cached Agno model or create one for these sampling settings."""
        key = (max_tokens, temperature)
        if key not in self._models:
            self._models[key] = self._create_agno_model(max_tokens, temperature)
        return self._models[key]

    def _create_agno_model(self, max_tokens: int, temperature: float) -> Any:
        """Create Agno model class from the model string."""
        provider_type, api_model = self._parse_model(self._model)
        params: dict[str, Any] = {"max_tokens": max_tokens, "temperature": temperature}

        if provider_type == "openrouter":
            from agno.models.openrouter import OpenRouter

            return OpenRouter(id=api_model, **params)

        elif provider_type == "anthropic":
            from agno.models.anthropic import Claude

            return Claude(id=api_model, **params)

        elif provider_type == "openai":
            from agno.models.openai import OpenAIChat

            return OpenAIChat(id=api_model, **params)

        elif provider_type == "groq":
            from agno.models.groq import Groq

            return Groq(id=api_model, **params)

        else:
            from agno.models.openrouter import OpenRouter

            logger.warning(
                "unknown_provider_defaulting_to_openrouter",
                model=self._model,
                provider_type=provider_type,
            )
            return OpenRouter(id=self._model, **params)

    def _format_messages_for_agno(self, messages: list[LLMMessage]) -> str:
        """Convert our messages to Agno input format.

        Agno agents take a string input, so multi-turn history is rendered
        as conversation text. System messages are handled separately.
        """
        user_messages = [m for m in messages if m.role != "system"]

        if len(user_messages) == 1:
            return user_messages[0].content

        parts = []
        for msg in user_messages:
            if msg.role == "user":
                parts.append(f"User: {msg.content}")
            elif msg.role == "assistant":
                parts.append(f"Assistant: {msg.content}")
        return "\n\n".join(parts)

    def _get_system_prompt(self, messages: list[LLMMessage]) -> str | None:
        """Extract system prompt from messages."""
        for msg in messages:
            if msg.role == "system":
                return msg.content
        return None

    def _mock_response(self, model: str) -> LLMResponse:
        """Generate mock response for testing."""
        return LLMResponse(
            content=f"Mock response for {model}",
            model=model,
            finish_reason="stop",
            usage=TokenUsage(prompt_tokens=10, completion_tokens=5, total_tokens=15),
        )

    def _parse_model(self, model: str) -> tuple[str, str]:
        """Parse model string into (provider_type, api_model).

        Examples:
            "openrouter/anthropic/claude-3-haiku" -> ("openrouter", "anthropic/claude-3-haiku")
            "openai/gpt-4.1" -> ("openai", "gpt-4.1")
            "mock/test" -> ("mock", "test")
        """
        parts = model.split("/")

        if len(parts) >= 3 and parts[0] == "openrouter":
            return "openrouter", "/".join(parts[1:])
        elif len(parts) >= 2:
            return parts[0], "/".join(parts[1:])
        else:
            return "mock", model


def create_executor(model: str, timeout: float = 60.0) -> LLMExecutor:
    """Create an LLMExecutor for the given model string."""
    return LLMExecutor(model=model, timeout=timeout)
