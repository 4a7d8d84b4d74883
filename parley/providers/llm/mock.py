"""Mock LLM provider for testing."""

from typing import Any

from parley.providers.llm.base import LLMMessage, LLMProvider, LLMResponse, TokenUsage


class MockLLMProvider(LLMProvider):
    """Mock LLM provider for testing.

    Returns configurable responses without making actual API calls. Set
    `error` to make every call raise it.
    """

    def __init__(
        self,
        default_response: str = "Mock response",
        default_model: str = "mock-model",
        responses: dict[str, str] | None = None,
        error: Exception | None = None,
    ):
        """Initialize mock provider.

        Args:
            default_response: Response to return when no match found
            default_model: Model name to report
            responses: Dict mapping last message content to responses
            error: Exception raised by generate instead of responding
        """
        self._default_response = default_response
        self._default_model = default_model
        self._responses = responses or {}
        self.error = error
        self._call_history: list[dict[str, Any]] = []

    @property
    def provider_name(self) -> str:
        return "mock"

    @property
    def call_history(self) -> list[dict[str, Any]]:
        """Return history of calls for testing assertions."""
        return self._call_history

    def set_response(self, trigger: str, response: str) -> None:
        """Set a response for a specific message content."""
        self._responses[trigger] = response

    async def generate(
        self,
        messages: list[LLMMessage],
        *,
        max_tokens: int = 1024,
        temperature: float = 0.7,
        **kwargs: Any,
    ) -> LLMResponse:
        self._call_history.append({
            "messages": messages,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "kwargs": kwargs,
        })

        if self.error is not None:
            raise self.error

        content = self._default_response
        if messages:
            last_message = messages[-1].content
            if last_message in self._responses:
                content = self._responses[last_message]

        prompt_tokens = sum(len(m.content) // 4 for m in messages)
        return LLMResponse(
            content=content,
            model=self._default_model,
            finish_reason="stop",
            usage=TokenUsage(
                prompt_tokens=prompt_tokens,
                completion_tokens=len(content) // 4,
                total_tokens=prompt_tokens + len(content) // 4,
            ),
        )
