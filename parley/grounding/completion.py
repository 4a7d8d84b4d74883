"""Single-shot grounded completion."""

import time

from parley.api.exceptions import DownstreamError, NoResponseError
from parley.observability.logging import get_logger
from parley.observability.metrics import COMPLETION_LATENCY
from parley.providers.llm.base import LLMMessage, LLMProvider, ProviderError

logger = get_logger(__name__)


class CompletionInvoker:
    """Sends [system, *window, user] to the LLM once and returns the text."""

    def __init__(
        self,
        llm: LLMProvider,
        model: str,
        temperature: float = 0.2,
        max_tokens: int = 700,
    ) -> None:
        self._llm = llm
        self._model = model
        self._temperature = temperature
        self._max_tokens = max_tokens

    async def complete(
        self,
        system_instructions: str,
        window: list[LLMMessage],
        user_text: str,
    ) -> str:
        """Return the stripped reply text.

        Raises:
            NoResponseError: The model returned nothing usable
            DownstreamError: The provider call failed
        """
        messages = [
            LLMMessage(role="system", content=system_instructions),
            *window,
            LLMMessage(role="user", content=user_text),
        ]

        start_time = time.perf_counter()
        try:
            response = await self._llm.generate(
                messages,
                max_tokens=self._max_tokens,
                temperature=self._temperature,
            )
        except ProviderError as e:
            logger.error(
                "completion_failed",
                model=self._model,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise DownstreamError("Completion request failed") from e
        finally:
            COMPLETION_LATENCY.labels(model=self._model).observe(
                time.perf_counter() - start_time
            )

        text = (response.content or "").strip()
        if not text:
            logger.warning("completion_empty", model=self._model)
            raise NoResponseError("No response produced")

        logger.debug(
            "completion_complete",
            model=self._model,
            window_size=len(window),
            content_length=len(text),
        )
        return text
