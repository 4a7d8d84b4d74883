"""Completion invoker configuration."""

from pydantic import BaseModel, Field


class CompletionConfig(BaseModel):
    """LLM settings for grounded chat replies.

    The model string is routed by prefix (see LLMExecutor), e.g.
    "openai/gpt-4.1" or "mock/test".
    """

    model: str = Field(default="openai/gpt-4.1", description="Model identifier")
    temperature: float = Field(
        default=0.2, ge=0.0, le=2.0, description="Sampling temperature"
    )
    max_tokens: int = Field(
        default=700, ge=1, description="Maximum output tokens"
    )
    timeout: float = Field(
        default=60.0, gt=0, description="Request timeout in seconds"
    )
