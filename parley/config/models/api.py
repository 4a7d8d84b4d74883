"""API server configuration."""

from pydantic import BaseModel, Field


class APIConfig(BaseModel):
    """HTTP surface configuration."""

    cors_origins: list[str] = Field(
        default_factory=list,
        description="Allowed CORS origins (empty disables CORS)",
    )


class WebhookConfig(BaseModel):
    """Inbound webhook configuration."""

    dedupe_ttl_seconds: float = Field(
        default=300.0,
        gt=0,
        description="Window during which a repeated message id is suppressed",
    )
    signature_header: str = Field(
        default="x-signature",
        description="Header carrying the transport's body signature",
    )
    api_key_header: str = Field(
        default="x-api-key",
        description="Header carrying the transport API key (presence-checked only)",
    )
