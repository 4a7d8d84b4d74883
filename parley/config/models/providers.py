"""External provider configuration (chat platform, realtime bridge)."""

from typing import Literal

from pydantic import BaseModel, Field, SecretStr


class StreamConfig(BaseModel):
    """Chat/video transport credentials."""

    chat_backend: Literal["stream", "inmemory"] = Field(
        default="stream", description="Chat platform implementation"
    )
    api_key: SecretStr | None = Field(default=None, description="Transport API key")
    api_secret: SecretStr | None = Field(
        default=None, description="Transport API secret (also signs webhooks)"
    )


class RealtimeConfig(BaseModel):
    """Realtime AI bridge configuration."""

    backend: Literal["stream", "inmemory"] = Field(
        default="stream", description="Bridge provider implementation"
    )
    video_base_url: str = Field(
        default="https://video.stream-io-api.com", description="Video REST API URL"
    )
    agent_bridge_url: str | None = Field(
        default=None, description="Agent bridge service URL; unset disables live agents"
    )
    call_type: str = Field(default="default", description="Call type on the transport")
    llm_api_key: SecretStr | None = Field(
        default=None, description="Key handed to the bridge for the realtime model"
    )
    timeout: float = Field(default=15.0, gt=0, description="Request timeout in seconds")


class ProvidersConfig(BaseModel):
    """Provider configuration sections."""

    stream: StreamConfig = Field(default_factory=StreamConfig)
    realtime: RealtimeConfig = Field(default_factory=RealtimeConfig)
