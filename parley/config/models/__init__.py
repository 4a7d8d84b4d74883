"""Configuration model exports.

    from parley.config.models import CompletionConfig, PersonaConfig
"""

from parley.config.models.api import APIConfig, WebhookConfig
from parley.config.models.completion import CompletionConfig
from parley.config.models.jobs import HatchetConfig, JobsConfig
from parley.config.models.observability import (
    LoggingConfig,
    MetricsConfig,
    ObservabilityConfig,
    TracingConfig,
)
from parley.config.models.persona import DEFAULT_POLICY_WRAPPER, PersonaConfig
from parley.config.models.providers import ProvidersConfig, RealtimeConfig, StreamConfig
from parley.config.models.storage import StorageConfig

__all__ = [
    "APIConfig",
    "WebhookConfig",
    "CompletionConfig",
    "HatchetConfig",
    "JobsConfig",
    "LoggingConfig",
    "MetricsConfig",
    "ObservabilityConfig",
    "TracingConfig",
    "DEFAULT_POLICY_WRAPPER",
    "PersonaConfig",
    "ProvidersConfig",
    "RealtimeConfig",
    "StreamConfig",
    "StorageConfig",
]
