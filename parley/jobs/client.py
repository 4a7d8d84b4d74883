"""Hatchet client wrapper.

Lazily builds the Hatchet SDK client and degrades to "unavailable" when
Hatchet is disabled or cannot be reached.
"""

from typing import Any

from parley.config.models.jobs import HatchetConfig
from parley.observability.logging import get_logger

logger = get_logger(__name__)


class HatchetClient:
    """Wrapper for the Hatchet SDK client."""

    def __init__(self, config: HatchetConfig) -> None:
        self._config = config
        self._client: Any | None = None

    def _get_or_create_client(self) -> Any | None:
        """Lazily initialize Hatchet client."""
        if self._client is not None:
            return self._client

        if not self._config.enabled:
            logger.info("hatchet_disabled", reason="config")
            return None

        try:
            from hatchet_sdk import Hatchet

            api_key = (
                self._config.api_key.get_secret_value()
                if self._config.api_key
                else None
            )
            self._client = Hatchet(
                server_url=self._config.server_url,
                api_key=api_key,
            )
            logger.info(
                "hatchet_client_initialized",
                server_url=self._config.server_url,
            )
            return self._client
        except ImportError:
            logger.warning("hatchet_sdk_not_installed")
            return None
        except Exception as e:
            logger.error("hatchet_client_init_failed", error=str(e))
            return None

    def get_client(self) -> Any | None:
        """Get Hatchet client instance, or None if unavailable."""
        return self._get_or_create_client()

    @property
    def is_available(self) -> bool:
        """True once a client has been created."""
        return self._client is not None

    @property
    def config(self) -> HatchetConfig:
        return self._config
