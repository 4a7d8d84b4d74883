"""Realtime bridge backed by the transport's video API.

Call control goes straight to the video REST API, authenticated with a
server-side JWT signed by the transport API secret. Joining the realtime
model as a participant is delegated to an agent bridge service; without
one configured, opening a bridge fails and the caller decides what to do.
"""

import httpx
from jose import jwt

from parley.config.models.providers import RealtimeConfig
from parley.observability.logging import get_logger
from parley.providers.realtime.base import (
    RealtimeBridge,
    RealtimeBridgeError,
    RealtimeBridgeProvider,
)

logger = get_logger(__name__)


def create_server_token(api_secret: str) -> str:
    """Server-side JWT for the transport REST API."""
    return jwt.encode({"server": True}, api_secret, algorithm="HS256")


class StreamVideoBridge(RealtimeBridge):
    """Bridge handle backed by the agent bridge service."""

    def __init__(self, provider: "StreamVideoBridgeProvider", session_id: str) -> None:
        super().__init__(session_id)
        self._provider = provider

    async def update_instructions(self, instructions: str) -> None:
        await self._provider._agent_request(
            "PATCH",
            f"{self._provider._agent_path(self.session_id)}/session",
            json={"instructions": instructions},
        )
        logger.info(
            "bridge_instructions_updated",
            session_id=self.session_id,
            instructions_length=len(instructions),
        )


class StreamVideoBridgeProvider(RealtimeBridgeProvider):
    """Realtime bridge provider on the transport's video API.

    Endpoints:
        POST {video_base_url}/api/v2/video/call/{type}/{id}/mark_ended
            end the call; 404 means there is no such call
        PUT   {agent_bridge_url}/calls/{type}/{id}/agent          join the agent
        PATCH {agent_bridge_url}/calls/{type}/{id}/agent/session  live configuration
    """

    def __init__(
        self,
        config: RealtimeConfig,
        api_key: str,
        api_secret: str,
        video_client: httpx.AsyncClient | None = None,
        agent_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._config = config
        self._api_key = api_key
        self._token = create_server_token(api_secret)
        self._video_client = video_client
        self._agent_client = agent_client

    def _video_http(self) -> httpx.AsyncClient:
        if self._video_client is None:
            self._video_client = httpx.AsyncClient(
                base_url=self._config.video_base_url,
                timeout=self._config.timeout,
            )
        return self._video_client

    def _agent_http(self) -> httpx.AsyncClient:
        if self._config.agent_bridge_url is None:
            raise RealtimeBridgeError("No agent bridge configured")
        if self._agent_client is None:
            self._agent_client = httpx.AsyncClient(
                base_url=self._config.agent_bridge_url,
                timeout=self._config.timeout,
            )
        return self._agent_client

    def _agent_path(self, session_id: str) -> str:
        return f"/calls/{self._config.call_type}/{session_id}/agent"

    async def _send(
        self,
        client: httpx.AsyncClient,
        method: str,
        path: str,
        allow_not_found: bool = False,
        **kwargs: object,
    ) -> httpx.Response:
        try:
            response = await client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            raise RealtimeBridgeError(f"Bridge request failed: {e}") from e

        if allow_not_found and response.status_code == 404:
            return response
        if response.status_code >= 400:
            raise RealtimeBridgeError(
                f"Bridge returned {response.status_code} for {method} {path}"
            )
        return response

    async def _agent_request(
        self, method: str, path: str, json: dict[str, object]
    ) -> httpx.Response:
        return await self._send(self._agent_http(), method, path, json=json)

    async def open_bridge(self, session_id: str, agent_user_id: str) -> RealtimeBridge:
        payload: dict[str, object] = {"agent_user_id": agent_user_id}
        if self._config.llm_api_key is not None:
            payload["llm_api_key"] = self._config.llm_api_key.get_secret_value()

        await self._agent_request("PUT", self._agent_path(session_id), json=payload)
        logger.info("bridge_opened", session_id=session_id, agent_user_id=agent_user_id)
        return StreamVideoBridge(self, session_id)

    async def end_bridge(self, session_id: str) -> None:
        response = await self._send(
            self._video_http(),
            "POST",
            f"/api/v2/video/call/{self._config.call_type}/{session_id}/mark_ended",
            allow_not_found=True,
            params={"api_key": self._api_key},
            headers={"Authorization": self._token, "stream-auth-type": "jwt"},
            json={},
        )
        logger.info(
            "bridge_ended",
            session_id=session_id,
            already_ended=response.status_code == 404,
        )

    async def close(self) -> None:
        """Close the underlying HTTP clients."""
        for client in (self._video_client, self._agent_client):
            if client is not None:
                await client.aclose()
        self._video_client = None
        self._agent_client = None
