"""End-to-end tests for POST /webhook with in-memory collaborators."""

import json
from collections.abc import Generator
from dataclasses import dataclass

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from parley.api.app import create_app
from parley.api.dependencies import (
    build_dispatcher,
    get_event_dispatcher,
    get_persona_store,
    get_session_store,
)
from parley.config.settings import Settings, set_toml_config
from parley.idempotency.dedupe import DedupeCache
from parley.jobs.queue import SUMMARY_JOB_NAME, InMemoryJobQueue
from parley.providers.chat import InMemoryChatPlatform
from parley.providers.llm import MockLLMProvider
from parley.providers.realtime import InMemoryRealtimeBridgeProvider
from parley.sessions.models import Persona, Session, SessionStatus
from parley.sessions.stores import InMemoryPersonaStore, InMemorySessionStore


@dataclass
class Harness:
    client: TestClient
    sessions: InMemorySessionStore
    personas: InMemoryPersonaStore
    chat: InMemoryChatPlatform
    bridges: InMemoryRealtimeBridgeProvider
    jobs: InMemoryJobQueue
    llm: MockLLMProvider


@pytest.fixture
def harness() -> Generator[Harness, None, None]:
    set_toml_config({})
    settings = Settings()
    sessions = InMemorySessionStore()
    personas = InMemoryPersonaStore()
    chat = InMemoryChatPlatform()
    bridges = InMemoryRealtimeBridgeProvider()
    jobs = InMemoryJobQueue()
    llm = MockLLMProvider(default_response="Send a written notice to the tenant.")
    dispatcher = build_dispatcher(
        settings,
        session_store=sessions,
        persona_store=personas,
        dedupe_cache=DedupeCache(),
        chat_platform=chat,
        bridge_provider=bridges,
        job_queue=jobs,
        llm_provider=llm,
    )

    app: FastAPI = create_app()
    app.dependency_overrides[get_event_dispatcher] = lambda: dispatcher
    app.dependency_overrides[get_session_store] = lambda: sessions
    app.dependency_overrides[get_persona_store] = lambda: personas

    yield Harness(
        client=TestClient(app, raise_server_exceptions=False),
        sessions=sessions,
        personas=personas,
        chat=chat,
        bridges=bridges,
        jobs=jobs,
        llm=llm,
    )
    app.dependency_overrides.clear()


def _post(harness: Harness, payload: dict, sign, **headers: str):
    body = json.dumps(payload).encode()
    request_headers = {
        "content-type": "application/json",
        "x-signature": sign(body),
        "x-api-key": "key",
    }
    request_headers.update(headers)
    return harness.client.post("/webhook", content=body, headers=request_headers)


async def _seed(harness: Harness, persona: Persona, **session_fields) -> None:
    await harness.personas.save(persona)
    await harness.sessions.save(
        Session(session_id="m1", persona_id=persona.persona_id, **session_fields)
    )


CHAT_PAYLOAD = {
    "type": "message.new",
    "channel_id": "m1",
    "user": {"id": "u1"},
    "message": {"id": "msg-1", "text": "What should I do next?"},
}


class TestLifecycleOverHttp:
    """Status-mutating events through the HTTP surface."""

    async def test_session_ended_moves_active_to_processing(
        self, harness, persona, sign
    ) -> None:
        await _seed(harness, persona, status=SessionStatus.ACTIVE)

        response = _post(
            harness,
            {"type": "call.session_ended", "call": {"custom": {"meetingId": "m1"}}},
            sign,
        )

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}
        session = await harness.sessions.get("m1")
        assert session is not None
        assert session.status == SessionStatus.PROCESSING
        assert session.ended_at is not None

    async def test_session_started_activates_live_persona(
        self, harness, persona, sign
    ) -> None:
        await _seed(harness, persona)

        response = _post(
            harness,
            {"type": "call.session_started", "call": {"custom": {"meetingId": "m1"}}},
            sign,
        )

        assert response.status_code == 200
        session = await harness.sessions.get("m1")
        assert session is not None and session.status == SessionStatus.ACTIVE
        bridge = harness.bridges.bridges["m1"]
        assert bridge.agent_user_id == persona.persona_id
        assert bridge.instructions[0].endswith("Speak simply. Avoid jargon.")

    async def test_session_started_twice_is_not_found(self, harness, persona, sign) -> None:
        await _seed(harness, persona)
        payload = {"type": "call.session_started", "call": {"custom": {"meetingId": "m1"}}}

        assert _post(harness, payload, sign).status_code == 200
        response = _post(harness, payload, sign)

        assert response.status_code == 404
        assert response.json() == {
            "error": {"code": "SESSION_NOT_FOUND", "message": "Session not found or not scheduled"}
        }

    async def test_transcript_ready_enqueues_summary(self, harness, persona, sign) -> None:
        await _seed(harness, persona, status=SessionStatus.PROCESSING)

        response = _post(
            harness,
            {
                "type": "call.transcription_ready",
                "call_cid": "default:m1",
                "call_transcription": {"url": "https://x/t.jsonl"},
            },
            sign,
        )

        assert response.status_code == 200
        assert harness.jobs.jobs == [
            (SUMMARY_JOB_NAME, {"meetingId": "m1", "transcriptUrl": "https://x/t.jsonl"})
        ]


class TestGroundedChatOverHttp:
    """message.new through the HTTP surface."""

    async def test_reply_grounded_on_summary(self, harness, persona, sign) -> None:
        await _seed(
            harness,
            persona,
            status=SessionStatus.COMPLETED,
            summary="Tenant dispute over unpaid rent",
        )

        response = _post(harness, CHAT_PAYLOAD, sign)

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}
        system = harness.llm.call_history[0]["messages"][0]
        assert "Tenant dispute over unpaid rent" in system.content
        assert harness.llm.call_history[0]["messages"][-1].content == "What should I do next?"
        channel_id, text, identity = harness.chat.sent[0]
        assert channel_id == "m1"
        assert text == "Send a written notice to the tenant."
        assert identity.id == persona.persona_id
        assert harness.chat.identities[persona.persona_id].name == persona.name

    async def test_redelivery_is_deduped(self, harness, persona, sign) -> None:
        await _seed(harness, persona, status=SessionStatus.COMPLETED, summary="S")

        first = _post(harness, CHAT_PAYLOAD, sign)
        second = _post(harness, CHAT_PAYLOAD, sign)

        assert first.json() == {"status": "ok"}
        assert second.status_code == 200
        assert second.json() == {"status": "ok", "deduped": True}
        assert len(harness.llm.call_history) == 1
        assert len(harness.chat.sent) == 1

    async def test_session_not_completed(self, harness, persona, sign) -> None:
        await _seed(harness, persona, status=SessionStatus.ACTIVE)

        response = _post(harness, CHAT_PAYLOAD, sign)

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "SESSION_NOT_FOUND"

    async def test_empty_completion(self, harness, persona, sign) -> None:
        await _seed(harness, persona, status=SessionStatus.COMPLETED, summary="S")
        harness.llm._default_response = ""

        response = _post(harness, CHAT_PAYLOAD, sign)

        assert response.status_code == 400
        assert response.json() == {
            "error": {"code": "NO_RESPONSE", "message": "No response produced"}
        }


class TestRequestErrors:
    """Authentication and validation failures."""

    def test_missing_signature(self, harness, sign) -> None:
        response = harness.client.post(
            "/webhook", content=b"{}", headers={"x-api-key": "key"}
        )
        assert response.status_code == 401
        assert response.json()["error"]["code"] == "UNAUTHORIZED"

    def test_invalid_signature(self, harness, sign) -> None:
        response = _post(harness, {"type": "call.session_ended"}, sign, **{"x-signature": "bad"})
        assert response.status_code == 401

    def test_malformed_json(self, harness, sign) -> None:
        body = b"{not json"
        response = harness.client.post(
            "/webhook",
            content=body,
            headers={"x-signature": sign(body), "x-api-key": "key"},
        )
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_REQUEST"

    def test_error_does_not_echo_payload(self, harness, sign) -> None:
        response = _post(
            harness, {"type": "call.session_started", "call": {"secret": "do-not-echo"}}, sign
        )
        assert response.status_code == 400
        assert "do-not-echo" not in response.text

    def test_unknown_kind(self, harness, sign) -> None:
        response = _post(harness, {"type": "call.created"}, sign)
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    async def test_unexpected_error_is_internal(self, harness, persona, sign) -> None:
        await _seed(harness, persona, status=SessionStatus.COMPLETED, summary="S")
        harness.llm.error = RuntimeError("unclassified")

        response = _post(harness, CHAT_PAYLOAD, sign)

        assert response.status_code == 500
        assert response.json() == {
            "error": {"code": "INTERNAL_ERROR", "message": "An unexpected error occurred"}
        }


class TestHealthAndMetrics:
    """GET /health and GET /metrics."""

    def test_health(self, harness) -> None:
        response = harness.client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert {c["name"] for c in body["components"]} == {"session_store", "persona_store"}

    def test_metrics(self, harness, sign) -> None:
        _post(harness, {"type": "call.created"}, sign)

        response = harness.client.get("/metrics")

        assert response.status_code == 200
        assert "parley_webhook_events_total" in response.text
