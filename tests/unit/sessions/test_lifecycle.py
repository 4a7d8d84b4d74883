"""Unit tests for the session lifecycle state machine."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from parley.api.exceptions import DownstreamError, SessionNotFoundError
from parley.db.errors import ConnectionError
from parley.jobs.queue import SUMMARY_JOB_NAME, InMemoryJobQueue, JobQueueError
from parley.providers.realtime import InMemoryRealtimeBridgeProvider, RealtimeBridgeError
from parley.sessions.lifecycle import ALLOWED_TRANSITIONS, LifecycleManager, can_transition
from parley.sessions.models import Session, SessionStatus
from parley.sessions.stores import InMemorySessionStore


@pytest.fixture
def store() -> InMemorySessionStore:
    return InMemorySessionStore()


@pytest.fixture
def bridges() -> InMemoryRealtimeBridgeProvider:
    return InMemoryRealtimeBridgeProvider()


@pytest.fixture
def jobs() -> InMemoryJobQueue:
    return InMemoryJobQueue()


@pytest.fixture
def lifecycle(store, bridges, jobs) -> LifecycleManager:
    return LifecycleManager(store, bridges, jobs)


async def _seed(store: InMemorySessionStore, status: SessionStatus) -> Session:
    session = Session(session_id="m1", persona_id="persona-1", status=status)
    await store.save(session)
    return session


class TestTransitionTable:
    """Tests for the pure transition table."""

    def test_forward_path(self) -> None:
        assert can_transition(SessionStatus.SCHEDULED, SessionStatus.ACTIVE)
        assert can_transition(SessionStatus.ACTIVE, SessionStatus.PROCESSING)
        assert can_transition(SessionStatus.PROCESSING, SessionStatus.COMPLETED)

    def test_cancellation_sources(self) -> None:
        assert can_transition(SessionStatus.SCHEDULED, SessionStatus.CANCELLED)
        assert can_transition(SessionStatus.ACTIVE, SessionStatus.CANCELLED)
        assert not can_transition(SessionStatus.PROCESSING, SessionStatus.CANCELLED)

    def test_no_backwards_moves(self) -> None:
        assert not can_transition(SessionStatus.ACTIVE, SessionStatus.SCHEDULED)
        assert not can_transition(SessionStatus.COMPLETED, SessionStatus.ACTIVE)
        assert not can_transition(SessionStatus.PROCESSING, SessionStatus.ACTIVE)

    async def test_manager_refuses_transitions_outside_table(self, lifecycle, store) -> None:
        await _seed(store, SessionStatus.COMPLETED)

        with pytest.raises(ValueError):
            await lifecycle._transition(
                "m1", expected={SessionStatus.COMPLETED}, target=SessionStatus.ACTIVE
            )

        assert (await store.get("m1")).status == SessionStatus.COMPLETED

    def test_terminal_states(self) -> None:
        assert ALLOWED_TRANSITIONS[SessionStatus.COMPLETED] == frozenset()
        assert ALLOWED_TRANSITIONS[SessionStatus.CANCELLED] == frozenset()


class TestSessionStarted:
    """Tests for on_session_started."""

    async def test_scheduled_becomes_active(self, lifecycle, store) -> None:
        await _seed(store, SessionStatus.SCHEDULED)

        session = await lifecycle.on_session_started("m1")

        assert session.status == SessionStatus.ACTIVE
        assert session.started_at is not None
        stored = await store.get("m1")
        assert stored is not None and stored.status == SessionStatus.ACTIVE

    @pytest.mark.parametrize(
        "status",
        [
            SessionStatus.ACTIVE,
            SessionStatus.PROCESSING,
            SessionStatus.COMPLETED,
            SessionStatus.CANCELLED,
        ],
    )
    async def test_other_statuses_are_not_found(self, lifecycle, store, status) -> None:
        await _seed(store, status)

        with pytest.raises(SessionNotFoundError):
            await lifecycle.on_session_started("m1")

        stored = await store.get("m1")
        assert stored is not None and stored.status == status
        assert stored.started_at is None

    async def test_unknown_session_is_not_found(self, lifecycle) -> None:
        with pytest.raises(SessionNotFoundError):
            await lifecycle.on_session_started("missing")

    async def test_store_failure_is_downstream(self, bridges, jobs) -> None:
        store = AsyncMock()
        store.compare_and_set_status.side_effect = ConnectionError("db down")
        lifecycle = LifecycleManager(store, bridges, jobs)

        with pytest.raises(DownstreamError):
            await lifecycle.on_session_started("m1")


class TestSessionEnded:
    """Tests for on_session_ended."""

    async def test_active_becomes_processing(self, lifecycle, store) -> None:
        await _seed(store, SessionStatus.ACTIVE)

        session = await lifecycle.on_session_ended("m1")

        assert session is not None
        assert session.status == SessionStatus.PROCESSING
        assert session.ended_at is not None

    async def test_non_active_is_noop(self, lifecycle, store) -> None:
        await _seed(store, SessionStatus.SCHEDULED)

        assert await lifecycle.on_session_ended("m1") is None
        stored = await store.get("m1")
        assert stored is not None and stored.status == SessionStatus.SCHEDULED

    async def test_unknown_session_is_noop(self, lifecycle) -> None:
        assert await lifecycle.on_session_ended("missing") is None

    async def test_concurrent_deliveries_apply_once(self, lifecycle, store) -> None:
        await _seed(store, SessionStatus.ACTIVE)

        results = await asyncio.gather(
            lifecycle.on_session_ended("m1"),
            lifecycle.on_session_ended("m1"),
        )

        applied = [r for r in results if r is not None]
        assert len(applied) == 1
        stored = await store.get("m1")
        assert stored is not None and stored.status == SessionStatus.PROCESSING


class TestParticipantLeft:
    """Tests for on_participant_left."""

    async def test_ends_bridge(self, lifecycle, bridges) -> None:
        await bridges.open_bridge("m1", "persona-1")

        await lifecycle.on_participant_left("m1")

        assert "m1" not in bridges.bridges
        assert bridges.ended == ["m1"]

    async def test_repeat_is_harmless(self, lifecycle, bridges) -> None:
        await lifecycle.on_participant_left("m1")
        await lifecycle.on_participant_left("m1")
        assert bridges.ended == ["m1", "m1"]

    async def test_bridge_failure_is_downstream(self, store, jobs) -> None:
        bridges = AsyncMock()
        bridges.end_bridge.side_effect = RealtimeBridgeError("boom")
        lifecycle = LifecycleManager(store, bridges, jobs)

        with pytest.raises(DownstreamError):
            await lifecycle.on_participant_left("m1")


class TestTranscriptReady:
    """Tests for on_transcript_ready."""

    async def test_attaches_url_and_enqueues_summary(self, lifecycle, store, jobs) -> None:
        await _seed(store, SessionStatus.PROCESSING)

        session = await lifecycle.on_transcript_ready("m1", "https://x/t.jsonl")

        assert session.transcript_url == "https://x/t.jsonl"
        assert session.status == SessionStatus.PROCESSING
        assert jobs.jobs == [
            (SUMMARY_JOB_NAME, {"meetingId": "m1", "transcriptUrl": "https://x/t.jsonl"})
        ]

    async def test_attaches_regardless_of_status(self, lifecycle, store) -> None:
        await _seed(store, SessionStatus.COMPLETED)

        session = await lifecycle.on_transcript_ready("m1", "https://x/t2.jsonl")

        assert session.transcript_url == "https://x/t2.jsonl"
        assert session.status == SessionStatus.COMPLETED

    async def test_unknown_session_is_not_found(self, lifecycle, jobs) -> None:
        with pytest.raises(SessionNotFoundError):
            await lifecycle.on_transcript_ready("missing", "https://x/t.jsonl")
        assert jobs.jobs == []

    async def test_enqueue_failure_is_downstream(self, store, bridges) -> None:
        await _seed(store, SessionStatus.PROCESSING)
        jobs = AsyncMock()
        jobs.enqueue.side_effect = JobQueueError("hatchet down")
        lifecycle = LifecycleManager(store, bridges, jobs)

        with pytest.raises(DownstreamError):
            await lifecycle.on_transcript_ready("m1", "https://x/t.jsonl")


class TestRecordingReady:
    """Tests for on_recording_ready."""

    async def test_attaches_url(self, lifecycle, store) -> None:
        await _seed(store, SessionStatus.PROCESSING)

        session = await lifecycle.on_recording_ready("m1", "https://x/r.mp4")

        assert session is not None
        assert session.recording_url == "https://x/r.mp4"

    async def test_unknown_session_is_noop(self, lifecycle) -> None:
        assert await lifecycle.on_recording_ready("missing", "https://x/r.mp4") is None
