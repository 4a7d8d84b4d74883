"""Session lifecycle state machine.

    scheduled -> active -> processing -> completed
    scheduled | active -> cancelled

Every status change is a compare-and-set against the store, so duplicate or
concurrent deliveries of the same event converge to one transition. The
move to completed, and the summary, belong to the summary workflow; this
module only enqueues it.
"""

from collections.abc import Collection, Mapping

from parley.api.exceptions import DownstreamError, SessionNotFoundError
from parley.db.errors import StoreError
from parley.jobs.queue import SUMMARY_JOB_NAME, JobQueue, JobQueueError
from parley.observability.logging import get_logger
from parley.observability.metrics import SESSION_TRANSITIONS
from parley.providers.realtime.base import RealtimeBridgeError, RealtimeBridgeProvider
from parley.sessions.models import Session, SessionStatus, utc_now
from parley.sessions.store import SessionStore

logger = get_logger(__name__)

ALLOWED_TRANSITIONS: Mapping[SessionStatus, frozenset[SessionStatus]] = {
    SessionStatus.SCHEDULED: frozenset({SessionStatus.ACTIVE, SessionStatus.CANCELLED}),
    SessionStatus.ACTIVE: frozenset({SessionStatus.PROCESSING, SessionStatus.CANCELLED}),
    SessionStatus.PROCESSING: frozenset({SessionStatus.COMPLETED}),
    SessionStatus.COMPLETED: frozenset(),
    SessionStatus.CANCELLED: frozenset(),
}


def can_transition(current: SessionStatus, target: SessionStatus) -> bool:
    """Whether the lifecycle permits moving from current to target."""
    return target in ALLOWED_TRANSITIONS.get(current, frozenset())


class LifecycleManager:
    """Applies lifecycle events to sessions.

    Collaborator failures are re-raised as DownstreamError; a missing
    session is SessionNotFoundError where the event requires one.
    """

    def __init__(
        self,
        session_store: SessionStore,
        bridge_provider: RealtimeBridgeProvider,
        job_queue: JobQueue,
    ) -> None:
        self._sessions = session_store
        self._bridges = bridge_provider
        self._jobs = job_queue

    async def _transition(
        self,
        session_id: str,
        expected: Collection[SessionStatus],
        target: SessionStatus,
        **fields: object,
    ) -> Session | None:
        """Compare-and-set a transition permitted by ALLOWED_TRANSITIONS.

        Raises:
            ValueError: Some expected status may not move to target
            DownstreamError: The store failed
        """
        forbidden = [s.value for s in expected if not can_transition(s, target)]
        if forbidden:
            raise ValueError(f"Transition to {target.value} not allowed from {forbidden}")

        try:
            return await self._sessions.compare_and_set_status(
                session_id, expected=expected, target=target, **fields
            )
        except StoreError as e:
            raise DownstreamError("Failed to update session") from e

    async def on_session_started(self, session_id: str) -> Session:
        """Move scheduled -> active and stamp started_at.

        Raises:
            SessionNotFoundError: No scheduled session with this id
        """
        session = await self._transition(
            session_id,
            expected={SessionStatus.SCHEDULED},
            target=SessionStatus.ACTIVE,
            started_at=utc_now(),
        )

        if session is None:
            SESSION_TRANSITIONS.labels(event="session_started", outcome="not_found").inc()
            logger.info(
                "session_transition_rejected",
                session_id=session_id,
                event="session_started",
            )
            raise SessionNotFoundError("Session not found or not scheduled")

        SESSION_TRANSITIONS.labels(event="session_started", outcome="applied").inc()
        logger.info(
            "session_transition_applied",
            session_id=session_id,
            event="session_started",
            status=session.status.value,
        )
        return session

    async def on_participant_left(self, session_id: str) -> None:
        """End the session's realtime bridge. Safe to repeat."""
        try:
            await self._bridges.end_bridge(session_id)
        except RealtimeBridgeError as e:
            raise DownstreamError("Failed to end realtime bridge") from e

        logger.info("realtime_bridge_ended", session_id=session_id)

    async def on_session_ended(self, session_id: str) -> Session | None:
        """Move active -> processing and stamp ended_at.

        A session in any other status (or no session) is left untouched.
        """
        session = await self._transition(
            session_id,
            expected={SessionStatus.ACTIVE},
            target=SessionStatus.PROCESSING,
            ended_at=utc_now(),
        )

        if session is None:
            SESSION_TRANSITIONS.labels(event="session_ended", outcome="noop").inc()
            logger.info(
                "session_transition_noop",
                session_id=session_id,
                event="session_ended",
            )
            return None

        SESSION_TRANSITIONS.labels(event="session_ended", outcome="applied").inc()
        logger.info(
            "session_transition_applied",
            session_id=session_id,
            event="session_ended",
            status=session.status.value,
        )
        return session

    async def on_transcript_ready(self, session_id: str, transcript_url: str) -> Session:
        """Attach the transcript and enqueue the summary workflow.

        Raises:
            SessionNotFoundError: No session with this id
        """
        try:
            session = await self._sessions.update_fields(
                session_id, transcript_url=transcript_url
            )
        except StoreError as e:
            raise DownstreamError("Failed to update session") from e

        if session is None:
            SESSION_TRANSITIONS.labels(event="transcript_ready", outcome="not_found").inc()
            raise SessionNotFoundError("Session not found")

        try:
            await self._jobs.enqueue(
                SUMMARY_JOB_NAME,
                {"meetingId": session_id, "transcriptUrl": transcript_url},
            )
        except JobQueueError as e:
            raise DownstreamError("Failed to enqueue summary job") from e

        SESSION_TRANSITIONS.labels(event="transcript_ready", outcome="applied").inc()
        logger.info(
            "summary_job_enqueued",
            session_id=session_id,
            job_name=SUMMARY_JOB_NAME,
        )
        return session

    async def on_recording_ready(self, session_id: str, recording_url: str) -> Session | None:
        """Attach the recording. An unknown session is a no-op."""
        try:
            session = await self._sessions.update_fields(
                session_id, recording_url=recording_url
            )
        except StoreError as e:
            raise DownstreamError("Failed to update session") from e

        if session is None:
            SESSION_TRANSITIONS.labels(event="recording_ready", outcome="noop").inc()
            logger.info("recording_for_unknown_session", session_id=session_id)
            return None

        SESSION_TRANSITIONS.labels(event="recording_ready", outcome="applied").inc()
        logger.info("recording_attached", session_id=session_id)
        return session
