"""Workflow enqueue contract.

enqueue(job_name, payload) is fire-and-forget from this service's point of
view; consumers are assumed to tolerate at-least-once delivery.
"""

import asyncio
from abc import ABC, abstractmethod
from typing import Any

from parley.jobs.client import HatchetClient
from parley.observability.logging import get_logger

logger = get_logger(__name__)

# Consumed by the summary workflow, which later sets status=completed and summary
SUMMARY_JOB_NAME = "meetings/processing"


class JobQueueError(Exception):
    """Raised when a job cannot be handed to the workflow engine."""

    pass


class JobQueue(ABC):
    """Abstract interface for enqueueing background jobs."""

    @abstractmethod
    async def enqueue(self, job_name: str, payload: dict[str, Any]) -> None:
        """Hand a job to the workflow engine."""
        pass


class HatchetJobQueue(JobQueue):
    """Pushes job trigger events to Hatchet."""

    def __init__(self, client: HatchetClient) -> None:
        self._client = client

    async def enqueue(self, job_name: str, payload: dict[str, Any]) -> None:
        hatchet = self._client.get_client()
        if hatchet is None:
            raise JobQueueError(f"Hatchet unavailable, cannot enqueue {job_name}")

        try:
            # The SDK's push is blocking; keep it off the event loop
            await asyncio.to_thread(hatchet.event.push, job_name, payload)
        except Exception as e:
            raise JobQueueError(f"Failed to enqueue {job_name}: {e}") from e

        logger.info("job_enqueued", job_name=job_name)


class InMemoryJobQueue(JobQueue):
    """Records enqueued jobs; for tests and local development."""

    def __init__(self) -> None:
        self.jobs: list[tuple[str, dict[str, Any]]] = []

    async def enqueue(self, job_name: str, payload: dict[str, Any]) -> None:
        self.jobs.append((job_name, dict(payload)))
        logger.debug("job_enqueued_inmemory", job_name=job_name)
