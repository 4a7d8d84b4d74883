"""Background job hand-off.

Post-session work (summary generation) runs in Hatchet. This service only
enqueues the trigger through JobQueue.

Usage:
    from parley.jobs import HatchetClient, HatchetJobQueue

    queue = HatchetJobQueue(HatchetClient(config))
    await queue.enqueue("meetings/processing", {"meetingId": "abc"})
"""

from parley.jobs.client import HatchetClient
from parley.jobs.queue import (
    SUMMARY_JOB_NAME,
    HatchetJobQueue,
    InMemoryJobQueue,
    JobQueue,
    JobQueueError,
)

__all__ = [
    "HatchetClient",
    "HatchetJobQueue",
    "InMemoryJobQueue",
    "JobQueue",
    "JobQueueError",
    "SUMMARY_JOB_NAME",
]
