"""Process-local dedupe cache for chat message deliveries.

The transport retries webhooks, so the same message id can arrive more than
once. Entries live in process memory only: they are lost on restart and
not shared across replicas.
"""

import threading
import time
from collections.abc import Callable

from parley.observability.logging import get_logger

logger = get_logger(__name__)

# Cache TTL in seconds (5 minutes)
DEDUPE_TTL_SECONDS = 300.0


class DedupeCache:
    """Time-bounded set of recently seen message ids.

    seen_recently is an atomic check-and-insert: for a given id, exactly one
    caller within the TTL gets False.
    """

    def __init__(
        self,
        ttl_seconds: float = DEDUPE_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the cache.

        Args:
            ttl_seconds: How long an id is remembered
            clock: Monotonic time source, injectable for tests
        """
        self._ttl_seconds = ttl_seconds
        self._clock = clock
        self._seen: dict[str, float] = {}
        self._lock = threading.Lock()

    @property
    def ttl_seconds(self) -> float:
        return self._ttl_seconds

    def _prune_expired(self, now: float) -> None:
        """Remove entries older than the TTL. Caller holds the lock."""
        expired = [
            key for key, seen_at in self._seen.items() if now - seen_at > self._ttl_seconds
        ]
        for key in expired:
            del self._seen[key]

    def seen_recently(self, message_id: str | None) -> bool:
        """Record message_id and report whether it was already present.

        Missing ids cannot be deduplicated; they are always treated as new
        and never recorded.
        """
        if not message_id:
            return False

        with self._lock:
            now = self._clock()
            self._prune_expired(now)

            if message_id in self._seen:
                logger.debug("dedupe_cache_hit", message_id=message_id)
                return True

            self._seen[message_id] = now
            return False

    def clear(self) -> None:
        with self._lock:
            self._seen.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._seen)
