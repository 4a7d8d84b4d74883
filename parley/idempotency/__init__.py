"""Idempotency guards for redelivered webhook events."""

from parley.idempotency.dedupe import DEDUPE_TTL_SECONDS, DedupeCache

__all__ = ["DEDUPE_TTL_SECONDS", "DedupeCache"]
