"""Prometheus metrics for Parley.

Counters and histograms for webhook traffic, lifecycle transitions,
dedupe suppression and completion latency.
"""

from prometheus_client import Counter, Histogram

# Webhook metrics
WEBHOOK_EVENTS = Counter(
    "parley_webhook_events_total",
    "Inbound webhook events by kind and outcome",
    labelnames=["kind", "outcome"],
)

DEDUPE_SUPPRESSED = Counter(
    "parley_dedupe_suppressed_total",
    "Chat-message deliveries suppressed as duplicates",
)

# Lifecycle metrics
SESSION_TRANSITIONS = Counter(
    "parley_session_transitions_total",
    "Session lifecycle transitions by triggering event and outcome",
    labelnames=["event", "outcome"],
)

LIVE_ACTIVATION_FAILURES = Counter(
    "parley_live_activation_failures_total",
    "Realtime bridge activations that failed after the session went active",
)

# LLM metrics
COMPLETION_LATENCY = Histogram(
    "parley_completion_latency_seconds",
    "Latency of grounded completion requests",
    labelnames=["model"],
    buckets=(0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0),
)

# Error metrics
ERRORS = Counter(
    "parley_errors_total",
    "Total number of errors surfaced to webhook callers",
    labelnames=["error_type"],
)
