"""Prometheus metrics for ledger operations and store calls."""
from __future__ import annotations

from prometheus_client import Counter, Histogram

OPERATION_COUNTER = Counter(
    "pantry_ledger_operations_total",
    "Ledger operations handled, by outcome",
    ("operation", "outcome"),
)

OPERATION_DURATION = Histogram(
    "pantry_ledger_operation_seconds",
    "Ledger operation latency, including time spent waiting for the item lock",
    ("operation",),
    buckets=(0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0),
)

STORE_RETRIES = Counter(
    "pantry_store_retries_total",
    "Record store calls retried after a failure or timeout",
    ("call",),
)

STORE_FAILURES = Counter(
    "pantry_store_failures_total",
    "Record store calls that failed or timed out",
    ("call",),
)


def record_operation(operation: str, outcome: str, duration_seconds: float) -> None:
    """Record a completed ledger operation."""
    OPERATION_COUNTER.labels(operation=operation, outcome=outcome).inc()
    OPERATION_DURATION.labels(operation=operation).observe(duration_seconds)


def record_retry(call: str) -> None:
    STORE_RETRIES.labels(call=call).inc()


def record_store_failure(call: str) -> None:
    STORE_FAILURES.labels(call=call).inc()


__all__ = [
    "record_operation",
    "record_retry",
    "record_store_failure",
]
