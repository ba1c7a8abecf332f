"""
Metrics instrumentation for observability.
Exposes Prometheus-compatible metrics at /metrics endpoint.
"""

from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Response

# Server action metrics
action_calls = Counter(
    'event_actions_total',
    'Server action invocations',
    ['action', 'outcome']  # outcome: success or an error code
)

action_latency = Histogram(
    'event_action_latency_seconds',
    'Server action latency',
    ['action'],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5]
)

# Lazily created catalog rows
catalog_rows_created = Counter(
    'catalog_rows_created_total',
    'Sports and venues created on first reference',
    ['kind']  # table name: sports, venues
)

# Cache metrics
cache_operations = Counter(
    'cache_operations_total',
    'Cache operations',
    ['operation', 'result']  # get/set, hit/miss
)

cache_invalidations = Counter(
    'cache_invalidations_total',
    'Dashboard cache invalidations'
)


def metrics_endpoint() -> Response:
    """Prometheus metrics endpoint."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


def record_action(action: str, outcome: str, duration: float):
    """Record a finished server action and how long it took."""
    action_calls.labels(action=action, outcome=outcome).inc()
    action_latency.labels(action=action).observe(duration)


def record_catalog_insert(kind: str):
    catalog_rows_created.labels(kind=kind).inc()


def record_cache_operation(operation: str, hit: bool):
    """Record cache operation."""
    result = "hit" if hit else "miss"
    cache_operations.labels(operation=operation, result=result).inc()
