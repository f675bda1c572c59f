"""Prometheus metrics utilities."""

from __future__ import annotations

from prometheus_client import CollectorRegistry, Counter

metrics_registry = CollectorRegistry()

REQUEST_COUNTER = Counter(
    "smart_planogram_api_requests_total",
    "Total number of API requests handled",
    registry=metrics_registry,
)

MUTATION_COUNTER = Counter(
    "smart_planogram_mutations_total",
    "Planogram and category operations by outcome",
    labelnames=("operation", "outcome"),
    registry=metrics_registry,
)


def record_mutation(operation: str, outcome: str = "ok") -> None:
    """Count one service operation; ``outcome`` is ``ok`` or an error code."""

    MUTATION_COUNTER.labels(operation=operation, outcome=outcome).inc()
