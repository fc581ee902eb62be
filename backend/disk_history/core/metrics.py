"""Prometheus metrics instrumentation."""

from __future__ import annotations

from fastapi import Response
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

REGISTRY = CollectorRegistry()

HISTORY_QUERIES = Counter(
    "dskh_history_queries_total",
    "History queries by item kind and outcome",
    labelnames=("kind", "outcome"),
    registry=REGISTRY,
)

HISTORY_LATENCY = Histogram(
    "dskh_history_latency_seconds",
    "Time spent answering a history query",
    labelnames=("kind",),
    registry=REGISTRY,
)

CLOSURE_RECORDS = Histogram(
    "dskh_closure_records",
    "Snapshot records loaded for one subtree reconstruction",
    buckets=(1, 10, 100, 1_000, 10_000, 100_000, 1_000_000),
    registry=REGISTRY,
)

RECONSTRUCTION_INSTANTS = Histogram(
    "dskh_reconstruction_instants",
    "Distinct instants replayed for one subtree reconstruction",
    buckets=(1, 10, 100, 1_000, 10_000, 100_000),
    registry=REGISTRY,
)

IMPORTED_ITEMS = Counter(
    "dskh_imported_items_total",
    "Items applied by imports",
    labelnames=("type",),
    registry=REGISTRY,
)


def metrics_response() -> Response:
    """Return Prometheus metrics as an HTTP response."""
    payload = generate_latest(REGISTRY)
    return Response(content=payload, media_type=CONTENT_TYPE_LATEST)


__all__ = [
    "REGISTRY",
    "HISTORY_QUERIES",
    "HISTORY_LATENCY",
    "CLOSURE_RECORDS",
    "RECONSTRUCTION_INSTANTS",
    "IMPORTED_ITEMS",
    "metrics_response",
]
