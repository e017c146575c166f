"""Prometheus metrics for search latency and index rebuilds."""

from __future__ import annotations

from contextlib import contextmanager
import time
from typing import TYPE_CHECKING

from prometheus_client import CONTENT_TYPE_LATEST, Counter, Gauge, Histogram, generate_latest


if TYPE_CHECKING:
    from collections.abc import Generator


SEARCH_LATENCY = Histogram(
    "resource_search_latency_seconds",
    "Search query latency (parse, match, rank)",
    ["operation"],
    buckets=(0.0005, 0.001, 0.0025, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25),
)

SEARCH_REQUESTS = Counter(
    "resource_search_requests_total",
    "Search and suggestion calls",
    ["operation", "outcome"],
)

INDEX_REBUILDS = Counter(
    "resource_search_index_rebuilds_total",
    "Index generation builds",
    ["outcome"],
)

INDEX_BUILD_LATENCY = Histogram(
    "resource_search_index_build_seconds",
    "Time spent building one index generation",
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0),
)

INDEX_RESOURCE_COUNT = Gauge(
    "resource_search_index_resources",
    "Resources in the published index generation",
)


@contextmanager
def track_latency(histogram: Histogram, **labels: str) -> Generator[None, None, None]:
    """Context manager to track operation latency."""
    start = time.perf_counter()
    try:
        yield
    finally:
        target = histogram.labels(**labels) if labels else histogram
        target.observe(time.perf_counter() - start)


def get_metrics() -> bytes:
    """Generate Prometheus metrics output."""
    return generate_latest()


def get_metrics_content_type() -> str:
    """Get content type for a metrics endpoint."""
    return CONTENT_TYPE_LATEST
