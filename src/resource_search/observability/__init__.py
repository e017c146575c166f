"""Observability module: structured logging, Prometheus metrics and OpenTelemetry tracing."""

from resource_search.observability.context import bind_span, get_trace_context, unbind_span
from resource_search.observability.logging import JsonFormatter, configure_logging
from resource_search.observability.metrics import (
    INDEX_BUILD_LATENCY,
    INDEX_REBUILDS,
    INDEX_RESOURCE_COUNT,
    SEARCH_LATENCY,
    SEARCH_REQUESTS,
    get_metrics,
    get_metrics_content_type,
    track_latency,
)
from resource_search.observability.tracing import create_span, get_tracer, init_tracing


__all__ = [
    "INDEX_BUILD_LATENCY",
    "INDEX_REBUILDS",
    "INDEX_RESOURCE_COUNT",
    "SEARCH_LATENCY",
    "SEARCH_REQUESTS",
    "JsonFormatter",
    "bind_span",
    "configure_logging",
    "create_span",
    "get_metrics",
    "get_metrics_content_type",
    "get_trace_context",
    "get_tracer",
    "init_tracing",
    "track_latency",
    "unbind_span",
]
