"""Observability module for tracing, metrics, and structured logging."""

from content_discovery.observability.context import bind_search_context, get_trace_context, trace_context
from content_discovery.observability.logging import JsonFormatter, configure_logging
from content_discovery.observability.metrics import (
    REPOSITORY_CALLS,
    REQUEST_COUNT,
    REQUEST_LATENCY,
    SEARCH_LATENCY,
    STRATEGY_RUNS,
    get_metrics,
    get_metrics_content_type,
    track_latency,
)
from content_discovery.observability.tracing import create_span, get_tracer, init_tracing


__all__ = [
    "REPOSITORY_CALLS",
    "REQUEST_COUNT",
    "REQUEST_LATENCY",
    "SEARCH_LATENCY",
    "STRATEGY_RUNS",
    "JsonFormatter",
    "bind_search_context",
    "configure_logging",
    "create_span",
    "get_metrics",
    "get_metrics_content_type",
    "get_trace_context",
    "get_tracer",
    "init_tracing",
    "trace_context",
    "track_latency",
]
