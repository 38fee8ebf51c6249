"""Prometheus metrics for search and repository golden signals."""

from __future__ import annotations

from contextlib import contextmanager
import time
from typing import TYPE_CHECKING

from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest


if TYPE_CHECKING:
    from collections.abc import Generator


REQUEST_LATENCY = Histogram(
    "content_discovery_request_latency_seconds",
    "MCP tool latency in seconds",
    ["tool"],
    buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0),
)

REQUEST_COUNT = Counter(
    "content_discovery_requests_total",
    "Total MCP tool requests",
    ["tool", "status"],
)

SEARCH_LATENCY = Histogram(
    "content_discovery_search_latency_seconds",
    "End-to-end search latency including validation retries",
    buckets=(0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
)

STRATEGY_RUNS = Counter(
    "content_discovery_strategy_runs_total",
    "Search strategies executed",
    ["strategy"],
)

REPOSITORY_CALLS = Counter(
    "content_discovery_repository_calls_total",
    "Repository listing calls issued by the orchestrator",
    ["operation", "status"],
)


@contextmanager
def track_latency(histogram: Histogram, **labels: str) -> Generator[None, None, None]:
    """Context manager to track operation latency."""
    start = time.perf_counter()
    target = histogram.labels(**labels) if labels else histogram
    try:
        yield
    finally:
        target.observe(time.perf_counter() - start)


def get_metrics() -> bytes:
    """Generate Prometheus metrics output."""
    return generate_latest()


def get_metrics_content_type() -> str:
    """Get content type for metrics endpoint."""
    return CONTENT_TYPE_LATEST
