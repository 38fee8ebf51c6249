"""Per-search correlation context shared by log records and spans."""

from __future__ import annotations

from contextvars import ContextVar
from uuid import uuid4


# Each search task sees its own ids and search fields
trace_context: ContextVar[dict | None] = ContextVar("trace_context", default=None)

SEARCH_FIELDS = ("base_path", "term")


def get_trace_context() -> dict:
    """Current correlation context; a fresh trace is started when none is bound."""
    ctx = trace_context.get()
    if ctx is None or not ctx.get("trace_id"):
        ctx = {"trace_id": uuid4().hex, "span_id": uuid4().hex[:16]}
        trace_context.set(ctx)
    return ctx


def bind_search_context(base_path: str, term: str) -> dict:
    """Attach the search being served to the current trace, keeping its ids."""
    ctx = {**get_trace_context(), "base_path": base_path, "term": term[:100]}
    trace_context.set(ctx)
    return ctx


def update_span_id(span_id: str) -> None:
    ctx = trace_context.get() or {}
    trace_context.set({**ctx, "span_id": span_id})
