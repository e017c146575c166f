"""Context propagation for correlating log lines with the active search span."""

from __future__ import annotations

from contextvars import ContextVar, Token


trace_context: ContextVar[dict[str, str] | None] = ContextVar("trace_context", default=None)


def get_trace_context() -> dict[str, str]:
    """Trace and span ids of the active span, or an empty dict outside any span."""
    return trace_context.get() or {}


def bind_span(trace_id: str, span_id: str) -> Token:
    """Make ``trace_id``/``span_id`` visible to log records until :func:`unbind_span`."""
    return trace_context.set({"trace_id": trace_id, "span_id": span_id})


def unbind_span(token: Token) -> None:
    trace_context.reset(token)
