"""Per-request trace id propagation via contextvars.

The gateway opens a trace scope for every request (honouring an inbound
X-Trace-Id header); the router and error logger read it back so a failed
capability call can be matched to the HTTP request that triggered it.
"""

from __future__ import annotations

from collections.abc import Generator  # noqa: TC003 -- used at runtime by contextmanager
from contextlib import contextmanager
from contextvars import ContextVar
from uuid import uuid4

TRACE_HEADER = "X-Trace-Id"

_current_trace_id: ContextVar[str] = ContextVar("walsis_trace_id", default="")


def get_trace_id() -> str:
    """Return the current trace id (empty string outside a request)."""
    return _current_trace_id.get()


@contextmanager
def trace_context(trace_id: str | None = None) -> Generator[str, None, None]:
    """Bind a trace id for the duration of the block.

    A fresh hex id is generated when none (or an empty one) is supplied.
    The previous value is restored on exit, so nested scopes are safe.
    """
    effective_id = trace_id or uuid4().hex
    token = _current_trace_id.set(effective_id)
    try:
        yield effective_id
    finally:
        _current_trace_id.reset(token)
