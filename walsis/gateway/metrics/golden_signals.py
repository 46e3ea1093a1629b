"""HTTP golden signals middleware.

Latency (histogram), traffic (counter), errors (5xx counter) and
saturation (in-flight gauge), labelled by method, matched route template
and status. Assistant traffic shows up under "/api/v1/assistant" and the
legacy "/api/server" alias as separate series.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

from prometheus_client import Counter, Gauge, Histogram

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from fastapi import Request, Response

REQUEST_DURATION = Histogram(
    "walsis_http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "path", "status_code"],
    buckets=(0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0),
)

REQUEST_TOTAL = Counter(
    "walsis_http_requests",
    "Total HTTP requests",
    ["method", "path", "status_code"],
)

ERROR_TOTAL = Counter(
    "walsis_http_errors",
    "Total HTTP error responses (5xx)",
    ["method", "path", "status_code"],
)

ACTIVE_REQUESTS = Gauge(
    "walsis_http_active_requests",
    "Number of in-flight HTTP requests",
    ["method"],
)

_EXEMPT_PATHS = frozenset({"/metrics", "/healthz"})
UNMATCHED_ROUTE = "other"


def _route_label(request: Request) -> str:
    """Label by the matched route template so path params and unknown URLs
    cannot grow label cardinality.

    FastAPI stores the matched ``APIRoute`` in the shared ASGI scope during
    routing; requests that matched nothing (404s, redirects, scanners) carry
    no route and collapse to ``UNMATCHED_ROUTE``.
    """
    route = request.scope.get("route")
    template = getattr(route, "path", None)
    return template if isinstance(template, str) else UNMATCHED_ROUTE


async def golden_signals_middleware(
    request: Request,
    call_next: Callable[[Request], Awaitable[Response]],
) -> Response:
    if request.url.path in _EXEMPT_PATHS:
        return await call_next(request)

    method = request.method

    ACTIVE_REQUESTS.labels(method=method).inc()
    start = time.monotonic()
    try:
        response = await call_next(request)
    except Exception:
        labels = {"method": method, "path": _route_label(request), "status_code": "500"}
        REQUEST_DURATION.labels(**labels).observe(time.monotonic() - start)
        REQUEST_TOTAL.labels(**labels).inc()
        ERROR_TOTAL.labels(**labels).inc()
        raise
    finally:
        ACTIVE_REQUESTS.labels(method=method).dec()

    labels = {
        "method": method,
        "path": _route_label(request),
        "status_code": str(response.status_code),
    }
    REQUEST_DURATION.labels(**labels).observe(time.monotonic() - start)
    REQUEST_TOTAL.labels(**labels).inc()
    if response.status_code >= 500:
        ERROR_TOTAL.labels(**labels).inc()
    return response
