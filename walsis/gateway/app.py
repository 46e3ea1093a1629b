"""FastAPI application factory.

- Uniform {error, message} JSON for every error path
- Trace id scope per request (X-Trace-Id in, X-Trace-Id out)
- Golden-signal metrics middleware
- /healthz and /metrics system routes
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from starlette.exceptions import HTTPException as StarletteHTTPException

from walsis.gateway.metrics.golden_signals import golden_signals_middleware
from walsis.shared.errors import (
    ProviderUnavailableError,
    ValidationError,
    WalsisError,
)
from walsis.shared.trace_context import TRACE_HEADER, trace_context

if TYPE_CHECKING:
    from contextlib import AbstractAsyncContextManager

logger = logging.getLogger(__name__)


def _error(status_code: int, code: str, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": code, "message": message})


def create_app(
    *,
    cors_origins: list[str] | None = None,
    lifespan: Callable[[FastAPI], AbstractAsyncContextManager[None]] | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application (routers mounted by caller)."""
    app = FastAPI(
        title="Walsis Assistant API",
        description="Intent-routed study and creative assistant",
        version="0.1.0",
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    if cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=cors_origins,
            allow_credentials=True,
            allow_methods=["GET", "POST"],
            allow_headers=["Content-Type", TRACE_HEADER],
        )

    # -- Error handlers --

    @app.exception_handler(RequestValidationError)
    async def _request_validation(_: Request, exc: RequestValidationError) -> JSONResponse:
        errors = exc.errors()
        message = str(errors[0].get("msg", "Invalid request")) if errors else "Invalid request"
        return _error(422, "VALIDATION", message.removeprefix("Value error, "))

    @app.exception_handler(ValidationError)
    async def _validation_error(_: Request, exc: ValidationError) -> JSONResponse:
        return _error(422, exc.code, str(exc))

    @app.exception_handler(ProviderUnavailableError)
    async def _provider_unavailable(_: Request, exc: ProviderUnavailableError) -> JSONResponse:
        return _error(503, exc.code, "Generation provider unavailable")

    @app.exception_handler(WalsisError)
    async def _walsis_error(_: Request, exc: WalsisError) -> JSONResponse:
        logger.error("Unhandled %s: %s", exc.code, exc)
        return _error(500, exc.code, "Error processing request.")

    @app.exception_handler(StarletteHTTPException)
    async def _http_exception(_: Request, exc: StarletteHTTPException) -> JSONResponse:
        code_map = {404: "NOT_FOUND", 405: "METHOD_NOT_ALLOWED"}
        return _error(
            exc.status_code,
            code_map.get(exc.status_code, "HTTP_ERROR"),
            str(exc.detail) if exc.detail else f"HTTP {exc.status_code}",
        )

    # -- Middleware (last registered runs first) --

    app.middleware("http")(golden_signals_middleware)

    @app.middleware("http")
    async def trace_middleware(
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        with trace_context(request.headers.get(TRACE_HEADER)) as trace_id:
            response = await call_next(request)
        response.headers[TRACE_HEADER] = trace_id
        return response

    # -- System routes --

    @app.get("/healthz", tags=["system"])
    async def healthz() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/metrics", tags=["system"], include_in_schema=False)
    async def metrics() -> Response:
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    return app
