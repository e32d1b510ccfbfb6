"""Middleware configuration for FastAPI application."""
from __future__ import annotations

import logging
import time
import uuid
from typing import TYPE_CHECKING

from fastapi import Request
from fastapi.middleware.cors import CORSMiddleware
from opentelemetry import trace
from starlette.middleware.base import BaseHTTPMiddleware

from smartdns_web.core.settings import get_app_settings, get_logging_settings
from smartdns_web.infra.logging import clear_log_context, set_log_context
from smartdns_web.infra.metrics.prometheus import (
    http_request_duration_seconds,
    http_requests_in_progress,
    http_requests_total,
)

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from fastapi import FastAPI
    from starlette.responses import Response

logger = logging.getLogger(__name__)


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Attach a request ID to the request, the response and the log context."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id

        clear_log_context()
        set_log_context(request_id=request_id, method=request.method, path=request.url.path)
        try:
            response = await call_next(request)
        finally:
            clear_log_context()

        response.headers["X-Request-ID"] = request_id
        return response


class MetricsMiddleware(BaseHTTPMiddleware):
    """Record HTTP request metrics and add the X-Process-Time header.

    Labels use the route template (``/v1/acl/ip/pool/{ip}``) rather than the
    raw path to keep cardinality low. Requests slower than the configured
    threshold are logged.
    """

    def __init__(self, app, slow_request_threshold: float | None = None) -> None:
        super().__init__(app)
        self.slow_request_threshold = slow_request_threshold

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        method = request.method
        endpoint = request.url.path
        http_requests_in_progress.labels(method=method, endpoint="*").inc()

        start_time = time.perf_counter()
        status_code = 500

        try:
            response = await call_next(request)
            status_code = response.status_code
            response.headers["X-Process-Time"] = f"{time.perf_counter() - start_time:.6f}"
            return response
        finally:
            duration = time.perf_counter() - start_time
            route = request.scope.get("route")
            if route is not None and hasattr(route, "path"):
                endpoint = route.path

            span = trace.get_current_span()
            exemplar = None
            if span and span.get_span_context().is_valid:
                exemplar = {"trace_id": format(span.get_span_context().trace_id, "032x")}

            http_request_duration_seconds.labels(method=method, endpoint=endpoint).observe(
                duration, exemplar=exemplar
            )
            http_requests_total.labels(
                method=method, endpoint=endpoint, status=str(status_code)
            ).inc(exemplar=exemplar)
            http_requests_in_progress.labels(method=method, endpoint="*").dec()

            if self.slow_request_threshold is not None and duration > self.slow_request_threshold:
                logger.warning(
                    "Slow request",
                    extra={
                        "path": request.url.path,
                        "method": method,
                        "status_code": status_code,
                        "duration": round(duration, 3),
                    },
                )


def configure_middleware(app: FastAPI) -> None:
    """Configure middleware for the application.

    Args:
        app: FastAPI application instance.
    """
    app_settings = get_app_settings()
    log_settings = get_logging_settings()

    if app_settings.cors_origins:
        logger.info("Configuring CORS", extra={"origins": app_settings.cors_origins})
        app.add_middleware(
            CORSMiddleware,
            allow_origins=app_settings.cors_origins,
            allow_credentials=app_settings.cors_allow_credentials,
            allow_methods=app_settings.cors_allow_methods,
            allow_headers=app_settings.cors_allow_headers,
            max_age=app_settings.cors_max_age,
        )

    app.add_middleware(
        MetricsMiddleware,
        slow_request_threshold=(
            log_settings.slow_request_threshold if log_settings.log_slow_requests else None
        ),
    )

    # Added last so it runs first and the context covers every other middleware
    if log_settings.include_request_id:
        app.add_middleware(RequestIDMiddleware)
