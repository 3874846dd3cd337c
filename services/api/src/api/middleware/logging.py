"""
Request logging middleware for the PushLedger API.

Logs every request with method, path, status and latency, and records
the latency in the ``api_request_duration_seconds`` histogram labelled
by route template rather than raw path.
"""

from __future__ import annotations

import time

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from pn_common.metrics import api_request_duration_seconds

logger = structlog.get_logger(__name__)


class LoggingMiddleware(BaseHTTPMiddleware):
    """Log every HTTP request with method, path, status, and latency."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint,
    ) -> Response:
        start = time.monotonic()
        response = await call_next(request)
        duration = time.monotonic() - start

        route = request.scope.get("route")
        endpoint = getattr(route, "path", "unmatched")
        api_request_duration_seconds.labels(
            method=request.method, endpoint=endpoint,
        ).observe(duration)

        logger.info(
            "http_request",
            method=request.method,
            path=request.url.path,
            status=response.status_code,
            duration_ms=round(duration * 1000, 2),
        )
        return response
