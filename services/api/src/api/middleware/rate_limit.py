"""
Rate limiting middleware for the PushLedger API.

Enforces a per-client request budget (default 100 requests per
15 minutes) on the notification and health endpoints.
"""

from __future__ import annotations

import time
from collections import deque
from typing import Any

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import JSONResponse, Response

DEFAULT_LIMIT = 100  # requests
DEFAULT_WINDOW = 15 * 60  # seconds

# Path prefixes subject to rate limiting.
_LIMITED_PREFIXES: tuple[str, ...] = ("/notifications", "/health")


class RateLimitMiddleware(BaseHTTPMiddleware):
    """In-memory sliding-window rate limiter keyed by client address.

    State lives in the process; each worker enforces its own budget.
    """

    def __init__(
        self,
        app: Any,
        limit: int = DEFAULT_LIMIT,
        window: int = DEFAULT_WINDOW,
        clock: Any = time.monotonic,
    ) -> None:
        super().__init__(app)
        self._limit = limit
        self._window = window
        self._clock = clock
        self._hits: dict[str, deque[float]] = {}
        self._last_sweep = clock()

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint,
    ) -> Response:
        if not request.url.path.startswith(_LIMITED_PREFIXES):
            return await call_next(request)

        client = request.client.host if request.client else "anonymous"
        remaining = self._take(f"rate:{client}")
        if remaining < 0:
            return JSONResponse(
                status_code=429,
                content={"detail": "Too many requests from this IP, please try again later"},
                headers={"Retry-After": str(self._window)},
            )

        response = await call_next(request)
        response.headers["RateLimit-Limit"] = str(self._limit)
        response.headers["RateLimit-Remaining"] = str(remaining)
        return response

    def _take(self, bucket: str) -> int:
        """Record a hit and return how many requests remain.

        A rejected request (negative result) is not recorded, so a client
        that keeps hammering still regains its budget as old hits age out.
        """
        now = self._clock()
        window_start = now - self._window
        self._sweep(now, window_start)

        hits = self._hits.setdefault(bucket, deque())
        while hits and hits[0] <= window_start:
            hits.popleft()
        if len(hits) >= self._limit:
            return -1
        hits.append(now)
        return self._limit - len(hits)

    def _sweep(self, now: float, window_start: float) -> None:
        """Drop buckets whose newest hit has left the window (once per window)."""
        if now - self._last_sweep < self._window:
            return
        self._last_sweep = now
        idle = [key for key, hits in self._hits.items() if not hits or hits[-1] <= window_start]
        for key in idle:
            del self._hits[key]
