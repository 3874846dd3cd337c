"""
FastAPI application entry point for the PushLedger API.

Creates and configures the FastAPI app, registers routers and
middleware, and wires the ledger, gateway client and dispatch service
in the startup/shutdown lifespan.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from prometheus_client import make_asgi_app

from api.middleware.cors import add_cors
from api.middleware.logging import LoggingMiddleware
from api.middleware.rate_limit import RateLimitMiddleware
from api.routers import health, notifications
from notifier.dispatcher import DispatchService
from notifier.errors import NotFoundError
from notifier.gateway.client import GatewayClient, GatewayConfig
from notifier.ledger import Ledger
from pn_common.config import Settings, get_settings
from pn_common.logging import configure_logging

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup / shutdown lifecycle."""
    # — Startup —
    settings: Settings = app.state.settings
    configure_logging(settings.log_level, settings.log_json)

    if app.state.ledger is None:
        app.state.ledger = Ledger.open(settings.data_file)
    if app.state.gateway is None:
        app.state.gateway = GatewayClient(GatewayConfig.from_settings(settings))
    app.state.dispatch = DispatchService(
        app.state.ledger,
        app.state.gateway,
        sound=settings.default_sound,
        priority=settings.default_priority,
    )
    await app.state.gateway.start()

    logger.info(
        "api_started",
        port=settings.api_port,
        data_file=str(app.state.ledger.path),
        gateway="enabled" if app.state.gateway.enabled else "disabled",
    )

    yield

    # — Shutdown —
    await app.state.gateway.aclose()
    logger.info("api_stopped")


async def _not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"detail": "Notification not found"})


def create_app(
    settings: Settings | None = None,
    *,
    ledger: Ledger | None = None,
    gateway: GatewayClient | None = None,
) -> FastAPI:
    """Build and return the fully-configured FastAPI application.

    Args:
        settings: Configuration; defaults to :func:`get_settings`.
        ledger: Pre-built ledger; opened from ``settings.data_file`` if omitted.
        gateway: Pre-built gateway client; built from settings if omitted.
    """
    settings = settings or get_settings()
    app = FastAPI(
        title="PushLedger API",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.ledger = ledger
    app.state.gateway = gateway
    app.state.dispatch = None

    app.include_router(notifications.router)
    app.include_router(health.router)

    # Prometheus metrics endpoint
    app.mount("/metrics", make_asgi_app())

    app.add_exception_handler(NotFoundError, _not_found_handler)

    # ── Middleware (last added runs outermost) ──
    app.add_middleware(
        RateLimitMiddleware,
        limit=settings.rate_limit,
        window=settings.rate_window,
    )
    app.add_middleware(LoggingMiddleware)
    add_cors(app)

    return app


def run() -> None:
    """Serve the API with uvicorn using the configured host and port."""
    settings = get_settings()
    uvicorn.run(
        create_app(settings),
        host=settings.api_host,
        port=settings.api_port,
        reload=False,
    )


if __name__ == "__main__":
    run()
