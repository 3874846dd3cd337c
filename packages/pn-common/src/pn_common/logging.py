"""
Structured logging setup for PushLedger.

Configures structlog for JSON-formatted structured logging across both
services. Every log line includes timestamp, level and event. Request or
notification context (path, notification_id) is bound at call time.
"""

from __future__ import annotations

import logging

import structlog


def configure_logging(level: str = "INFO", json_logs: bool = True) -> None:
    """Configure structlog for the current process.

    Args:
        level: Minimum level name (``DEBUG``, ``INFO``, ...).  Unknown
               names fall back to ``INFO``.
        json_logs: Emit JSON lines; ``False`` uses the colourless console
                   renderer, handy during local development.
    """
    level_no = logging.getLevelName(level.upper())
    if not isinstance(level_no, int):
        level_no = logging.INFO

    renderer: structlog.types.Processor
    if json_logs:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level_no),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )
