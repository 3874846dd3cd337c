"""
FastAPI dependency injection providers for the PushLedger API.

The ledger and dispatch service are created once per application in the
lifespan handler and stored on ``app.state``; routes receive them
through these ``Depends()`` callables.
"""

from __future__ import annotations

from fastapi import Request

from notifier.dispatcher import DispatchService
from notifier.ledger import Ledger


def get_ledger(request: Request) -> Ledger:
    """Return the application's :class:`Ledger`."""
    return request.app.state.ledger


def get_dispatch_service(request: Request) -> DispatchService:
    """Return the application's :class:`DispatchService`."""
    return request.app.state.dispatch
