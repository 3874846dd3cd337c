"""
Health check API router for PushLedger.

Reports whether the ledger file is readable and writable, together with
the gateway state and the outcome of the last ledger write.
"""

from __future__ import annotations

import os

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    status: str
    storage: str
    gateway: str
    records: int
    last_write: str


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request):
    ledger = request.app.state.ledger
    gateway = request.app.state.gateway
    path = ledger.path

    if not (path.is_file() and os.access(path, os.R_OK | os.W_OK)):
        return JSONResponse(
            status_code=500,
            content={
                "status": "error",
                "error": "Storage inaccessible",
                "details": f"{path} is not a readable and writable file",
            },
        )

    last = ledger.last_persist
    if last is None:
        last_write = "none"
    else:
        last_write = "ok" if last.ok else "failed"

    return HealthResponse(
        status="ok",
        storage="accessible",
        gateway="enabled" if gateway.enabled else "disabled",
        records=len(ledger),
        last_write=last_write,
    )
