"""
CORS middleware configuration for the PushLedger API.

Allows any origin to call the API, matching the permissive defaults the
service has always shipped with.  Credentials are not allowed.
"""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware


def add_cors(app: FastAPI) -> None:
    """Attach CORS middleware allowing all origins."""
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )
