"""Shared fixtures for notifier engine tests."""

from __future__ import annotations

import dataclasses
import re
from collections.abc import Callable
from pathlib import Path

import httpx
import pytest

from notifier.gateway.client import GatewayClient, GatewayConfig
from notifier.ledger import Ledger

USER_KEY = "uQiRzpo4DXghDmr9QzzfQu27cmVRsG"
API_TOKEN = "azGDORePK8gMaC0QOYAMyEEuzJnyUi"


# ─── Ledger ──────────────────────────────────────────────────


@pytest.fixture()
def ledger_path(tmp_path: Path) -> Path:
    return tmp_path / "assets" / "notifications.yaml"


@pytest.fixture()
def ledger(ledger_path: Path) -> Ledger:
    return Ledger.open(ledger_path)


# ─── Gateway ─────────────────────────────────────────────────


@pytest.fixture()
def gateway_config() -> GatewayConfig:
    return GatewayConfig(user_key=USER_KEY, api_token=API_TOKEN)


@pytest.fixture()
async def make_gateway(gateway_config: GatewayConfig):
    """Factory building a :class:`GatewayClient` wired to an ``httpx.MockTransport``."""
    built: list[GatewayClient] = []

    def _make(
        handler: Callable[[httpx.Request], httpx.Response],
        **overrides,
    ) -> GatewayClient:
        config = dataclasses.replace(gateway_config, **overrides)
        gateway = GatewayClient(config)
        gateway._client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        built.append(gateway)
        return gateway

    yield _make

    for gateway in built:
        await gateway.aclose()


@pytest.fixture()
def form_fields() -> Callable[[httpx.Request], dict[str, str]]:
    """Decode the simple (non-file) parts of a multipart request."""

    def _decode(request: httpx.Request) -> dict[str, str]:
        boundary = request.headers["content-type"].split("boundary=", 1)[1]
        fields: dict[str, str] = {}
        for part in request.content.split(f"--{boundary}".encode())[1:]:
            if part.startswith(b"--"):
                break
            head, _, value = part.strip(b"\r\n").partition(b"\r\n\r\n")
            match = re.search(rb'name="([^"]+)"', head)
            assert match is not None
            fields[match.group(1).decode()] = value.decode("utf-8", errors="replace")
        return fields

    return _decode


@pytest.fixture()
def ok_reply() -> Callable[..., httpx.Response]:
    def _reply(**extra) -> httpx.Response:
        return httpx.Response(200, json={"status": 1, "request": "req-1", **extra})

    return _reply
