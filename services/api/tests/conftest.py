"""Shared fixtures for PushLedger API tests."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from pathlib import Path

import httpx
import pytest
from fastapi.testclient import TestClient

from api.main import create_app
from notifier.gateway.client import GatewayClient, GatewayConfig
from notifier.ledger import Ledger
from pn_common.config import Settings

Handler = Callable[[httpx.Request], httpx.Response]


def _no_network(request: httpx.Request) -> httpx.Response:
    raise AssertionError(f"unexpected request to {request.url}")


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    return Settings(
        _env_file=None,
        data_file=str(tmp_path / "assets" / "notifications.yaml"),
        pushover_user_key="",
        pushover_api_token="",
        rate_limit=1000,
        log_json=False,
    )


@pytest.fixture()
def ledger(settings: Settings) -> Ledger:
    return Ledger.open(settings.data_file)


@pytest.fixture()
def make_client(settings: Settings, ledger: Ledger) -> Iterator[Callable[..., TestClient]]:
    """Factory returning a started ``TestClient``.

    Pass ``handler`` to enable the gateway against an ``httpx.MockTransport``;
    without one the gateway has no credentials and stays disabled.
    """
    opened: list[TestClient] = []

    def _make(handler: Handler | None = None, **overrides) -> TestClient:
        app_settings = settings.model_copy(update=overrides) if overrides else settings
        if handler is None:
            gateway = GatewayClient(GatewayConfig())
            handler = _no_network
        else:
            gateway = GatewayClient(GatewayConfig(user_key="user-key", api_token="app-token"))
        gateway._client = httpx.AsyncClient(transport=httpx.MockTransport(handler))

        client = TestClient(create_app(app_settings, ledger=ledger, gateway=gateway))
        client.__enter__()
        opened.append(client)
        return client

    yield _make

    for client in opened:
        client.__exit__(None, None, None)


@pytest.fixture()
def client(make_client) -> TestClient:
    return make_client()
