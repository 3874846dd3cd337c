"""Shared pytest fixtures for cross-service integration tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from pn_common.config import Settings


@pytest.fixture()
def data_file(tmp_path: Path) -> Path:
    """Ledger location for the test run; not created up front."""
    return tmp_path / "assets" / "notifications.yaml"


@pytest.fixture()
def settings(data_file: Path) -> Settings:
    return Settings(
        _env_file=None,
        data_file=str(data_file),
        pushover_user_key="",
        pushover_api_token="",
        log_json=False,
    )
