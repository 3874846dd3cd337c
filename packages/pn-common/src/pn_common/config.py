"""
Environment-based configuration management for PushLedger.

Uses pydantic-settings to load configuration values from environment
variables and .env files. Both services import their settings from this
module to ensure consistent configuration handling.

All environment variables are prefixed with ``PN_`` to avoid collisions.
The bare ``PUSHOVER_USER_KEY``, ``PUSHOVER_API_TOKEN`` and ``PORT`` names
are accepted as well so existing deployments keep working.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central configuration loaded from ``PN_``-prefixed environment variables.

    Attributes:
        pushover_user_key: Gateway user/group key.
        pushover_api_token: Gateway application API token.
        pushover_api_url: Gateway messages endpoint.
        pushover_sounds_url: Gateway sound-list endpoint.
        pushover_proxy: Optional proxy URL for gateway traffic.
        pushover_debug: Log the (redacted) outgoing request string.
        pushover_update_sounds: Refresh the sound catalog once a day.
        pushover_timeout_s: Gateway HTTP timeout; ``None`` disables it.
        default_sound: Sound used for dispatched notifications.
        default_priority: Priority used for dispatched notifications.
        data_file: Path of the YAML notification ledger.
        api_host: Bind address for the API service.
        api_port: Bind port for the API service.
        rate_limit: Requests allowed per client within ``rate_window``.
        rate_window: Rate-limit window length in seconds.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_json: Render logs as JSON (``False`` uses the console renderer).
    """

    model_config = SettingsConfigDict(
        env_prefix="PN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # ── Gateway ──
    pushover_user_key: str = Field(
        default="",
        validation_alias=AliasChoices("PN_PUSHOVER_USER_KEY", "PUSHOVER_USER_KEY"),
        description="Gateway user/group key.",
    )
    pushover_api_token: str = Field(
        default="",
        validation_alias=AliasChoices("PN_PUSHOVER_API_TOKEN", "PUSHOVER_API_TOKEN"),
        description="Gateway application API token.",
    )
    pushover_api_url: str = Field(
        default="https://api.pushover.net/1/messages.json",
        description="Gateway messages endpoint.",
    )
    pushover_sounds_url: str = Field(
        default="https://api.pushover.net/1/sounds.json",
        description="Gateway sound-list endpoint.",
    )
    pushover_proxy: str = Field(default="", description="Proxy URL for gateway traffic.")
    pushover_debug: bool = Field(default=False, description="Log redacted gateway requests.")
    pushover_update_sounds: bool = Field(
        default=False,
        description="Refresh the sound catalog once a day.",
    )
    pushover_timeout_s: float | None = Field(
        default=None,
        gt=0,
        description="Gateway HTTP timeout in seconds (None disables it).",
    )

    # ── Dispatch ──
    default_sound: str = Field(default="magic", description="Sound for dispatched alerts.")
    default_priority: int = Field(
        default=1,
        ge=-2,
        le=2,
        description="Priority for dispatched alerts.",
    )

    # ── Ledger ──
    data_file: str = Field(
        default="assets/notifications.yaml",
        description="Path of the YAML notification ledger.",
    )

    # ── API ──
    api_host: str = Field(default="0.0.0.0", description="API bind address.")
    api_port: int = Field(
        default=9095,
        ge=1,
        le=65535,
        validation_alias=AliasChoices("PN_API_PORT", "PORT"),
        description="API bind port.",
    )
    rate_limit: int = Field(default=100, ge=1, description="Requests per client per window.")
    rate_window: int = Field(default=900, ge=1, description="Rate-limit window in seconds.")

    # ── Logging ──
    log_level: str = Field(default="INFO", description="Logging level.")
    log_json: bool = Field(default=True, description="Render logs as JSON.")

    @property
    def pushover_enabled(self) -> bool:
        """Whether both gateway credentials are present."""
        return bool(self.pushover_user_key and self.pushover_api_token)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the cached application settings singleton.

    Returns:
        The global ``Settings`` instance.
    """
    return Settings()
