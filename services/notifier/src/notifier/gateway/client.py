"""
Push gateway client for PushLedger.

Sends a single alert to the push gateway as a multipart/form-data POST,
optionally with an image attachment and through a proxy, and decodes
the gateway's JSON response protocol.

Error routing
-------------
* Transport failures raise :class:`GatewayTransportError`.
* An unparseable body, or a body carrying a non-empty ``errors`` list,
  is handed to the configured ``error_handler``.  Without a handler the
  condition raises :class:`GatewayProtocolError`.
* Sound-catalog refreshes are best effort: errors go to the handler, or
  are logged when there is none, and never raise.
"""

from __future__ import annotations

import asyncio
import contextlib
import json
import mimetypes
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any
from urllib.parse import urlencode

import httpx
import pydantic
import structlog

from pn_common.config import Settings
from pn_common.models.gateway import Attachment, GatewayResponse, MessagePayload

from ..errors import GatewayError, GatewayProtocolError, GatewayTransportError
from .multipart import apply_defaults, content_type_header, encode_multipart, new_boundary
from .sounds import REFRESH_INTERVAL_S, SoundCatalog
from .transport import TransportPlan, resolve_transport

logger = structlog.get_logger()

DEFAULT_API_URL = "https://api.pushover.net/1/messages.json"
DEFAULT_SOUNDS_URL = "https://api.pushover.net/1/sounds.json"
_REDACTED = "XXXXX"

ErrorHandler = Callable[[Exception | str, httpx.Response | None], None]


@dataclass
class GatewayConfig:
    """Client configuration.

    Attributes:
        user_key: Gateway user/group key.
        api_token: Gateway application token.
        debug: Log the redacted outgoing request string.
        error_handler: Receives protocol errors instead of having them raised.
        http_options: Extra ``httpx.AsyncClient`` options; a ``proxy`` entry
                      routes traffic through that proxy over plain HTTP.
        auto_refresh_sounds: Refresh the sound catalog once a day.
        api_url: Messages endpoint.
        sounds_url: Sound-list endpoint.
    """

    user_key: str = ""
    api_token: str = ""
    debug: bool = False
    error_handler: ErrorHandler | None = None
    http_options: dict[str, Any] = field(default_factory=dict)
    auto_refresh_sounds: bool = False
    api_url: str = DEFAULT_API_URL
    sounds_url: str = DEFAULT_SOUNDS_URL

    @property
    def enabled(self) -> bool:
        return bool(self.user_key and self.api_token)

    @classmethod
    def from_settings(cls, settings: Settings) -> GatewayConfig:
        """Build a config from the application settings."""
        http_options: dict[str, Any] = {}
        if settings.pushover_proxy:
            http_options["proxy"] = settings.pushover_proxy
        if settings.pushover_timeout_s is not None:
            http_options["timeout"] = settings.pushover_timeout_s
        return cls(
            user_key=settings.pushover_user_key,
            api_token=settings.pushover_api_token,
            debug=settings.pushover_debug,
            http_options=http_options,
            auto_refresh_sounds=settings.pushover_update_sounds,
            api_url=settings.pushover_api_url,
            sounds_url=settings.pushover_sounds_url,
        )

    def __repr__(self) -> str:
        return (
            f"GatewayConfig(enabled={self.enabled}, api_url={self.api_url!r}, "
            f"debug={self.debug}, auto_refresh_sounds={self.auto_refresh_sounds})"
        )


@dataclass(frozen=True)
class GatewayResult:
    """Outcome of one completed HTTP exchange with the gateway.

    ``response`` is ``None`` when the body could not be decoded and the
    failure was delegated to the error handler.
    """

    status_code: int
    body: str
    response: GatewayResponse | None


class GatewayClient:
    """Encode alerts for the push gateway and interpret its replies.

    The client is *enabled* only when both the user key and the API token
    are non-empty.  A disabled client never touches the network: sends
    log a warning and return ``None``.

    Args:
        config: :class:`GatewayConfig` instance.
        sounds: Sound catalog to maintain; defaults to the stock list.
    """

    def __init__(self, config: GatewayConfig, *, sounds: SoundCatalog | None = None) -> None:
        self.config = config
        self.enabled = config.enabled
        self.sounds = sounds if sounds is not None else SoundCatalog()
        self._boundary = new_boundary()
        self._plan: TransportPlan = resolve_transport(config.api_url, config.http_options)
        self._client: httpx.AsyncClient | None = None
        self._refresh_task: asyncio.Task[None] | None = None

        if self.enabled:
            logger.info(
                "gateway_enabled",
                scheme=self._plan.scheme,
                proxied=self._plan.proxied,
            )
        else:
            logger.warning("gateway_disabled", reason="credentials missing")

    @property
    def transport(self) -> TransportPlan:
        return self._plan

    async def _get_client(self) -> httpx.AsyncClient:
        """Return (and lazily create) the shared ``httpx.AsyncClient``."""
        if self._client is None or self._client.is_closed:
            self._client = self._plan.build_client()
        return self._client

    # ── error routing ──

    def _report(self, error: Exception | str, response: httpx.Response | None) -> None:
        """Hand *error* to the error handler, or raise it if there is none."""
        if self.config.error_handler is not None:
            self.config.error_handler(error, response)
            return
        if isinstance(error, Exception):
            raise error
        raise GatewayProtocolError(error)

    def _report_quietly(self, error: Exception, response: httpx.Response | None) -> None:
        """Like :meth:`_report` but logs instead of raising without a handler."""
        if self.config.error_handler is not None:
            self.config.error_handler(error, response)
        else:
            logger.warning("gateway_background_error", error=str(error))

    # ── request building ──

    def _redact(self, text: str) -> str:
        for secret in (self.config.api_token, self.config.user_key):
            if secret:
                text = text.replace(secret, _REDACTED)
        return text

    @staticmethod
    def _load_attachment(file: Attachment | Path | None) -> Attachment | None:
        """Resolve *file* into an in-memory :class:`Attachment`."""
        if file is None or isinstance(file, Attachment):
            return file
        path = Path(file)
        try:
            data = path.read_bytes()
        except OSError as exc:
            raise GatewayError(f"Cannot read attachment {path.name}: {exc}") from exc
        content_type, _ = mimetypes.guess_type(path.name)
        return Attachment(name=path.name, data=data, content_type=content_type)

    def build_fields(self, message: MessagePayload) -> dict[str, Any]:
        """Return the normalized form fields for *message*, credentials first."""
        form = apply_defaults(
            message.model_dump(exclude={"file", "token", "user"}, exclude_none=True),
        )
        return {
            "token": message.token or self.config.api_token,
            "user": message.user or self.config.user_key,
            **form,
        }

    # ── sending ──

    async def send(self, payload: MessagePayload | Mapping[str, Any]) -> GatewayResult | None:
        """POST *payload* to the gateway and decode the reply.

        Returns:
            The :class:`GatewayResult`, or ``None`` when the client is
            disabled.

        Raises:
            GatewayTransportError: The HTTP exchange failed.
            GatewayProtocolError: The reply was unusable and no error
                handler is configured.
        """
        if not self.enabled:
            logger.warning("gateway_send_skipped", reason="gateway disabled")
            return None

        message = (
            payload
            if isinstance(payload, MessagePayload)
            else MessagePayload.model_validate(payload)
        )
        fields = self.build_fields(message)
        attachment = self._load_attachment(message.file)
        body = encode_multipart(fields, self._boundary, attachment)

        if self.config.debug:
            redacted = {**fields, "token": _REDACTED, "user": _REDACTED}
            logger.info("gateway_request", request=self._redact(urlencode(redacted)))

        client = await self._get_client()
        try:
            resp = await client.post(
                self._plan.url,
                content=body,
                headers={"Content-Type": content_type_header(self._boundary)},
            )
        except httpx.HTTPError as exc:
            logger.error("gateway_transport_failed", error=self._redact(str(exc)))
            raise GatewayTransportError(self._redact(str(exc))) from exc

        text = resp.text
        parsed = self.handle_response(text, resp)
        return GatewayResult(status_code=resp.status_code, body=text, response=parsed)

    def handle_response(
        self,
        body: str,
        response: httpx.Response | None = None,
    ) -> GatewayResponse | None:
        """Decode a gateway reply ``{status?, request?, receipt?, errors?[]}``.

        An empty body decodes to an empty response.  The first entry of a
        non-empty ``errors`` list is reported; with an error handler the
        decoded response is still returned.
        """
        if not body.strip():
            return GatewayResponse()

        try:
            data = json.loads(body)
        except ValueError as exc:
            self._report(GatewayProtocolError(f"Unparseable gateway response: {exc}"), response)
            return None

        if not isinstance(data, dict):
            self._report(GatewayProtocolError("Gateway response is not a JSON object"), response)
            return None

        errors = data.get("errors")
        if errors:
            first = errors[0] if isinstance(errors, list) else errors
            self._report(str(first), response)

        try:
            return GatewayResponse.model_validate(data)
        except pydantic.ValidationError as exc:
            self._report(GatewayProtocolError(f"Malformed gateway response: {exc}"), response)
            return None

    async def send_notification(
        self,
        message: MessagePayload | Mapping[str, Any],
    ) -> str | None:
        """Send *message* and return the gateway receipt.

        Returns:
            The receipt id, or ``None`` when the gateway issued none or the
            client is disabled.

        Raises:
            GatewayError: Transport failure, unreadable attachment, or a
                reply that could not be decoded.
        """
        if not self.enabled:
            logger.warning("gateway_send_skipped", reason="gateway disabled")
            return None

        result = await self.send(message)
        if result is None or result.response is None:
            raise GatewayProtocolError("Invalid gateway response")

        logger.info(
            "gateway_notification_sent",
            status_code=result.status_code,
            request_id=result.response.request,
            receipt=result.response.receipt,
        )
        return result.response.receipt

    # ── sound catalog ──

    async def update_sound_catalog(self) -> bool:
        """Fetch the gateway's sound list and replace the catalog wholesale.

        Returns:
            ``True`` if the catalog was replaced.
        """
        if not self.config.api_token:
            logger.warning("sound_refresh_skipped", reason="api token missing")
            return False

        client = await self._get_client()
        try:
            resp = await client.get(
                self.config.sounds_url,
                params={"token": self.config.api_token},
            )
        except httpx.HTTPError as exc:
            self._report_quietly(GatewayTransportError(self._redact(str(exc))), None)
            return False

        try:
            data = resp.json()
        except ValueError:
            self._report_quietly(GatewayProtocolError("parsing sound data failed"), resp)
            return False

        if not isinstance(data, dict):
            self._report_quietly(GatewayProtocolError("parsing sound data failed"), resp)
            return False

        errors = data.get("errors")
        if errors:
            first = errors[0] if isinstance(errors, list) else errors
            self._report_quietly(GatewayProtocolError(str(first)), resp)
            return False

        return self.sounds.replace(data.get("sounds"))

    def start_sound_refresh(self, interval: float = REFRESH_INTERVAL_S) -> asyncio.Task[None]:
        """Start the periodic refresh task (idempotent)."""
        if self._refresh_task is None or self._refresh_task.done():
            self._refresh_task = asyncio.create_task(
                self._refresh_loop(interval),
                name="gateway-sound-refresh",
            )
        return self._refresh_task

    async def _refresh_loop(self, interval: float) -> None:
        while True:
            try:
                await self.update_sound_catalog()
            except Exception as exc:  # noqa: BLE001
                logger.error("sound_refresh_failed", error=self._redact(str(exc)))
            await asyncio.sleep(interval)

    # ── lifecycle ──

    async def start(self) -> None:
        """Kick off background work requested by the configuration."""
        if self.config.auto_refresh_sounds and self.config.api_token:
            self.start_sound_refresh()

    async def aclose(self) -> None:
        """Stop the refresh task and close the underlying HTTP client."""
        if self._refresh_task is not None:
            self._refresh_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._refresh_task
            self._refresh_task = None
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
        self._client = None
