"""
Transport selection for gateway traffic.

Resolved once per client configuration: either a direct connection to
the configured endpoint (HTTP or HTTPS, following its scheme) or a
plain-HTTP request routed through a forward proxy.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import httpx

_RESERVED_OPTIONS = {"proxy", "base_url", "transport"}


@dataclass(frozen=True)
class TransportPlan:
    """How the client reaches the gateway.

    Attributes:
        url: Final request URL.
        proxy: Proxy URL, or ``None`` for a direct connection.
        client_options: Keyword arguments for :class:`httpx.AsyncClient`.
    """

    url: str
    proxy: str | None = None
    client_options: dict[str, Any] = field(default_factory=dict)

    @property
    def scheme(self) -> str:
        return httpx.URL(self.url).scheme

    @property
    def proxied(self) -> bool:
        return self.proxy is not None

    def build_client(self, **overrides: Any) -> httpx.AsyncClient:
        """Create an ``httpx.AsyncClient`` for this plan."""
        options = {"timeout": None, **self.client_options, **overrides}
        if self.proxy is not None:
            options["proxy"] = self.proxy
        return httpx.AsyncClient(**options)


def resolve_transport(
    api_url: str,
    http_options: dict[str, Any] | None = None,
) -> TransportPlan:
    """Build the :class:`TransportPlan` for *api_url* and *http_options*.

    A ``proxy`` entry in *http_options* forces plain HTTP to the gateway
    host through that proxy.  Every other entry (``timeout``, ``headers``,
    ``verify``, ...) is passed through to the HTTP client.
    """
    options = dict(http_options or {})
    proxy = options.pop("proxy", None) or None
    client_options = {k: v for k, v in options.items() if k not in _RESERVED_OPTIONS}

    url = httpx.URL(api_url)
    if url.scheme not in ("http", "https"):
        raise ValueError(f"Unsupported gateway URL scheme: {url.scheme!r}")

    if proxy is not None:
        return TransportPlan(
            url=str(url.copy_with(scheme="http")),
            proxy=str(proxy),
            client_options=client_options,
        )
    return TransportPlan(url=str(url), client_options=client_options)
