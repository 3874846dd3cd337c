"""
Multipart/form-data encoding for gateway messages.

Pure functions: no I/O, no transport.  The output of
:func:`encode_multipart` is the exact request body sent to the gateway,
so it can be checked byte for byte without a network.
"""

from __future__ import annotations

import secrets
from collections.abc import Mapping
from typing import Any

from pn_common.models.gateway import Attachment

_CRLF = b"\r\n"
_DEFAULT_CONTENT_TYPE = "application/octet-stream"

STRING_DEFAULTS: dict[str, str] = {
    "device": "",
    "title": "",
    "url": "",
    "url_title": "",
    "sound": "",
}
NUMBER_DEFAULTS: dict[str, int] = {
    "priority": 0,
    "timestamp": 0,
}


def new_boundary() -> str:
    """Return a random multipart boundary token."""
    return "----pushledger" + secrets.token_hex(12)


def apply_defaults(payload: Mapping[str, Any]) -> dict[str, Any]:
    """Return a copy of *payload* with every optional field present.

    Unset (missing or ``None``) string fields become ``""`` and unset
    numeric fields become ``0``, so the wire payload always carries the
    same field set.
    """
    form = dict(payload)
    for key, default in {**STRING_DEFAULTS, **NUMBER_DEFAULTS}.items():
        if form.get(key) is None:
            form[key] = default
    return form


def _quote(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', "%22").replace("\r", "%0D").replace("\n", "%0A")


def _render(value: Any) -> str:
    if isinstance(value, bool):
        return "1" if value else "0"
    return str(value)


def encode_multipart(
    fields: Mapping[str, Any],
    boundary: str,
    attachment: Attachment | None = None,
) -> bytes:
    """Encode *fields* (and an optional *attachment*) as multipart/form-data.

    Fields whose value is ``None`` or the empty string are left out
    entirely; the gateway rejects empty parts for some keys.  ``0`` is a
    real value and is sent.

    Args:
        fields: Form fields in the order they should appear.
        boundary: Boundary token, without the leading dashes.
        attachment: Optional image sent as the ``attachment`` part.

    Returns:
        The complete request body, closing delimiter included.
    """
    delimiter = f"--{boundary}".encode("utf-8")
    body = bytearray()

    for key, value in fields.items():
        if value is None:
            continue
        text = _render(value)
        if text == "":
            continue
        body += delimiter + _CRLF
        body += f'Content-Disposition: form-data; name="{_quote(key)}"'.encode("utf-8") + _CRLF
        body += _CRLF
        body += text.encode("utf-8") + _CRLF

    if attachment is not None:
        content_type = attachment.content_type or _DEFAULT_CONTENT_TYPE
        body += delimiter + _CRLF
        body += (
            f'Content-Disposition: form-data; name="attachment"; '
            f'filename="{_quote(attachment.name)}"'
        ).encode("utf-8") + _CRLF
        body += f"Content-Type: {content_type}".encode("utf-8") + _CRLF
        body += _CRLF
        body += bytes(attachment.data) + _CRLF

    body += delimiter + b"--" + _CRLF
    return bytes(body)


def content_type_header(boundary: str) -> str:
    """Return the ``Content-Type`` header value matching *boundary*."""
    return f"multipart/form-data; boundary={boundary}"
