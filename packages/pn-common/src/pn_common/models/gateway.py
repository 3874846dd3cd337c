"""
Push gateway wire models for PushLedger.

Describes the message payload accepted by the gateway's messages
endpoint, image attachments, and the JSON response envelope.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

SoundMap = dict[str, str]


@dataclass(frozen=True)
class Attachment:
    """An image attachment already loaded into memory.

    Attributes:
        name: Filename sent in the ``Content-Disposition`` header.
        data: Raw file bytes.
        content_type: MIME type; the encoder falls back to
                      ``application/octet-stream`` when unset.
    """

    name: str
    data: bytes
    content_type: str | None = None


class MessagePayload(BaseModel):
    """A single gateway message.

    ``token`` and ``user`` are normally supplied by the client from its
    configuration; set them here only to override it.  ``file`` is either
    a filesystem path or an :class:`Attachment`.
    """

    model_config = ConfigDict(extra="forbid")

    message: str = Field(..., min_length=1)
    title: str | None = None
    device: str | None = None
    url: str | None = None
    url_title: str | None = None
    priority: int | None = Field(default=None, ge=-2, le=2)
    timestamp: int | None = None
    sound: str | None = None
    token: str | None = None
    user: str | None = None
    file: Attachment | Path | None = None


class GatewayResponse(BaseModel):
    """Decoded gateway response ``{status?, request?, receipt?, errors?[]}``."""

    model_config = ConfigDict(extra="allow")

    status: int | None = None
    request: str | None = None
    receipt: str | None = None
    errors: list[str] | None = None

    @field_validator("errors", mode="before")
    @classmethod
    def _stringify_errors(cls, value: Any) -> Any:
        if isinstance(value, list):
            return [str(item) for item in value]
        if isinstance(value, str):
            return [value]
        return value
