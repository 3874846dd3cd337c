"""
Notification data models for PushLedger.

Defines the Pydantic model for ledger records, serialized with the
camelCase field names used in the YAML ledger file and the REST API,
and the draft model callers submit to create one.
"""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


class NotificationDraft(BaseModel):
    """Caller-supplied fields for a new notification.

    All fields are optional at the model level; presence is checked by
    the dispatch service so a missing field is reported as a validation
    error rather than a schema error.
    """

    title: str | None = None
    message: str | None = None
    recipient: str | None = None

    def missing_fields(self) -> list[str]:
        """Return the names of required fields that are absent or blank."""
        return [
            name
            for name in ("title", "message", "recipient")
            if not (getattr(self, name) or "").strip()
        ]


class NotificationRecord(BaseModel):
    """A notification as stored in the ledger.

    Records are immutable; the ledger replaces a record to change it, so
    ``read`` only ever moves from ``False`` to ``True`` and ``created_at``
    is set once.  A record that was not delivered carries no receipt and
    a ``created_at`` without an offset is taken as UTC.

    Attributes:
        id: Unique id derived from the creation instant.
        title: Notification title.
        message: Notification body.
        recipient: Partition key used for listing.
        read: Read flag, set by the mark-read operation.
        created_at: Creation timestamp (UTC).
        pushover_sent: Whether gateway delivery succeeded.
        pushover_receipt: Receipt issued by the gateway, if any.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)
    message: str = Field(..., min_length=1)
    recipient: str = Field(..., min_length=1)
    read: bool = False
    created_at: datetime
    pushover_sent: bool = False
    pushover_receipt: str | None = None

    @field_validator("created_at")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @model_validator(mode="after")
    def _receipt_requires_delivery(self) -> NotificationRecord:
        if not self.pushover_sent and self.pushover_receipt is not None:
            raise ValueError("pushoverReceipt requires pushoverSent=true")
        return self

    def to_document(self) -> dict:
        """Return the JSON-compatible camelCase mapping stored on disk."""
        return self.model_dump(mode="json", by_alias=True)
