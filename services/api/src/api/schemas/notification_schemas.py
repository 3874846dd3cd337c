"""
Notification API schemas for PushLedger.

Pydantic request/response models for notification creation and the
error envelope.  Records themselves are returned as
:class:`~pn_common.models.notification.NotificationRecord` with
camelCase field names.
"""

from __future__ import annotations

from pydantic import BaseModel

from pn_common.models.notification import NotificationDraft


class NotificationCreateRequest(BaseModel):
    title: str | None = None
    message: str | None = None
    recipient: str | None = None

    def to_draft(self) -> NotificationDraft:
        return NotificationDraft(
            title=self.title,
            message=self.message,
            recipient=self.recipient,
        )


class ErrorResponse(BaseModel):
    detail: str
