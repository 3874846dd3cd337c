"""
Shared Pydantic data models for PushLedger.

This package contains the ledger record model and the push gateway
wire models (message payload, attachment, response).
"""

from pn_common.models.gateway import (
    Attachment,
    GatewayResponse,
    MessagePayload,
    SoundMap,
)
from pn_common.models.notification import NotificationDraft, NotificationRecord

__all__ = [
    "Attachment",
    "GatewayResponse",
    "MessagePayload",
    "NotificationDraft",
    "NotificationRecord",
    "SoundMap",
]
