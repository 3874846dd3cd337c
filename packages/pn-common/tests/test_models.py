"""
Tests for pn-common shared data models.

Validates the ledger record invariants, camelCase serialization, draft
validation helpers and the gateway wire models.
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

import pytest
from pydantic import ValidationError

from pn_common.models import (
    Attachment,
    GatewayResponse,
    MessagePayload,
    NotificationDraft,
    NotificationRecord,
)

_NOW = datetime(2025, 7, 20, 3, 45, tzinfo=timezone.utc)


def _record(**overrides) -> NotificationRecord:
    fields = dict(
        id="1753000000000",
        title="Backup Complete",
        message="Nightly backup succeeded",
        recipient="ops-team",
        created_at=_NOW,
    )
    fields.update(overrides)
    return NotificationRecord(**fields)


# ===========================================================================
# NotificationRecord
# ===========================================================================


class TestNotificationRecord:

    def test_defaults(self) -> None:
        r = _record()
        assert r.read is False
        assert r.pushover_sent is False
        assert r.pushover_receipt is None

    def test_document_uses_camel_case(self) -> None:
        doc = _record(pushover_sent=True, pushover_receipt="r1").to_document()
        assert set(doc) == {
            "id", "title", "message", "recipient", "read",
            "createdAt", "pushoverSent", "pushoverReceipt",
        }
        assert doc["pushoverReceipt"] == "r1"
        assert isinstance(doc["createdAt"], str)

    def test_parses_camel_case_document(self) -> None:
        r = NotificationRecord.model_validate(
            {
                "id": "1",
                "title": "t",
                "message": "m",
                "recipient": "r",
                "read": True,
                "createdAt": "2025-07-20T03:45:00Z",
                "pushoverSent": True,
                "pushoverReceipt": "abc",
            }
        )
        assert r.read is True
        assert r.created_at == _NOW
        assert r.pushover_receipt == "abc"

    def test_receipt_without_delivery_rejected(self) -> None:
        with pytest.raises(ValidationError):
            _record(pushover_sent=False, pushover_receipt="r1")

    def test_sent_without_receipt_allowed(self) -> None:
        assert _record(pushover_sent=True).pushover_receipt is None

    def test_empty_title_rejected(self) -> None:
        with pytest.raises(ValidationError):
            _record(title="")

    def test_document_round_trip(self) -> None:
        r = _record(read=True, pushover_sent=True, pushover_receipt="r9")
        assert NotificationRecord.model_validate(r.to_document()) == r

    @pytest.mark.parametrize(
        ("field", "value"),
        [("read", False), ("created_at", datetime(2030, 1, 1, tzinfo=timezone.utc))],
    )
    def test_fields_cannot_be_reassigned(self, field: str, value: object) -> None:
        r = _record(read=True)
        with pytest.raises(ValidationError):
            setattr(r, field, value)
        assert r.read is True
        assert r.created_at == _NOW

    def test_copy_with_update_leaves_original(self) -> None:
        r = _record()
        updated = r.model_copy(update={"read": True})
        assert updated.read is True
        assert r.read is False

    def test_naive_created_at_taken_as_utc(self) -> None:
        r = _record(created_at=datetime(2025, 7, 20, 3, 45))
        assert r.created_at == _NOW
        assert r.created_at.tzinfo is not None

    def test_offsetless_document_timestamp_taken_as_utc(self) -> None:
        doc = _record().to_document()
        doc["createdAt"] = "2025-07-20T03:45:00"
        assert NotificationRecord.model_validate(doc).created_at == _NOW


# ===========================================================================
# NotificationDraft
# ===========================================================================


class TestNotificationDraft:

    def test_complete_draft_has_no_missing_fields(self) -> None:
        d = NotificationDraft(title="t", message="m", recipient="r")
        assert d.missing_fields() == []

    def test_reports_all_missing(self) -> None:
        assert NotificationDraft().missing_fields() == ["title", "message", "recipient"]

    def test_blank_counts_as_missing(self) -> None:
        d = NotificationDraft(title="  ", message="m", recipient="r")
        assert d.missing_fields() == ["title"]


# ===========================================================================
# Gateway models
# ===========================================================================


class TestMessagePayload:

    def test_minimal(self) -> None:
        p = MessagePayload(message="hi")
        assert p.title is None
        assert p.priority is None

    def test_message_required(self) -> None:
        with pytest.raises(ValidationError):
            MessagePayload()  # type: ignore[call-arg]

    @pytest.mark.parametrize("priority", [-3, 3])
    def test_priority_range(self, priority: int) -> None:
        with pytest.raises(ValidationError):
            MessagePayload(message="hi", priority=priority)

    def test_unknown_field_rejected(self) -> None:
        with pytest.raises(ValidationError):
            MessagePayload(message="hi", colour="red")  # type: ignore[call-arg]

    def test_file_as_path(self) -> None:
        p = MessagePayload(message="hi", file="/tmp/shot.png")
        assert isinstance(p.file, Path)

    def test_file_as_attachment(self) -> None:
        att = Attachment(name="a.png", data=b"\x89PNG", content_type="image/png")
        p = MessagePayload(message="hi", file=att)
        assert isinstance(p.file, Attachment)
        assert p.file.data == b"\x89PNG"


class TestGatewayResponse:

    def test_empty(self) -> None:
        r = GatewayResponse()
        assert r.receipt is None
        assert r.errors is None

    def test_extra_fields_kept(self) -> None:
        r = GatewayResponse.model_validate({"status": 1, "request": "abc", "user": "invalid"})
        assert r.status == 1
        assert r.model_extra == {"user": "invalid"}

    def test_errors_coerced_to_strings(self) -> None:
        r = GatewayResponse.model_validate({"errors": ["bad token", 42]})
        assert r.errors == ["bad token", "42"]
