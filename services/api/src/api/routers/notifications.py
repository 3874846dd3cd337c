"""
Notification API router for PushLedger.

Endpoints for creating notifications (persisted always, delivered to the
push gateway when configured), listing a recipient's notifications,
single lookup, marking as read, and deletion.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response

from api.dependencies import get_dispatch_service, get_ledger
from api.schemas.notification_schemas import ErrorResponse, NotificationCreateRequest
from notifier.dispatcher import DispatchService
from notifier.errors import NotFoundError, ValidationError
from notifier.ledger import Ledger
from pn_common.models.notification import NotificationRecord

router = APIRouter(prefix="/notifications", tags=["notifications"])

_NOT_FOUND = {404: {"model": ErrorResponse}}


@router.post(
    "",
    status_code=201,
    response_model=NotificationRecord,
    responses={400: {"model": ErrorResponse}},
)
async def create_notification(
    body: NotificationCreateRequest | None = None,
    service: DispatchService = Depends(get_dispatch_service),
) -> NotificationRecord:
    body = body or NotificationCreateRequest()
    try:
        return await service.create_notification(body.to_draft())
    except ValidationError as exc:
        raise HTTPException(
            status_code=400,
            detail="Title, message and recipient are required",
        ) from exc


@router.get("/single/{notification_id}", response_model=NotificationRecord, responses=_NOT_FOUND)
async def get_notification(
    notification_id: str,
    ledger: Ledger = Depends(get_ledger),
) -> NotificationRecord:
    record = ledger.get_by_id(notification_id)
    if record is None:
        raise NotFoundError(notification_id)
    return record


@router.get("/{recipient}", response_model=list[NotificationRecord])
async def list_notifications(
    recipient: str,
    ledger: Ledger = Depends(get_ledger),
) -> list[NotificationRecord]:
    return ledger.list_for_recipient(recipient)


@router.patch("/{notification_id}/read", response_model=NotificationRecord, responses=_NOT_FOUND)
async def mark_notification_read(
    notification_id: str,
    ledger: Ledger = Depends(get_ledger),
) -> NotificationRecord:
    record = ledger.mark_read(notification_id)
    if record is None:
        raise NotFoundError(notification_id)
    return record


@router.delete("/{notification_id}", status_code=204, responses=_NOT_FOUND)
async def delete_notification(
    notification_id: str,
    ledger: Ledger = Depends(get_ledger),
) -> Response:
    if not ledger.delete(notification_id):
        raise NotFoundError(notification_id)
    return Response(status_code=204)
