"""
Notification dispatch service for PushLedger.

Composes the :class:`Ledger` and the :class:`GatewayClient` into the one
externally visible write operation, :meth:`DispatchService.create_notification`.

Flow
----
1. Validate ``title``, ``message`` and ``recipient``.
2. Allocate an id and stamp ``createdAt``.
3. If the gateway is enabled, try to deliver; a failure is logged and
   leaves ``pushoverSent=false`` / ``pushoverReceipt=null``.
4. Append the record to the ledger (which persists it) and return it.

Delivery is best effort and never fails the call; the record is kept
either way.  Failed deliveries are not retried.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from datetime import datetime
from typing import Any

import structlog

from pn_common.metrics import gateway_deliveries_total, notifications_created_total
from pn_common.models.gateway import MessagePayload
from pn_common.models.notification import NotificationDraft, NotificationRecord
from pn_common.utils import MonotonicIdFactory, utc_now

from .errors import GatewayError, ValidationError
from .gateway.client import GatewayClient
from .ledger import Ledger

logger = structlog.get_logger()

DEFAULT_SOUND = "magic"
DEFAULT_PRIORITY = 1


class DispatchService:
    """Create notifications: persist always, deliver when possible.

    Args:
        ledger: The :class:`Ledger` that owns the records.
        gateway: The :class:`GatewayClient` used for delivery.
        sound: Sound requested for every delivery.
        priority: Priority requested for every delivery.
        clock: Returns the creation instant (UTC).
        id_factory: Returns a fresh record id; seeded with the ledger's
                    existing ids so none is reused.
    """

    def __init__(
        self,
        ledger: Ledger,
        gateway: GatewayClient,
        *,
        sound: str = DEFAULT_SOUND,
        priority: int = DEFAULT_PRIORITY,
        clock: Callable[[], datetime] = utc_now,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        self.ledger = ledger
        self.gateway = gateway
        self.sound = sound
        self.priority = priority
        self._clock = clock
        if id_factory is None:
            id_factory = MonotonicIdFactory()
            id_factory.seed(ledger.ids())
        self._next_id = id_factory

        if not gateway.sounds.is_known(sound):
            logger.warning("dispatch_sound_unknown", sound=sound)

    async def create_notification(
        self,
        draft: NotificationDraft | Mapping[str, Any],
    ) -> NotificationRecord:
        """Create, deliver (best effort) and persist a notification.

        Raises:
            ValidationError: ``title``, ``message`` or ``recipient`` is
                missing or blank.
        """
        if not isinstance(draft, NotificationDraft):
            draft = NotificationDraft.model_validate(dict(draft))
        missing = draft.missing_fields()
        if missing:
            raise ValidationError(missing)

        record = NotificationRecord(
            id=self._next_id(),
            title=draft.title,
            message=draft.message,
            recipient=draft.recipient,
            read=False,
            created_at=self._clock(),
            pushover_sent=False,
            pushover_receipt=None,
        )
        log = logger.bind(notification_id=record.id, recipient=record.recipient)

        if self.gateway.enabled:
            record = await self._deliver(record, log)
        else:
            gateway_deliveries_total.labels(outcome="disabled").inc()

        result = self.ledger.append(record)
        notifications_created_total.inc()
        if not result.ok:
            log.warning("notification_not_persisted", error=str(result.error))
        log.info("notification_created", pushover_sent=record.pushover_sent)
        return record

    async def _deliver(self, record: NotificationRecord, log: Any) -> NotificationRecord:
        message = MessagePayload(
            title=record.title,
            message=record.message,
            sound=self.sound,
            priority=self.priority,
        )
        try:
            receipt = await self.gateway.send_notification(message)
        except GatewayError as exc:
            gateway_deliveries_total.labels(outcome="failed").inc()
            log.error("gateway_delivery_failed", error=str(exc))
            return record
        except Exception as exc:  # noqa: BLE001
            gateway_deliveries_total.labels(outcome="failed").inc()
            log.error("gateway_unexpected_error", error=str(exc))
            return record

        gateway_deliveries_total.labels(outcome="sent").inc()
        return record.model_copy(update={"pushover_sent": True, "pushover_receipt": receipt})
