"""
Error taxonomy for the PushLedger notifier engine.

Validation and lookup errors are surfaced to callers.  Storage errors are
logged and absorbed by the ledger.  Gateway errors are routed to a
configured error handler or raised; the dispatch service always
downgrades them to "not delivered".
"""

from __future__ import annotations


class NotifierError(Exception):
    """Base class for every notifier error."""


class ValidationError(NotifierError):
    """Required notification fields are missing or blank.

    Attributes:
        missing: Names of the offending fields.
    """

    def __init__(self, missing: list[str]) -> None:
        self.missing = list(missing)
        super().__init__(f"Missing required fields: {', '.join(self.missing)}")


class NotFoundError(NotifierError):
    """No notification with the requested id exists."""

    def __init__(self, notification_id: str) -> None:
        self.notification_id = notification_id
        super().__init__(f"Notification {notification_id} not found")


class StorageError(NotifierError):
    """The ledger file could not be read or written."""


class StorageConfigurationError(StorageError):
    """The ledger path is unusable, e.g. it points at a directory."""


class GatewayError(NotifierError):
    """Base class for push gateway failures."""


class GatewayProtocolError(GatewayError):
    """The gateway answered with an error list or an unparseable body."""


class GatewayTransportError(GatewayError):
    """The HTTP exchange with the gateway failed."""
