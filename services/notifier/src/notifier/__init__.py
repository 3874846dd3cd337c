"""
PushLedger notifier engine.

Encodes alerts for the push gateway, interprets its response protocol,
and keeps a file-backed ledger of every notification created, whether
or not the gateway delivered it.
"""

from .dispatcher import DispatchService
from .gateway import GatewayClient, GatewayConfig, SoundCatalog
from .ledger import Ledger, PersistResult

__all__ = [
    "DispatchService",
    "GatewayClient",
    "GatewayConfig",
    "Ledger",
    "PersistResult",
    "SoundCatalog",
]
