"""
Push gateway client package for PushLedger.

Contains the multipart encoder, the transport strategy, the sound
catalog, and the client that ties them together.
"""

from .client import ErrorHandler, GatewayClient, GatewayConfig, GatewayResult
from .multipart import apply_defaults, encode_multipart, new_boundary
from .sounds import DEFAULT_SOUNDS, SoundCatalog
from .transport import TransportPlan, resolve_transport

__all__ = [
    "DEFAULT_SOUNDS",
    "ErrorHandler",
    "GatewayClient",
    "GatewayConfig",
    "GatewayResult",
    "SoundCatalog",
    "TransportPlan",
    "apply_defaults",
    "encode_multipart",
    "new_boundary",
    "resolve_transport",
]
