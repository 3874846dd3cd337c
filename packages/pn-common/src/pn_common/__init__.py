"""
pn-common: Shared library for PushLedger.

Provides the notification and gateway data models, configuration
management, structured logging, Prometheus metrics and id/timestamp
helpers used by the notifier engine and the API service.
"""

from pn_common.config import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
]
