"""
Prometheus metrics helpers for PushLedger.

Provides shared metric definitions for exposing Prometheus-format
metrics from both services: notification and delivery counters,
ledger persistence failures, and API request latency.
"""

from __future__ import annotations

from prometheus_client import Counter, Histogram

notifications_created_total = Counter(
    "notifications_created_total",
    "Total notification records committed to the ledger",
)
gateway_deliveries_total = Counter(
    "gateway_deliveries_total",
    "Gateway delivery attempts by outcome",
    ["outcome"],
)
ledger_persist_failures_total = Counter(
    "ledger_persist_failures_total",
    "Ledger writes that failed to reach disk",
)
api_request_duration_seconds = Histogram(
    "api_request_duration_seconds",
    "API request latency in seconds",
    ["method", "endpoint"],
)
