"""
Shared utility functions for PushLedger.

Contains id allocation and timestamp helpers used by the notifier
engine when it creates ledger records.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable, Iterable
from datetime import datetime, timezone


def utc_now() -> datetime:
    """Return the current UTC datetime."""
    return datetime.now(timezone.utc)


def to_epoch_ms(value: datetime) -> int:
    """Return *value* as integer milliseconds since the Unix epoch."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return int(value.timestamp() * 1000)


class MonotonicIdFactory:
    """Allocate string ids derived from the creation instant.

    Ids are epoch milliseconds.  Two allocations within the same
    millisecond (or a clock that steps backwards) bump the value past the
    last issued id, so an id is never handed out twice.

    Args:
        clock: Callable returning epoch milliseconds.  Defaults to the
               wall clock.
    """

    def __init__(self, clock: Callable[[], int] | None = None) -> None:
        self._clock = clock or (lambda: time.time_ns() // 1_000_000)
        self._last = 0
        self._lock = threading.Lock()

    def seed(self, existing_ids: Iterable[str]) -> None:
        """Make sure future ids sort after every numeric id in *existing_ids*."""
        with self._lock:
            for value in existing_ids:
                if value.isdigit():
                    self._last = max(self._last, int(value))

    def __call__(self) -> str:
        with self._lock:
            candidate = int(self._clock())
            if candidate <= self._last:
                candidate = self._last + 1
            self._last = candidate
            return str(candidate)
