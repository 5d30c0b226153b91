# pharma_ledger/core/clock.py
from __future__ import annotations

import threading
from datetime import datetime, timedelta, timezone
from typing import Optional


def _now():
    return datetime.now(timezone.utc)


class SystemClock:
    def now(self) -> datetime:
        return _now()


class MonotonicClock:
    """
    Wraps a clock so that successive readings never go backwards.
    All ledger timestamps come from here.
    """

    def __init__(self, source=None):
        self._source = source or SystemClock()
        self._last: Optional[datetime] = None
        self._lock = threading.Lock()

    def now(self) -> datetime:
        with self._lock:
            current = self._source.now()
            if self._last is not None and current < self._last:
                current = self._last
            self._last = current
            return current


class FrozenClock:
    """Manually advanced clock, used by tests and replay tooling."""

    def __init__(self, start: Optional[datetime] = None):
        self._current = start or _now()

    def now(self) -> datetime:
        return self._current

    def advance(self, **delta) -> datetime:
        self._current = self._current + timedelta(**delta)
        return self._current


_default_clock = MonotonicClock()


def get_clock():
    """FastAPI dependency; overridden in tests."""
    return _default_clock


def ensure_utc(dt: datetime) -> datetime:
    """Naive datetimes are taken to be UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)
