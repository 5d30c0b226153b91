from datetime import datetime, timedelta, timezone

from pharma_ledger.core.clock import FrozenClock, MonotonicClock, ensure_utc


class _Rewinding:
    def __init__(self, readings):
        self.readings = list(readings)

    def now(self):
        return self.readings.pop(0)


def test_monotonic_clock_never_goes_backwards():
    t0 = datetime(2026, 1, 1, tzinfo=timezone.utc)
    clock = MonotonicClock(_Rewinding([t0, t0 - timedelta(seconds=5), t0 + timedelta(seconds=1)]))

    assert clock.now() == t0
    assert clock.now() == t0
    assert clock.now() == t0 + timedelta(seconds=1)


def test_frozen_clock_advances_on_demand():
    clock = FrozenClock(datetime(2026, 1, 1, tzinfo=timezone.utc))
    assert clock.advance(days=2) == datetime(2026, 1, 3, tzinfo=timezone.utc)
    assert clock.now() == datetime(2026, 1, 3, tzinfo=timezone.utc)


def test_ensure_utc():
    assert ensure_utc(datetime(2026, 1, 1)).tzinfo == timezone.utc
    ist = timezone(timedelta(hours=5, minutes=30))
    assert ensure_utc(datetime(2026, 1, 1, 5, 30, tzinfo=ist)) == datetime(2026, 1, 1, tzinfo=timezone.utc)
