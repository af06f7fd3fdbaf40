from datetime import UTC, datetime

from curation.adapters.clock import SystemClock


def test_system_clock():
    clock = SystemClock()
    now = clock.now()
    assert isinstance(now, datetime)
    real_now = datetime.now()
    diff = abs((real_now - now).total_seconds())
    assert diff < 1.0


def test_system_clock_utc_is_aware():
    now = SystemClock().now_utc()
    assert now.tzinfo is not None
    assert abs((datetime.now(UTC) - now).total_seconds()) < 1.0
