"""Tests for napzzz.core.clock."""

from datetime import datetime, timedelta

import pytest

from napzzz.core.clock import Clock, ManualClock, SystemClock


class TestManualClock:
    def test_starts_where_told(self):
        start = datetime(2025, 1, 1, 22, 0)
        assert ManualClock(start).now() == start

    def test_advance_seconds_and_timedelta(self):
        clock = ManualClock(datetime(2025, 1, 1, 22, 0))
        clock.advance(90)
        clock.advance(timedelta(minutes=1))
        assert clock.now() == datetime(2025, 1, 1, 22, 2, 30)

    def test_cannot_move_backwards(self):
        clock = ManualClock(datetime(2025, 1, 1, 22, 0))
        with pytest.raises(ValueError, match="backwards"):
            clock.set(datetime(2025, 1, 1, 21, 0))

    def test_satisfies_protocol(self):
        assert isinstance(ManualClock(), Clock)
        assert isinstance(SystemClock(), Clock)


def test_system_clock_tracks_wall_time():
    before = datetime.now()
    now = SystemClock().now()
    assert before <= now <= datetime.now()
