"""Tests for sleep.schedule: planned duration and dial edits."""

from datetime import datetime, time, timedelta

import pytest

from napzzz.core.exceptions import ConfigurationError
from napzzz.sleep.schedule import (
    Schedule,
    angle_for_time,
    format_duration,
    hour_from_angle,
    parse_clock_time,
)

NOW = datetime(2025, 6, 16, 15, 0)


@pytest.mark.smoke
class TestDuration:
    def test_default_schedule(self):
        plan = Schedule.default(NOW)
        assert plan.bedtime == datetime(2025, 6, 16, 23, 0)
        assert plan.wake_time == datetime(2025, 6, 17, 7, 0)
        assert plan.duration_minutes == 480
        assert plan.duration == 480 * 60
        assert plan.enabled

    @pytest.mark.parametrize(
        "bed, wake, minutes",
        [
            ("23:00", "07:00", 480),
            ("22:30", "06:45", 495),
            ("01:00", "09:00", 480),
            ("07:00", "23:00", 960),
            ("23:59", "00:00", 1),
            ("00:00", "23:59", 1439),
            ("06:00", "06:00", 0),
        ],
    )
    def test_wraps_across_midnight(self, bed, wake, minutes):
        plan = Schedule.default(NOW, bedtime=bed, wake_time=wake)
        assert plan.duration_minutes == minutes
        assert 0 <= plan.duration_minutes < 1440

    def test_only_clock_time_matters(self):
        plan = Schedule(bedtime=datetime(2025, 1, 1, 22, 0), wake_time=datetime(2025, 3, 9, 6, 0))
        assert plan.duration_minutes == 480

    def test_formatting(self):
        plan = Schedule.default(NOW, bedtime="22:30", wake_time="06:45")
        assert plan.formatted_duration == "8h 15m"
        assert plan.format_range() == "22:30 - 06:45"


class TestEdits:
    def test_bedtime_hour_keeps_wake_fixed(self):
        plan = Schedule.default(NOW)
        edited = plan.with_bedtime_hour(22)
        assert edited.wake_time == plan.wake_time
        assert edited.bedtime == datetime(2025, 6, 16, 22, 0)
        assert edited.duration_minutes == 540

    def test_bedtime_after_midnight_stays_before_wake(self):
        edited = Schedule.default(NOW).with_bedtime_hour(1)
        assert edited.bedtime == datetime(2025, 6, 17, 1, 0)
        assert edited.bedtime < edited.wake_time

    def test_wake_hour_keeps_bedtime_fixed(self):
        plan = Schedule.default(NOW)
        edited = plan.with_wake_hour(6)
        assert edited.bedtime == plan.bedtime
        assert edited.wake_time == datetime(2025, 6, 17, 6, 0)
        assert edited.duration_minutes == 420

    def test_wake_hour_equal_to_bedtime_rolls_over(self):
        edited = Schedule.default(NOW, bedtime="22:00").with_wake_hour(22)
        assert edited.wake_time == datetime(2025, 6, 17, 22, 0)
        assert edited.duration_minutes == 0

    def test_edits_return_new_objects(self):
        plan = Schedule.default(NOW)
        edited = plan.with_enabled(False)
        assert plan.enabled and not edited.enabled

    def test_angle_edits(self):
        plan = Schedule.default(NOW)
        assert plan.with_bedtime_angle(330).bedtime.hour == 22
        assert plan.with_wake_angle(-270).wake_time.hour == 6

    def test_explicit_datetime_edits(self):
        plan = Schedule.default(NOW)
        new_bed = plan.bedtime - timedelta(minutes=45)
        assert plan.with_bedtime(new_bed).duration_minutes == 525
        assert plan.with_wake_time(plan.wake_time + timedelta(minutes=15)).duration_minutes == 495


class TestHelpers:
    def test_parse_clock_time(self):
        assert parse_clock_time("07:05") == time(7, 5)

    @pytest.mark.parametrize("bad", ["7", "25:00", "ab:cd", ""])
    def test_parse_clock_time_rejects_garbage(self, bad):
        with pytest.raises(ConfigurationError):
            parse_clock_time(bad)

    def test_parse_clock_time_accepts_minutes_since_midnight(self):
        # unquoted 23:00 in YAML 1.1 loads as the sexagesimal int 1380
        assert parse_clock_time(1380) == time(23, 0)
        assert parse_clock_time(0) == time(0, 0)
        assert parse_clock_time(time(6, 30)) == time(6, 30)

    @pytest.mark.parametrize("bad", [-1, 1440, True])
    def test_parse_clock_time_rejects_out_of_range_minutes(self, bad):
        with pytest.raises(ConfigurationError):
            parse_clock_time(bad)

    def test_format_duration(self):
        assert format_duration(0) == "0h 0m"
        assert format_duration(27000) == "7h 30m"

    def test_angles(self):
        assert angle_for_time(time(6, 0)) == 90.0
        assert angle_for_time(datetime(2025, 1, 1, 18, 30)) == pytest.approx(277.5)
        assert hour_from_angle(0) == 0
        assert hour_from_angle(359) == 0
        assert hour_from_angle(-15) == 23


def test_from_config():
    class FakeConfig:
        def get(self, key_path, default=None):
            return {"schedule.bedtime": "22:00", "schedule.wake_time": "06:30"}.get(key_path, default)

    plan = Schedule.from_config(FakeConfig(), NOW)
    assert plan.duration_minutes == 510
