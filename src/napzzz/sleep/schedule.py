"""Bedtime / wake-time schedule.

The schedule only seeds defaults for the user; the recorder always uses
wall-clock start and stop times. Edits return a new :class:`Schedule` and
follow the dial-picker rules: moving bedtime keeps wake time fixed and vice
versa.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, time, timedelta

from napzzz.core.exceptions import ConfigurationError

MINUTES_PER_DAY = 24 * 60
DEGREES_PER_HOUR = 360 / 24


def parse_clock_time(value: str | int | time) -> time:
    """Parse ``"HH:MM"`` into a :class:`datetime.time`.

    YAML 1.1 reads an unquoted ``23:00`` as the base-60 integer 1380, so an
    int is taken as minutes since midnight.
    """
    if isinstance(value, time):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        if not 0 <= value < MINUTES_PER_DAY:
            raise ConfigurationError(f"Invalid clock time {value!r}, expected HH:MM")
        return time(*divmod(value, 60))
    try:
        hours, minutes = str(value).strip().split(":")
        return time(hour=int(hours), minute=int(minutes))
    except ValueError as exc:
        raise ConfigurationError(f"Invalid clock time {value!r}, expected HH:MM") from exc


def format_duration(seconds: float) -> str:
    """Render seconds as ``"7h 30m"``."""
    total = int(seconds)
    return f"{total // 3600}h {total % 3600 // 60}m"


def angle_for_time(moment: datetime | time) -> float:
    """Position of *moment* on a 24-hour dial, in degrees from midnight."""
    return (moment.hour * 60 + moment.minute) * 360.0 / MINUTES_PER_DAY


def hour_from_angle(angle: float) -> int:
    """Nearest whole hour for a dial angle (negative angles wrap)."""
    normalized = angle + 360 if angle < 0 else angle
    return int(round(normalized / DEGREES_PER_HOUR)) % 24


def _minute_of_day(moment: datetime) -> int:
    return moment.hour * 60 + moment.minute


@dataclass(frozen=True)
class Schedule:
    """A user's intended bedtime and wake time."""

    bedtime: datetime
    wake_time: datetime
    enabled: bool = True

    @classmethod
    def default(cls, now: datetime, bedtime: str | int = "23:00", wake_time: str | int = "07:00") -> Schedule:
        """Bedtime tonight, wake time tomorrow (23:00 -> 07:00 unless overridden)."""
        bed_at = parse_clock_time(bedtime)
        wake_at = parse_clock_time(wake_time)
        bed = datetime.combine(now.date(), bed_at)
        wake = datetime.combine(now.date() + timedelta(days=1), wake_at)
        return cls(bedtime=bed, wake_time=wake)

    @classmethod
    def from_config(cls, config, now: datetime) -> Schedule:
        return cls.default(
            now,
            bedtime=config.get("schedule.bedtime", "23:00"),
            wake_time=config.get("schedule.wake_time", "07:00"),
        )

    @property
    def duration_minutes(self) -> int:
        """Planned minutes asleep; wraps across midnight, 0 when both times match."""
        return (_minute_of_day(self.wake_time) - _minute_of_day(self.bedtime)) % MINUTES_PER_DAY

    @property
    def duration(self) -> float:
        """Planned duration in seconds."""
        return self.duration_minutes * 60.0

    @property
    def formatted_duration(self) -> str:
        return format_duration(self.duration)

    def with_bedtime(self, bedtime: datetime) -> Schedule:
        return replace(self, bedtime=bedtime)

    def with_wake_time(self, wake_time: datetime) -> Schedule:
        return replace(self, wake_time=wake_time)

    def with_enabled(self, enabled: bool) -> Schedule:
        return replace(self, enabled=enabled)

    def with_bedtime_hour(self, hour: int) -> Schedule:
        """Move bedtime to *hour*:00, keeping wake time fixed.

        The new bedtime is the last *hour*:00 strictly before the wake time.
        """
        bed = datetime.combine(self.wake_time.date(), time(hour=hour % 24))
        if bed >= self.wake_time:
            bed -= timedelta(days=1)
        return replace(self, bedtime=bed)

    def with_wake_hour(self, hour: int) -> Schedule:
        """Move wake time to *hour*:00, keeping bedtime fixed.

        The new wake time is the first *hour*:00 strictly after bedtime.
        """
        wake = datetime.combine(self.bedtime.date(), time(hour=hour % 24))
        if wake <= self.bedtime:
            wake += timedelta(days=1)
        return replace(self, wake_time=wake)

    def with_bedtime_angle(self, angle: float) -> Schedule:
        return self.with_bedtime_hour(hour_from_angle(angle))

    def with_wake_angle(self, angle: float) -> Schedule:
        return self.with_wake_hour(hour_from_angle(angle))

    def format_range(self) -> str:
        return f"{self.bedtime:%H:%M} - {self.wake_time:%H:%M}"
