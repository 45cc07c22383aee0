"""Aggregations over session history.

Pure, read-only functions: they take any sequence of sessions (usually the
store's newest-first history) and return plain numbers or lists. Empty
input yields 0 rather than an error; callers that need to tell "no data"
apart check the input themselves.

Trend series are always returned oldest -> newest, ready for charting.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime

from napzzz.sleep.models import SleepPhaseType, SleepSession

DEFAULT_WINDOW = 7
MINUTES_PER_DAY = 24 * 60

# RMS deviation (minutes) at which consistency bottoms out at 0%
CONSISTENCY_TOLERANCE_MINUTES = 120.0


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def recent_window(sessions: Sequence[SleepSession], window: int = DEFAULT_WINDOW) -> list[SleepSession]:
    """The *window* most recent sessions by start time, oldest first."""
    ordered = sorted(sessions, key=lambda s: s.start_time)
    return ordered[-window:] if window > 0 else []


# ── Basic statistics ─────────────────────────────────────────────────


def average_sleep_duration(sessions: Sequence[SleepSession]) -> float:
    """Mean actual sleep time in seconds."""
    return _mean([s.actual_sleep_time for s in sessions])


def best_score(sessions: Sequence[SleepSession]) -> int:
    return max((s.quality.score for s in sessions), default=0)


def average_efficiency(sessions: Sequence[SleepSession]) -> float:
    return _mean([s.efficiency for s in sessions])


def average_noise(sessions: Sequence[SleepSession]) -> float:
    """Mean of per-session average noise, over sessions that have readings."""
    return _mean([s.average_noise for s in sessions if s.noise_readings])


def average_phase_percentage(sessions: Sequence[SleepSession], phase_type: SleepPhaseType) -> float:
    """Mean share of *phase_type*, over the sessions that contain it.

    A session's share is the sum of the percentages of all its phases of
    that type.
    """
    return _mean([s.phase_percentage(phase_type) for s in sessions if s.has_phase(phase_type)])


def phase_breakdown(sessions: Sequence[SleepSession]) -> dict[SleepPhaseType, float]:
    return {phase_type: average_phase_percentage(sessions, phase_type) for phase_type in SleepPhaseType}


# ── Trend series ─────────────────────────────────────────────────────


def quality_trend_series(sessions: Sequence[SleepSession], window: int = DEFAULT_WINDOW) -> list[int]:
    return [s.quality.score for s in recent_window(sessions, window)]


def duration_trend_series(sessions: Sequence[SleepSession], window: int = DEFAULT_WINDOW) -> list[float]:
    """Actual sleep per session in hours."""
    return [s.actual_sleep_time / 3600 for s in recent_window(sessions, window)]


# ── Consistency ──────────────────────────────────────────────────────


def _minute_of_day(moment: datetime) -> float:
    return moment.hour * 60 + moment.minute + moment.second / 60


def _circular_rmsd(minutes: Sequence[float]) -> float:
    """RMS deviation of clock times from their circular mean, in minutes."""
    angles = [m / MINUTES_PER_DAY * 2 * math.pi for m in minutes]
    mean_angle = math.atan2(sum(math.sin(a) for a in angles), sum(math.cos(a) for a in angles))
    mean_minute = (mean_angle / (2 * math.pi) * MINUTES_PER_DAY) % MINUTES_PER_DAY
    deviations = []
    for m in minutes:
        diff = (m - mean_minute) % MINUTES_PER_DAY
        deviations.append(min(diff, MINUTES_PER_DAY - diff))
    return math.sqrt(_mean([d * d for d in deviations]))


def _linear_rmsd(values: Sequence[float]) -> float:
    mean = _mean(values)
    return math.sqrt(_mean([(v - mean) ** 2 for v in values]))


def _consistency_from_rmsd(rmsd: float) -> float:
    value = 100.0 - rmsd / CONSISTENCY_TOLERANCE_MINUTES * 100.0
    return round(min(100.0, max(0.0, value)), 1)


def bedtime_consistency(sessions: Sequence[SleepSession]) -> float:
    """How regular start times are, 0-100. Fewer than two sessions count as 100."""
    if len(sessions) < 2:
        return 100.0
    return _consistency_from_rmsd(_circular_rmsd([_minute_of_day(s.start_time) for s in sessions]))


def wake_time_consistency(sessions: Sequence[SleepSession]) -> float:
    if len(sessions) < 2:
        return 100.0
    return _consistency_from_rmsd(_circular_rmsd([_minute_of_day(s.end_time) for s in sessions]))


def duration_consistency(sessions: Sequence[SleepSession]) -> float:
    if len(sessions) < 2:
        return 100.0
    return _consistency_from_rmsd(_linear_rmsd([s.actual_sleep_time / 60 for s in sessions]))


# ── Summary ──────────────────────────────────────────────────────────


@dataclass(frozen=True)
class WeeklySummary:
    """Everything the insights dashboard shows for a window of sessions."""

    session_count: int
    average_sleep_duration: float
    best_score: int
    average_efficiency: float
    average_noise: float
    phase_percentages: dict[SleepPhaseType, float] = field(default_factory=dict)
    quality_trend: list[int] = field(default_factory=list)
    duration_trend: list[float] = field(default_factory=list)
    bedtime_consistency: float = 100.0
    wake_time_consistency: float = 100.0
    duration_consistency: float = 100.0


def summarize_week(sessions: Sequence[SleepSession], window: int = DEFAULT_WINDOW) -> WeeklySummary:
    """Summarize the *window* most recent sessions."""
    recent = recent_window(sessions, window)
    return WeeklySummary(
        session_count=len(recent),
        average_sleep_duration=average_sleep_duration(recent),
        best_score=best_score(recent),
        average_efficiency=average_efficiency(recent),
        average_noise=average_noise(recent),
        phase_percentages=phase_breakdown(recent),
        quality_trend=[s.quality.score for s in recent],
        duration_trend=[s.actual_sleep_time / 3600 for s in recent],
        bedtime_consistency=bedtime_consistency(recent),
        wake_time_consistency=wake_time_consistency(recent),
        duration_consistency=duration_consistency(recent),
    )
