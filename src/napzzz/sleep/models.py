"""
Sleep tracking data models.

Everything a finished session is made of is a frozen dataclass: once the
recorder finalizes a :class:`SleepSession` nothing downstream can edit it.
Durations are seconds (floats); timestamps are naive local datetimes.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import StrEnum

# ── Enumerations ─────────────────────────────────────────────────────


class SleepPhaseType(StrEnum):
    AWAKE = "awake"
    LIGHT = "light"
    DEEP = "deep"
    REM = "rem"


class SoundEventType(StrEnum):
    SNORING = "snoring"
    TALKING = "talking"
    MOVEMENT = "movement"
    OTHER = "other"

    @property
    def label(self) -> str:
        return self.value.capitalize()


class SleepQualityRating(StrEnum):
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"
    TOO_SHORT = "too_short"


class SleepActivity(StrEnum):
    """Things the sleeper did before bed, tagged on the session."""

    SLEEPING_PILL = "sleeping_pill"
    ALCOHOL = "alcohol"
    WORKOUT = "workout"
    STRETCH = "stretch"
    ATE_LATE = "ate_late"
    UNDER_STRESS = "under_stress"
    COFFEE = "coffee"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ").capitalize()


_RATING_LABELS = {
    SleepQualityRating.EXCELLENT: "Excellent",
    SleepQualityRating.GOOD: "Good",
    SleepQualityRating.FAIR: "Fair",
    SleepQualityRating.POOR: "Poor",
    SleepQualityRating.TOO_SHORT: "Too short",
}

_RATING_COLORS = {
    SleepQualityRating.EXCELLENT: "green",
    SleepQualityRating.GOOD: "blue",
    SleepQualityRating.FAIR: "orange",
    SleepQualityRating.POOR: "red",
    SleepQualityRating.TOO_SHORT: "red",
}


# ── Session building blocks ──────────────────────────────────────────


@dataclass(frozen=True)
class SleepPhase:
    """A labeled sub-interval of a session.

    ``percentage`` stays 0 while recording and is filled in once, at
    finalization, as a share of the whole session.
    """

    type: SleepPhaseType
    start_time: datetime
    duration: float
    percentage: float = 0.0

    @property
    def end_time(self) -> datetime:
        return self.start_time + timedelta(seconds=self.duration)


@dataclass(frozen=True)
class SoundEvent:
    type: SoundEventType
    timestamp: datetime
    duration: float
    intensity: float
    waveform: tuple[float, ...] = ()


@dataclass(frozen=True)
class NoiseReading:
    timestamp: datetime
    level: float  # dB

    def __post_init__(self):
        if self.level < 0:
            raise ValueError(f"Noise level must be non-negative, got {self.level}")


@dataclass(frozen=True)
class SleepQualityScore:
    """A 0-100 score plus its categorical rating."""

    score: int
    rating: SleepQualityRating

    def __post_init__(self):
        if not 0 <= self.score <= 100:
            raise ValueError(f"Quality score must be within [0, 100], got {self.score}")

    @property
    def label(self) -> str:
        return _RATING_LABELS[self.rating]

    @property
    def color(self) -> str:
        return _RATING_COLORS[self.rating]


# ── Finalized session ────────────────────────────────────────────────


@dataclass(frozen=True)
class SleepSession:
    """One finished sleep-tracking interval.

    Attributes:
        date: The night the session belongs to (its start timestamp).
        goal_duration: Sleep goal in seconds at the time of recording.
        activities: Pre-sleep activities the sleeper tagged.
    """

    date: datetime
    start_time: datetime
    end_time: datetime
    quality: SleepQualityScore
    phases: tuple[SleepPhase, ...] = ()
    sounds: tuple[SoundEvent, ...] = ()
    noise_readings: tuple[NoiseReading, ...] = ()
    goal_duration: float = 8 * 3600
    activities: frozenset[SleepActivity] = frozenset()
    id: str = field(default_factory=lambda: uuid.uuid4().hex)

    @property
    def total_time(self) -> float:
        """Seconds between start and end."""
        return (self.end_time - self.start_time).total_seconds()

    @property
    def time_in_bed(self) -> float:
        return self.total_time

    @property
    def actual_sleep_time(self) -> float:
        """Seconds spent in any phase other than awake."""
        return sum(p.duration for p in self.phases if p.type != SleepPhaseType.AWAKE)

    @property
    def efficiency(self) -> float:
        total = self.total_time
        return self.actual_sleep_time / total if total > 0 else 0.0

    @property
    def average_noise(self) -> float:
        if not self.noise_readings:
            return 0.0
        return sum(r.level for r in self.noise_readings) / len(self.noise_readings)

    @property
    def time_away_from_goal(self) -> float:
        return max(0.0, self.goal_duration - self.actual_sleep_time)

    @property
    def goal_reached(self) -> bool:
        return self.actual_sleep_time >= self.goal_duration

    def has_phase(self, phase_type: SleepPhaseType) -> bool:
        return any(p.type == phase_type for p in self.phases)

    def phase_percentage(self, phase_type: SleepPhaseType) -> float:
        """Share of the session spent in *phase_type*, summed over its phases."""
        return sum(p.percentage for p in self.phases if p.type == phase_type)

    def phase_minutes(self, phase_type: SleepPhaseType) -> float:
        return sum(p.duration for p in self.phases if p.type == phase_type) / 60
