"""Demo history for an empty insights dashboard.

Generates one plausible night per previous day: bedtime some minute past
23:00, six to nine hours in bed, a short awake prefix followed by light,
deep and rem sleep in a 45:25:20 ratio, a handful of sound events and a
noise reading every five minutes.
"""

from __future__ import annotations

import random
from datetime import datetime, time, timedelta

from napzzz.core.clock import Clock, SystemClock
from napzzz.core.types import RandomSource
from napzzz.sleep.models import (
    NoiseReading,
    SleepPhase,
    SleepPhaseType,
    SleepQualityRating,
    SleepQualityScore,
    SleepSession,
    SoundEvent,
    SoundEventType,
)
from napzzz.sleep.waveform import generate_sine_waveform

NOISE_SAMPLE_INTERVAL = timedelta(minutes=5)
PHASE_SPLIT = (
    (SleepPhaseType.LIGHT, 0.45),
    (SleepPhaseType.DEEP, 0.25),
    (SleepPhaseType.REM, 0.20),
)


def _demo_rating(hours: float) -> SleepQualityRating:
    if hours < 6:
        return SleepQualityRating.POOR
    if hours < 7:
        return SleepQualityRating.FAIR
    if hours < 8:
        return SleepQualityRating.GOOD
    return SleepQualityRating.EXCELLENT


def _phases(start: datetime, total: float, rng: RandomSource) -> tuple[SleepPhase, ...]:
    awake = rng.uniform(300, 1200)
    phases = [
        SleepPhase(
            type=SleepPhaseType.AWAKE,
            start_time=start,
            duration=awake,
            percentage=awake / total * 100,
        )
    ]
    # split covers whatever the awake prefix leaves
    asleep = total - awake
    split_total = sum(share for _, share in PHASE_SPLIT)
    cursor = start + timedelta(seconds=awake)
    for phase_type, share in PHASE_SPLIT:
        duration = asleep * share / split_total
        phases.append(
            SleepPhase(type=phase_type, start_time=cursor, duration=duration, percentage=duration / total * 100)
        )
        cursor += timedelta(seconds=duration)
    return tuple(phases)


def _sounds(start: datetime, total: float, rng: RandomSource) -> tuple[SoundEvent, ...]:
    events = []
    for _ in range(rng.randint(2, 8)):
        events.append(
            SoundEvent(
                type=rng.choice(list(SoundEventType)),
                timestamp=start + timedelta(seconds=rng.uniform(0, total)),
                duration=rng.uniform(5, 60),
                intensity=rng.uniform(0.3, 1.0),
                waveform=generate_sine_waveform(rng),
            )
        )
    return tuple(sorted(events, key=lambda e: e.timestamp))


def _noise(start: datetime, end: datetime, rng: RandomSource) -> tuple[NoiseReading, ...]:
    readings = []
    current = start
    while current < end:
        readings.append(NoiseReading(timestamp=current, level=rng.uniform(20, 40)))
        current += NOISE_SAMPLE_INTERVAL
    return tuple(readings)


def generate_sample_session(day: datetime, rng: RandomSource, goal_duration: float = 8 * 3600) -> SleepSession:
    """Build one demo night starting on *day* at 23:xx."""
    start = datetime.combine(day.date(), time(hour=23, minute=rng.randint(0, 59)))
    end = start + timedelta(hours=rng.randint(6, 9))
    total = (end - start).total_seconds()
    return SleepSession(
        date=day,
        start_time=start,
        end_time=end,
        quality=SleepQualityScore(score=rng.randint(60, 95), rating=_demo_rating(total / 3600)),
        phases=_phases(start, total, rng),
        sounds=_sounds(start, total, rng),
        noise_readings=_noise(start, end, rng),
        goal_duration=goal_duration,
    )


def generate_sample_sessions(
    days: int = 7,
    clock: Clock | None = None,
    rng: RandomSource | None = None,
) -> list[SleepSession]:
    """One demo session for each of the *days* days before today, newest first."""
    clock = clock or SystemClock()
    rng = rng or random.Random()
    today = clock.now()
    return [generate_sample_session(today - timedelta(days=offset), rng) for offset in range(1, days + 1)]
