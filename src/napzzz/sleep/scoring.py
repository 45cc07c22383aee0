"""Sleep quality scoring.

A session's score is a random draw from the band its duration falls into,
minus a penalty for detected sound disruptions. The random source is a
parameter so callers can make the draw reproducible.
"""

from __future__ import annotations

import random
from collections.abc import Sequence

from napzzz.core.types import RandomSource

from .models import SleepPhase, SleepQualityRating, SleepQualityScore, SoundEvent

SOUND_PENALTY_PER_EVENT = 5
MAX_SOUND_PENALTY = 20

# (upper bound in hours, exclusive) -> inclusive score band and rating
DURATION_BANDS: tuple[tuple[float, tuple[int, int], SleepQualityRating], ...] = (
    (4, (10, 30), SleepQualityRating.TOO_SHORT),
    (6, (30, 49), SleepQualityRating.POOR),
    (7, (50, 69), SleepQualityRating.FAIR),
    (9, (70, 89), SleepQualityRating.GOOD),
    (float("inf"), (85, 95), SleepQualityRating.EXCELLENT),
)


def rating_for_hours(hours: float) -> tuple[tuple[int, int], SleepQualityRating]:
    """Return the ``(band, rating)`` a duration of *hours* falls into."""
    for upper, band, rating in DURATION_BANDS:
        if hours < upper:
            return band, rating
    # unreachable: the last band is unbounded
    return DURATION_BANDS[-1][1], DURATION_BANDS[-1][2]


def sound_penalty(sound_count: int) -> int:
    return min(sound_count * SOUND_PENALTY_PER_EVENT, MAX_SOUND_PENALTY)


def score_sleep(
    total_duration: float,
    phases: Sequence[SleepPhase],
    sounds: Sequence[SoundEvent],
    rng: RandomSource | None = None,
) -> SleepQualityScore:
    """Score a finished session.

    Args:
        total_duration: Session length in seconds.
        phases: Recorded phases. Currently informational only.
        sounds: Detected sound events; each costs 5 points, up to 20.
        rng: Random source for the base-score draw. Defaults to a fresh,
            unseeded ``random.Random``.

    Returns:
        A score clamped to ``[0, 100]`` with the band's rating.
    """
    rng = rng or random.Random()
    (low, high), rating = rating_for_hours(total_duration / 3600)
    base = rng.randint(low, high)
    score = max(0, base - sound_penalty(len(sounds)))
    return SleepQualityScore(score=min(score, 100), rating=rating)
