"""Synthetic waveforms for simulated sound events.

Purely cosmetic: each sound type gets a recognisable envelope so charts
look plausible. Amplitudes are floats in roughly [-1, 1].
"""

from __future__ import annotations

import math

from napzzz.core.types import RandomSource

from .models import SoundEventType

WAVEFORM_SAMPLES = 100
MOVEMENT_BURST_SAMPLES = 20


def _sample(sound_type: SoundEventType, index: int, rng: RandomSource) -> float:
    if sound_type == SoundEventType.SNORING:
        # slow rhythmic swell
        return math.sin(index * 0.1) * rng.uniform(0.3, 0.8)
    if sound_type == SoundEventType.TALKING:
        return rng.uniform(-0.6, 0.6)
    if sound_type == SoundEventType.MOVEMENT:
        # loud burst, then a quiet tail
        damping = 1.0 if index < MOVEMENT_BURST_SAMPLES else 0.2
        return rng.uniform(-0.4, 0.4) * damping
    return rng.uniform(-0.3, 0.3)


def generate_waveform(
    sound_type: SoundEventType,
    rng: RandomSource,
    samples: int = WAVEFORM_SAMPLES,
) -> tuple[float, ...]:
    """Return *samples* amplitude values shaped for *sound_type*."""
    return tuple(_sample(sound_type, i, rng) for i in range(samples))


def generate_sine_waveform(rng: RandomSource, samples: int = WAVEFORM_SAMPLES) -> tuple[float, ...]:
    """Generic swelling waveform used for demo history."""
    return tuple(math.sin(i * 0.1) * rng.uniform(0.2, 0.8) for i in range(samples))
