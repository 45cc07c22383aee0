"""
Sleep session tracking.

Schedule model, session recorder with simulated samplers, and quality
scoring. The recorder hands finished sessions to an
:class:`napzzz.insights.InsightsStore`.
"""

from .models import (
    NoiseReading,
    SleepActivity,
    SleepPhase,
    SleepPhaseType,
    SleepQualityRating,
    SleepQualityScore,
    SleepSession,
    SoundEvent,
    SoundEventType,
)
from .recorder import RecorderSettings, RecorderState, SessionRecorder
from .sampling import APSamplerScheduler, ManualSamplerScheduler, SamplerScheduler
from .schedule import Schedule, format_duration
from .scoring import score_sleep

__all__ = [
    "APSamplerScheduler",
    "ManualSamplerScheduler",
    "NoiseReading",
    "RecorderSettings",
    "RecorderState",
    "SamplerScheduler",
    "Schedule",
    "SessionRecorder",
    "SleepActivity",
    "SleepPhase",
    "SleepPhaseType",
    "SleepQualityRating",
    "SleepQualityScore",
    "SleepSession",
    "SoundEvent",
    "SoundEventType",
    "format_duration",
    "score_sleep",
]
