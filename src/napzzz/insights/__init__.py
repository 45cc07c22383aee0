"""Session history and the aggregations behind the insights dashboard."""

from .aggregation import (
    WeeklySummary,
    average_phase_percentage,
    average_sleep_duration,
    bedtime_consistency,
    best_score,
    duration_consistency,
    duration_trend_series,
    quality_trend_series,
    summarize_week,
    wake_time_consistency,
)
from .sample_data import generate_sample_sessions
from .store import InMemoryInsightsStore, InsightsSettings, InsightsStore, week_bounds

__all__ = [
    "InMemoryInsightsStore",
    "InsightsSettings",
    "InsightsStore",
    "WeeklySummary",
    "average_phase_percentage",
    "average_sleep_duration",
    "bedtime_consistency",
    "best_score",
    "duration_consistency",
    "duration_trend_series",
    "generate_sample_sessions",
    "quality_trend_series",
    "summarize_week",
    "wake_time_consistency",
    "week_bounds",
]
