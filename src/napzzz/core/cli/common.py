"""Shared setup and rendering for CLI commands."""

from __future__ import annotations

import random

import click

from napzzz.core.config import Config
from napzzz.insights.aggregation import WeeklySummary
from napzzz.sleep.models import SleepSession
from napzzz.sleep.schedule import format_duration


def load_config(config_file: str | None = None) -> Config:
    return Config(config_file=config_file)


def make_rng(config: Config, seed: int | None = None) -> random.Random:
    """Seeded random source; ``--seed`` beats ``simulation.seed`` beats unseeded."""
    if seed is None:
        seed = config.get("simulation.seed")
    if seed in (None, ""):
        return random.Random()
    try:
        return random.Random(int(seed))
    except (TypeError, ValueError) as exc:
        raise click.BadParameter(f"simulation.seed must be an integer, got {seed!r}") from exc


def _console():
    try:
        from rich.console import Console
    except ImportError as exc:
        raise click.ClickException("Install rich: pip install rich") from exc
    return Console()


def render_session(session: SleepSession) -> None:
    from rich.table import Table

    console = _console()
    quality = session.quality
    console.print(
        f"[bold]{session.start_time:%a %b %d}[/] "
        f"{session.start_time:%H:%M} - {session.end_time:%H:%M}  "
        f"quality [bold]{quality.score}[/] ({quality.label})"
    )
    console.print(
        f"Time asleep {format_duration(session.actual_sleep_time)} of "
        f"{format_duration(session.time_in_bed)} in bed, "
        f"efficiency {session.efficiency:.0%}, average noise {session.average_noise:.1f} dB"
    )
    if not session.goal_reached:
        console.print(f"You're {format_duration(session.time_away_from_goal)} away from reaching your sleep goal")

    table = Table(title="Sleep phases")
    table.add_column("Phase")
    table.add_column("Start")
    table.add_column("Minutes", justify="right")
    table.add_column("%", justify="right")
    for phase in session.phases:
        table.add_row(str(phase.type), f"{phase.start_time:%H:%M}", f"{phase.duration / 60:.0f}", f"{phase.percentage:.1f}")
    console.print(table)

    if session.sounds:
        sounds = Table(title="Detected sounds")
        sounds.add_column("Time")
        sounds.add_column("Type")
        sounds.add_column("Seconds", justify="right")
        sounds.add_column("Intensity", justify="right")
        for sound in session.sounds:
            sounds.add_row(
                f"{sound.timestamp:%H:%M}", sound.type.label, f"{sound.duration:.0f}", f"{sound.intensity:.2f}"
            )
        console.print(sounds)


def render_summary(summary: WeeklySummary) -> None:
    from rich.table import Table

    console = _console()
    if summary.session_count == 0:
        console.print("No sessions recorded yet.")
        return

    table = Table(title=f"Last {summary.session_count} night(s)")
    table.add_column("Metric")
    table.add_column("Value", justify="right")
    table.add_row("Average sleep", format_duration(summary.average_sleep_duration))
    table.add_row("Best score", str(summary.best_score))
    table.add_row("Average efficiency", f"{summary.average_efficiency:.0%}")
    table.add_row("Average noise", f"{summary.average_noise:.1f} dB")
    for phase_type, pct in summary.phase_percentages.items():
        table.add_row(f"{phase_type.value.capitalize()} sleep", f"{pct:.1f}%")
    table.add_row("Bedtime consistency", f"{summary.bedtime_consistency:.1f}%")
    table.add_row("Wake-up consistency", f"{summary.wake_time_consistency:.1f}%")
    table.add_row("Duration consistency", f"{summary.duration_consistency:.1f}%")
    table.add_row("Quality trend", " ".join(str(score) for score in summary.quality_trend))
    table.add_row("Hours trend", " ".join(f"{hours:.1f}" for hours in summary.duration_trend))
    console.print(table)
