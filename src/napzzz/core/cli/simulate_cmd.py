"""napzzz simulate: replay a whole night instantly on a manual clock."""

from __future__ import annotations

from datetime import datetime

import click

from napzzz.sleep.models import SleepActivity


@click.command()
@click.option("--hours", type=float, default=8.0, show_default=True, help="Length of the simulated night.")
@click.option("--seed", type=int, default=None, help="Seed for reproducible runs.")
@click.option("--history", type=int, default=0, show_default=True, help="Days of demo history to load first.")
@click.option(
    "--activity",
    "activities",
    multiple=True,
    type=click.Choice([a.value for a in SleepActivity]),
    help="Pre-sleep activity to tag (repeatable).",
)
@click.pass_context
def simulate(ctx: click.Context, hours: float, seed: int | None, history: int, activities: tuple[str, ...]) -> None:
    """Simulate a sleep session and show its results."""
    from napzzz.core.cli.common import make_rng, render_session, render_summary
    from napzzz.core.clock import ManualClock
    from napzzz.core.events import SESSION_FINALIZED, EventBus
    from napzzz.core.exceptions import ConfigurationError
    from napzzz.insights.aggregation import summarize_week
    from napzzz.insights.sample_data import generate_sample_sessions
    from napzzz.insights.store import InMemoryInsightsStore, InsightsSettings
    from napzzz.sleep.recorder import RecorderSettings, SessionRecorder
    from napzzz.sleep.sampling import ManualSamplerScheduler
    from napzzz.sleep.schedule import Schedule

    if hours <= 0:
        raise click.BadParameter("--hours must be positive")

    config = ctx.obj["config"]
    rng = make_rng(config, seed)
    try:
        plan = Schedule.from_config(config, datetime.now())
    except ConfigurationError as exc:
        raise click.BadParameter(str(exc)) from exc
    clock = ManualClock(start=plan.bedtime)

    bus = EventBus()
    insights_settings = InsightsSettings.from_config(config)
    store = InMemoryInsightsStore.from_settings(insights_settings, events=bus)
    if history > 0:
        store.load(generate_sample_sessions(history, clock=clock, rng=rng))

    scheduler = ManualSamplerScheduler(clock)
    recorder = SessionRecorder(
        store,
        scheduler,
        clock=clock,
        rng=rng,
        events=bus,
        settings=RecorderSettings.from_config(config),
    )
    bus.on(SESSION_FINALIZED, lambda event: click.echo(f"Session {event.payload['session_id'][:8]} finalized.\n"))

    click.echo(f"Simulating {hours:g}h of sleep from {plan.bedtime:%H:%M} (planned {plan.formatted_duration})...")
    recorder.start(schedule=plan, activities=[SleepActivity(a) for a in activities])
    scheduler.advance(hours * 3600)
    session = recorder.stop()

    render_session(session)
    render_summary(summarize_week(store.sessions, insights_settings.window))
