"""napzzz track: record a session in real time."""

from __future__ import annotations

import asyncio

import click


async def _track(recorder, scheduler, minutes: float) -> None:  # type: ignore[no-untyped-def]
    """Run the samplers on the event loop until *minutes* pass or the task is cancelled."""
    scheduler.start()
    recorder.start()
    try:
        await asyncio.sleep(minutes * 60)
    finally:
        recorder.stop()
        scheduler.shutdown()


@click.command()
@click.option("--minutes", type=float, default=480.0, show_default=True, help="Stop automatically after this long.")
@click.option("--seed", type=int, default=None, help="Seed for reproducible runs.")
@click.pass_context
def track(ctx: click.Context, minutes: float, seed: int | None) -> None:
    """Track a sleep session in real time (Ctrl+C to wake up)."""
    from napzzz.core.cli.common import make_rng, render_session
    from napzzz.insights.store import InMemoryInsightsStore, InsightsSettings
    from napzzz.sleep.recorder import RecorderSettings, SessionRecorder
    from napzzz.sleep.sampling import APSamplerScheduler

    if minutes <= 0:
        raise click.BadParameter("--minutes must be positive")

    config = ctx.obj["config"]
    store = InMemoryInsightsStore.from_settings(InsightsSettings.from_config(config))
    scheduler = APSamplerScheduler()
    recorder = SessionRecorder(
        store,
        scheduler,
        rng=make_rng(config, seed),
        settings=RecorderSettings.from_config(config),
    )

    click.echo("Sleep tracking started. Press Ctrl+C to stop.\n")
    try:
        asyncio.run(_track(recorder, scheduler, minutes))
    except KeyboardInterrupt:
        click.echo("\nGood morning!")

    if recorder.latest_session:
        render_session(recorder.latest_session)
