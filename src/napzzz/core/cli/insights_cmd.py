"""napzzz insights: weekly summary over stored or demo history."""

from __future__ import annotations

import click


@click.command()
@click.option("--demo", is_flag=True, help="Fill the history with generated sample nights.")
@click.option("--days", type=int, default=7, show_default=True, help="Demo nights to generate.")
@click.option("--seed", type=int, default=None, help="Seed for reproducible demo data.")
@click.pass_context
def insights(ctx: click.Context, demo: bool, days: int, seed: int | None) -> None:
    """Show the insights summary for the most recent nights."""
    from napzzz.core.cli.common import make_rng, render_summary
    from napzzz.insights.aggregation import summarize_week
    from napzzz.insights.sample_data import generate_sample_sessions
    from napzzz.insights.store import InMemoryInsightsStore, InsightsSettings

    config = ctx.obj["config"]
    settings = InsightsSettings.from_config(config)
    store = InMemoryInsightsStore.from_settings(settings)
    if demo:
        store.load(generate_sample_sessions(days, rng=make_rng(config, seed)))

    render_summary(summarize_week(store.sessions, settings.window))
