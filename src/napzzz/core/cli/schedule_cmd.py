"""napzzz schedule: show the planned sleep window."""

from __future__ import annotations

from datetime import datetime

import click


@click.command()
@click.option("--bedtime", default=None, help="Bedtime as HH:MM (default: schedule.bedtime).")
@click.option("--wake", "wake_time", default=None, help="Wake time as HH:MM (default: schedule.wake_time).")
@click.pass_context
def schedule(ctx: click.Context, bedtime: str | None, wake_time: str | None) -> None:
    """Show how long a bedtime/wake-time schedule lets you sleep."""
    from napzzz.core.exceptions import ConfigurationError
    from napzzz.sleep.schedule import Schedule

    config = ctx.obj["config"]
    try:
        plan = Schedule.default(
            datetime.now(),
            bedtime=bedtime or config.get("schedule.bedtime", "23:00"),
            wake_time=wake_time or config.get("schedule.wake_time", "07:00"),
        )
    except ConfigurationError as exc:
        raise click.BadParameter(str(exc)) from exc

    click.echo(f"Planned sleep: {plan.formatted_duration} ({plan.format_range()})")
