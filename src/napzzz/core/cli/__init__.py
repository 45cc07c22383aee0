"""napzzz CLI: entry point for schedule, simulate, track, and insights commands."""

import click

from napzzz import __version__


@click.group()
@click.version_option(version=__version__, package_name="napzzz")
@click.option(
    "--config",
    "config_file",
    type=click.Path(dir_okay=False),
    default=None,
    help="YAML or JSON config file.",
)
@click.pass_context
def main(ctx: click.Context, config_file: str | None) -> None:
    """napzzz: sleep tracking simulator and insights."""
    from napzzz.core.cli.common import load_config
    from napzzz.core.exceptions import ConfigurationError
    from napzzz.core.utils.logging import setup_logging_from_config

    try:
        config = load_config(config_file)
    except ConfigurationError as exc:
        raise click.BadParameter(str(exc), param_hint="--config") from exc
    setup_logging_from_config(config)
    ctx.ensure_object(dict)
    ctx.obj["config"] = config


# Subcommands
from .insights_cmd import insights
from .schedule_cmd import schedule
from .simulate_cmd import simulate
from .track_cmd import track

main.add_command(schedule)
main.add_command(simulate)
main.add_command(track)
main.add_command(insights)
