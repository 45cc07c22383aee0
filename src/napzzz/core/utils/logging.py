"""
loguru sinks for the napzzz CLI.

Library modules log through ``loguru.logger`` directly and never touch sinks;
only the CLI entry point calls :func:`setup_logging`.
"""

import sys

from loguru import logger

CONSOLE_FORMAT = "<dim>{time:HH:mm:ss}</dim> <level>{level: <7}</level> {message}"
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <7} | {name}:{line} | {message}"


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    rotation: str = "10 MB",
    retention: str = "14 days",
) -> list[int]:
    """
    Replace loguru's sinks with a stderr sink and, optionally, a rotating file.

    Args:
        level: Minimum level for both sinks (DEBUG shows individual sampler ticks).
        log_file: File to append to; rotated by size and pruned by age.
        rotation: Size at which the file rotates.
        retention: Age after which rotated files are deleted.

    Returns:
        The ids of the sinks that were added.
    """
    level = level.upper()
    logger.remove()
    sink_ids = [logger.add(sys.stderr, level=level, format=CONSOLE_FORMAT)]
    if log_file:
        sink_ids.append(
            logger.add(log_file, level=level, format=FILE_FORMAT, rotation=rotation, retention=retention)
        )
    return sink_ids


def setup_logging_from_config(config) -> list[int]:
    """Apply ``logging.level`` and ``logging.file`` from a :class:`~napzzz.core.config.Config`."""
    return setup_logging(level=str(config.get("logging.level") or "WARNING"), log_file=config.log_file())
