import logging as root_logging
import sys
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

SDK_LOGGER_NAME = "shardbridge"


def setup_sdk_logging(
    level="INFO",
    pretty: bool = False,
    console: Optional[Console] = None,
    propagate: bool = False,
):
    """
    Attaches a single handler to the `shardbridge` logger.

    Readers and writers usually run inside host worker processes whose stderr
    is collected line by line, so the default output is one plain line per
    record. `pretty=True` switches to a Rich console for interactive use.
    Calling this again replaces the handler, which makes it safe to call once
    per task in a reused worker.

    Args:
        level (str): Threshold for the `shardbridge` namespace.
        pretty (bool): Render records (and tracebacks) through Rich.
        console (Optional[rich.console.Console]): Console used in pretty mode,
            stderr by default.
        propagate (bool): Forward records to the root logger as well. Off by
            default because hosts such as Spark configure the root logger
            themselves and every record would be printed twice.
    """
    logger = root_logging.getLogger(SDK_LOGGER_NAME)

    if logger.hasHandlers():
        logger.handlers.clear()

    if pretty:
        handler = RichHandler(
            level=level,
            console=console or Console(stderr=True),
            show_time=True,
            show_path=True,
            markup=True,
            rich_tracebacks=True,
            log_time_format="[%X]",
        )
        handler.setFormatter(
            root_logging.Formatter(fmt="[dim white]%(name)s[/dim white]: %(message)s")
        )
        init_message = f"shardbridge logging at [bold]{level}[/bold]"
        extra = {"markup": True}
    else:
        # 2024-01-01 12:00:00 [INFO] shardbridge.handlers.bulk_writer: ...
        handler = root_logging.StreamHandler(sys.stderr)
        handler.setFormatter(
            root_logging.Formatter(
                fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        init_message = f"shardbridge logging at {level}"
        extra = {}

    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = propagate

    logger.info(init_message, extra=extra)


def get_logger(name: Optional[str] = None) -> root_logging.Logger:
    """Returns `name` (usually `__name__`), or the package logger when omitted."""
    return root_logging.getLogger(name if name is not None else SDK_LOGGER_NAME)
