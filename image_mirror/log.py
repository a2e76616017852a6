import logging

import requests
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

default_theme = Theme(
    {
        "info": "bright_blue",
        "warning": "yellow",
        "error": "bright_red",
        "success": "green3",
        "quiet": "bright_black",
        "logging.keyword": "bold cyan",
    }
)

stdout_console = Console(theme=default_theme)
stderr_console = Console(stderr=True, theme=default_theme)

# Highlighted in log lines so the outcome of each image stands out in a long update check.
CHECK_KEYWORDS = ["up to date", "New versions", "Skipping..."]

# Libraries whose debug logging is only shown with --verbose.
NOISY_LOGGERS = ["urllib3"]


def verbosity_level(verbose: bool = False, quiet: bool = False) -> int:
    """Map the --verbose and --quiet flags to a log level.

    :raises ValueError: If both flags are set.
    """
    if verbose and quiet:
        raise ValueError("Cannot set both --verbose and --quiet flags.")
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.ERROR
    return logging.INFO


def init_logging(log_level: str | int = logging.INFO) -> None:
    """Send log records to the stderr console so stdout only carries image listings.

    At DEBUG level records show their source location, tracebacks include locals, and HTTP connection logging from
    the registry client is shown.

    :param log_level: The log level to use
    """
    if isinstance(log_level, str):
        log_level = logging.getLevelName(log_level.upper())
    debug = log_level == logging.DEBUG

    handler = RichHandler(
        console=stderr_console,
        markup=True,
        show_time=debug,
        show_path=debug,
        keywords=CHECK_KEYWORDS,
        rich_tracebacks=True,
        tracebacks_suppress=[typer, requests],
        tracebacks_max_frames=20 if debug else 0,
        tracebacks_show_locals=debug,
    )
    logging.basicConfig(level=log_level, format="%(message)s", datefmt="[%X]", handlers=[handler])

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if debug else logging.WARNING)
