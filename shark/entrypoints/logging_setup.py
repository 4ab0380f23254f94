"""
Console logging for the shark CLI.

Library modules only ever call ``logging.getLogger``; the CLI builds the
``shark`` logger here and hands it to the runner and the batch driver.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "shark"


def setup_logger(verbose: bool = False, console: Console | None = None) -> logging.Logger:
    """
    Configures the 'shark' logger with a RichHandler on stderr and returns it.

    Args:
        verbose: If True, sets the log level to DEBUG, otherwise WARNING.
        console: Optional rich console to write to (defaults to stderr).

    Returns:
        The configured 'shark' logger instance.
    """
    level = logging.DEBUG if verbose else logging.WARNING

    log = logging.getLogger(LOGGER_NAME)
    log.setLevel(level)
    log.propagate = False

    # Re-running setup must not stack handlers.
    if log.hasHandlers():
        log.handlers.clear()

    handler = RichHandler(
        console=console or Console(stderr=True),
        rich_tracebacks=True,
        show_path=False,
        log_time_format="[%X]",
    )
    handler.setLevel(level)
    log.addHandler(handler)

    log.debug("Logger configured with level=%s", logging.getLevelName(level))
    return log
