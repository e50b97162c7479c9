"""Log initialization.

LOG_LEVEL follows the convention 0 = silent, 1 = informational, 2 = debug.
Records go to LOG_FILE when set, otherwise to stderr through rich. Nothing is
ever logged to stdout, which carries the result lines.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

_LEVELS = {
    0: logging.CRITICAL + 1,
    1: logging.INFO,
    2: logging.DEBUG,
}


def resolve_level(verbosity: int) -> int:
    """Map a LOG_LEVEL verbosity to a logging level; unknown values are silent."""
    return _LEVELS.get(verbosity, _LEVELS[0])


def configure_logging(verbosity: int = 0, log_file: str | None = None) -> logging.Logger:
    """Configure the package logger and return it.

    Replaces handlers installed by an earlier call, so it is safe to call once
    per CLI invocation.
    """
    logger = logging.getLogger("pkgquality")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    handler: logging.Handler
    if log_file:
        handler = logging.FileHandler(log_file, encoding="utf-8")
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
    else:
        handler = RichHandler(console=Console(stderr=True), show_path=False)

    logger.addHandler(handler)
    logger.setLevel(resolve_level(verbosity))
    logger.propagate = False
    return logger
