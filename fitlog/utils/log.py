"""Logging setup for the command-line front end."""

from __future__ import annotations

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "fitlog"


def setup_logging(level: str = "WARNING", console: Optional[Console] = None) -> logging.Logger:
    """Attach a single rich handler to the package logger."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, level.upper()))

    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_time=False,
        show_path=False,
    )
    handler.setLevel(getattr(logging, level.upper()))
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
    return logger
