"""Logging setup for the installer CLI."""

import logging

from rich.console import Console
from rich.logging import RichHandler


def configure_logging(debug: bool = False) -> None:
    """Route package logs to stderr through rich.

    Args:
        debug: Emit DEBUG records when True, only warnings otherwise
    """
    handler = RichHandler(
        console=Console(stderr=True),
        show_time=False,
        show_path=False,
        markup=False,
    )
    logger = logging.getLogger("codealive_installer")
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if debug else logging.WARNING)
    logger.propagate = False
