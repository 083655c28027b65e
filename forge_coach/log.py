#!/usr/bin/env python3
"""
Logging setup for the CLI.

Library modules only create loggers; handlers are installed here, once,
by the command-line entry point.
- 0 (default): WARNING
- 1 (-v):      INFO
- 2+ (-vv):    DEBUG
"""

import logging

from rich.console import Console
from rich.logging import RichHandler


def get_level(verbosity: int) -> int:
    if verbosity >= 2:
        return logging.DEBUG
    if verbosity == 1:
        return logging.INFO
    return logging.WARNING


def setup_logging(verbosity: int = 0, console: Console = None) -> logging.Logger:
    """Route the forge_coach logger through rich on stderr"""
    logger = logging.getLogger('forge_coach')
    logger.setLevel(get_level(verbosity))
    logger.handlers.clear()

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_time=False,
        show_path=verbosity >= 2,
        markup=False,
    )
    handler.setFormatter(logging.Formatter('%(message)s'))
    logger.addHandler(handler)
    logger.propagate = False
    return logger
