"""Shared utilities for the shellfn CLI"""

from __future__ import annotations

import logging
import os

from rich.console import Console
from rich.logging import RichHandler

console = Console(stderr=True)


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the shellfn CLI.

    Log levels:
    - Normal: Only warnings/errors shown
    - Verbose (-v): INFO level - shows which function runs
    - Debug (SHELLFN_DEBUG=1): DEBUG level - shows parsing and resolution
    """
    debug = bool(os.environ.get("SHELLFN_DEBUG"))
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    # Logs go to stderr so compiled output on stdout stays clean
    handler = RichHandler(
        console=console,
        show_time=verbose,
        show_path=debug,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))

    logger = logging.getLogger("shellfn")
    logger.setLevel(level)
    logger.handlers = [handler]
    logger.propagate = False
