"""Centralized logging configuration for the transcript combiner."""

import logging
import sys
from typing import Optional

_console_handler: Optional[logging.Handler] = None


def setup_logger(level: int = logging.INFO) -> None:
    """
    Configure the root logger for the application.

    Diagnostics go to stderr so that stdout stays free for anything a caller
    wants to pipe. Calling this again replaces the handler it installed
    before instead of stacking a second one.

    Args:
        level: The logging level to set for the root logger.
    """
    global _console_handler

    # Create formatter
    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    # Create console handler
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)

    # Configure root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    if _console_handler is not None:
        root_logger.removeHandler(_console_handler)
    root_logger.addHandler(console_handler)
    _console_handler = console_handler


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance with the specified name.

    Args:
        name: The name for the logger (typically __name__).

    Returns:
        A configured logger instance.
    """
    return logging.getLogger(name)
