"""Shared utilities and configuration for the transcript combiner."""

# Export setup_logger for external use
from .logging import get_logger, setup_logger

__all__ = ["get_logger", "setup_logger"]
