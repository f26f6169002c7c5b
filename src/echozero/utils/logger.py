"""Logging utilities for echozero."""

import logging
import sys

LOGGING_FORMAT = (
    "%(asctime)s [%(levelname)s] %(name)s: %(message)s (%(filename)s:%(lineno)d)"
)
LOGGING_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

def setup_logging(level: int = logging.INFO, stream=sys.stdout) -> None:
    """
    Configures the root logger for the echozero engine.

    Args:
        level: The minimum logging level to output (e.g., logging.DEBUG, logging.INFO).
        stream: The output stream (e.g., sys.stdout, sys.stderr, or a file handle).
    """
    logging.basicConfig(
        level=level,
        format=LOGGING_FORMAT,
        datefmt=LOGGING_DATE_FORMAT,
        stream=stream,
        force=True # Override any existing basicConfig by other libraries
    )


def get_logger(name: str) -> logging.Logger:
    """
    Returns a logger instance with the specified name.

    Args:
        name: The name for the logger (usually __name__ of the calling module).

    Returns:
        A configured Logger instance.
    """
    return logging.getLogger(name)
