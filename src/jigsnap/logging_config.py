"""
Logging Configuration
Sets up the package logger for applications embedding jigsnap.
"""
import logging
import sys
from typing import Optional, TextIO


def setup_logging(level: int = logging.INFO, stream: Optional[TextIO] = None) -> logging.Logger:
    """
    Configures the logger for the 'jigsnap' namespace.

    Args:
        level: Logging level (e.g. logging.DEBUG, logging.INFO)
        stream: Optional text stream for log output; defaults to stdout.

    Returns:
        The configured package logger.
    """
    logger = logging.getLogger("jigsnap")
    logger.setLevel(level)

    # Avoid duplicate records when called more than once
    if logger.hasHandlers():
        logger.handlers.clear()

    handler = logging.StreamHandler(stream if stream is not None else sys.stdout)
    handler.setLevel(level)

    # Format: Time - Module - Level - Message
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)

    logger.debug("Logging initialized.")
    return logger
