"""Logger configuration for elm-test.

User-facing output goes to stdout through the reporters. Diagnostics go
through these loggers to stderr so they never mix with ``--report json``.
"""

import logging
import sys
from typing import Optional

LOGGER_NAME = "elm_test"
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logger(
    level: str = "WARNING",
    format_string: Optional[str] = None,
) -> logging.Logger:
    """Configure the package logger with a single stderr handler.

    Args:
        level: Level name (DEBUG, INFO, WARNING...).
        format_string: Optional log format. Default: DEFAULT_FORMAT.

    Returns:
        The configured ``elm_test`` logger.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, level.upper()))

    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(getattr(logging, level.upper()))
    handler.setFormatter(logging.Formatter(format_string or DEFAULT_FORMAT))
    logger.addHandler(handler)

    return logger
