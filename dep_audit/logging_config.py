"""
Logging setup for checkmydeps.

Everything is logged to stderr; stdout is reserved for the report.
"""

import logging
import sys
from typing import Optional


LOGGER_NAME = "dep_audit"
LOG_FORMAT = "%(levelname_colored)s %(message)s"

_logger: Optional[logging.Logger] = None


class ColoredFormatter(logging.Formatter):
    """Formatter exposing a colored level name as %(levelname_colored)s."""

    COLORS = {
        'DEBUG': '\033[36m',      # Cyan
        'INFO': '\033[32m',       # Green
        'WARNING': '\033[33m',    # Yellow
        'ERROR': '\033[31m',      # Red
        'CRITICAL': '\033[1;31m', # Bold Red
    }
    RESET = '\033[0m'

    def __init__(self, fmt: str = LOG_FORMAT, use_colors: bool = True):
        super().__init__(fmt)
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, '') if self.use_colors else ''
        record.levelname_colored = f"{color}{record.levelname}{self.RESET}" if color else record.levelname
        return super().format(record)


def setup_logging(
    level: str = "WARNING",
    verbose: bool = False,
    propagate: bool = False,
    use_colors: Optional[bool] = None,
) -> logging.Logger:
    """
    Configure the package logger.

    Calling it again replaces the previous console handler.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        verbose: Force DEBUG level (--verbose)
        propagate: Let records reach the root logger (used by tests)
        use_colors: Force colored level names on/off (default: stderr is a TTY)

    Returns:
        The configured "dep_audit" logger
    """
    global _logger

    numeric_level = logging.DEBUG if verbose else getattr(logging, level.upper())
    if use_colors is None:
        use_colors = sys.stderr.isatty()

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(ColoredFormatter(use_colors=use_colors))

    logger = logging.getLogger(LOGGER_NAME)
    for old in logger.handlers[:]:
        logger.removeHandler(old)
    logger.addHandler(handler)
    logger.setLevel(numeric_level)
    logger.propagate = propagate

    _logger = logger
    return logger


def get_logger() -> logging.Logger:
    """Return the package logger, setting it up with defaults on first use."""
    if _logger is None:
        return setup_logging()
    return _logger
