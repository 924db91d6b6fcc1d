"""
Common utilities shared across dep_audit modules.
"""

from __future__ import annotations

import os
import sys
from typing import TextIO


def env_flag(name: str, default: bool = False) -> bool:
    """Read a boolean environment variable ("1", "true", "yes" are true)."""
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def supports_color(stream: TextIO | None = None) -> bool:
    """
    Check whether ANSI colors should be written to a stream.

    Honors NO_COLOR and FORCE_COLOR, then falls back to TTY detection.
    """
    if os.environ.get("NO_COLOR"):
        return False
    if env_flag("FORCE_COLOR"):
        return True
    stream = stream or sys.stdout
    try:
        return stream.isatty() and os.environ.get("TERM") != "dumb"
    except (AttributeError, ValueError):
        return False


def vlog(msg: str, verbose: bool = False) -> None:
    """
    Log a message only in verbose mode (or with CHECKMYDEPS_DEBUG=1).

    Args:
        msg: Message to log
        verbose: Whether verbose mode is enabled
    """
    if verbose or env_flag("CHECKMYDEPS_DEBUG"):
        from .logging_config import get_logger
        get_logger().info(msg)
