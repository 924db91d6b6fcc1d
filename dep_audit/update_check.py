"""
"Newer version available" notice for checkmydeps itself.

Runs after the report, only now and then, and never fails the run.
"""

from __future__ import annotations

import json
import logging
import random
import urllib.request

from packaging import version

logger = logging.getLogger(__name__)

PACKAGE_NAME = "checkmydeps"
PYPI_URL = f"https://pypi.org/pypi/{PACKAGE_NAME}/json"
CHECK_PROBABILITY = 1 / 3
OFFLINE_MESSAGE = "(unable to check for new version of the tool, are you offline?)"


def should_check_for_update() -> bool:
    """Roll the dice: roughly one run in three checks for an update."""
    return random.random() > 1 - CHECK_PROBABILITY


def fetch_latest_release(timeout: float = 3) -> str:
    """
    Fetch the latest released version from PyPI.

    Raises:
        OSError: On network failure (urllib errors are OSError subclasses)
        ValueError: If the response carries no version
    """
    req = urllib.request.Request(PYPI_URL, headers={"User-Agent": PACKAGE_NAME})
    with urllib.request.urlopen(req, timeout=timeout) as response:
        data = json.loads(response.read())
    latest = data.get("info", {}).get("version", "")
    if not latest:
        raise ValueError("PyPI response has no version")
    return latest


def is_newer(latest: str, current: str) -> bool:
    try:
        return version.parse(latest) > version.parse(current)
    except version.InvalidVersion:
        return False


def check_for_update(current_version: str, timeout: float = 3) -> str | None:
    """
    Compare the running version against the latest release.

    Args:
        current_version: Version of the running tool
        timeout: Request timeout in seconds

    Returns:
        Notice to show the user, or None when up to date
    """
    try:
        latest = fetch_latest_release(timeout)
    except (OSError, ValueError) as e:
        logger.debug(f"Update check failed: {e}")
        return OFFLINE_MESSAGE

    if not is_newer(latest, current_version):
        return None
    return f"Version {latest} is available, current is {current_version}, please update."
