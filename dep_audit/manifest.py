"""
Manifest (package.json) access on the local file system.

Pure read/parse boundary: no business logic lives here.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

from .errors import MalformedManifestError, ManifestNotFoundError
from .models import NOT_INSTALLED

logger = logging.getLogger(__name__)

MANIFEST_FILE = "package.json"
INSTALL_DIR = "node_modules"


def manifest_path(module_dir: str | Path) -> Path:
    """Return the manifest path for a module directory."""
    return Path(module_dir) / MANIFEST_FILE


def has_manifest(module_dir: str | Path) -> bool:
    """Check whether a directory contains a package.json file."""
    return manifest_path(module_dir).is_file()


def _load_json(path: Path) -> dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise MalformedManifestError(str(path), f"invalid JSON: {e}") from e
    except UnicodeDecodeError as e:
        raise MalformedManifestError(str(path), f"not UTF-8 text: {e}") from e

    if not isinstance(data, dict):
        raise MalformedManifestError(str(path), "top-level value is not an object")
    return data


def read_manifest(module_dir: str | Path) -> dict[str, Any]:
    """
    Read and parse a module's package.json.

    Args:
        module_dir: Module directory

    Returns:
        Parsed manifest

    Raises:
        ManifestNotFoundError: If the directory has no package.json
        MalformedManifestError: If the file is not a JSON object
    """
    path = manifest_path(module_dir)
    if not path.is_file():
        raise ManifestNotFoundError(str(module_dir))
    return _load_json(path)


def installed_manifest_path(module_dir: str | Path, dep_name: str) -> Path:
    """Path of an installed dependency's manifest (scoped names included)."""
    return Path(module_dir, INSTALL_DIR, *dep_name.split("/"), MANIFEST_FILE)


def resolve_installed_version(module_dir: str | Path, dep_name: str) -> str:
    """
    Look up the version of a dependency installed under node_modules.

    A missing, unreadable or version-less manifest is not an error: the
    dependency is reported as not installed.

    Args:
        module_dir: Module directory holding node_modules
        dep_name: Dependency package name

    Returns:
        Installed version string, or "none"
    """
    path = installed_manifest_path(module_dir, dep_name)
    if not path.is_file():
        return NOT_INSTALLED

    try:
        data = _load_json(path)
    except (MalformedManifestError, OSError) as e:
        logger.warning(f"Ignoring unreadable installed manifest for {dep_name}: {e}")
        return NOT_INSTALLED

    version = data.get("version")
    if not isinstance(version, str) or not version.strip():
        logger.warning(f"Installed manifest for {dep_name} has no version field: {path}")
        return NOT_INSTALLED
    return version.strip()


def list_modules(directory: str | Path) -> list[str]:
    """
    List immediate subdirectories that contain a package.json.

    Args:
        directory: Directory to scan

    Returns:
        Sorted subdirectory names (empty if the directory does not exist)
    """
    root = Path(directory)
    if not root.is_dir():
        return []
    return sorted(
        entry.name for entry in root.iterdir()
        if entry.is_dir() and has_manifest(entry)
    )


def module_name(module_dir: str | Path) -> str:
    """Module name derived from the directory path, not from the manifest."""
    return Path(os.path.abspath(module_dir)).name
