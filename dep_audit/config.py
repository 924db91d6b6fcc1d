"""
Configuration file parsing and management.

Supports YAML configuration files (and plain JSON files by extension).
Merges configurations from multiple sources (custom -> project -> user -> defaults).
"""

from __future__ import annotations

import functools
import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable

import yaml

from .common import vlog
from .remote import DEFAULT_BRANCH, DEFAULT_TIMEOUT
from .resolver import ResolveOptions


# Configuration file locations (in priority order)
CONFIG_LOCATIONS = [
    ".checkmydeps.yml",                                     # Project root (highest priority)
    ".checkmydeps.yaml",                                    # Alternative extension
    os.path.expanduser("~/.config/checkmydeps/config.yml"),  # User global
    os.path.expanduser("~/.config/checkmydeps/config.yaml"),
]

COLOR_MODES = {"auto", "always", "never"}


@dataclass(frozen=True)
class Preferences:
    """
    Resolution and output preferences.

    Attributes:
        timeout_seconds: Timeout for each remote fetch
        max_workers: Maximum number of parallel fetches/modules
        fail_fast: Abort on the first remote or sub-module failure
        default_branch: Ref used for GitHub references without '#ref'
        update_check: Occasionally check whether a newer checkmydeps exists
        colors: 'auto', 'always' or 'never'
    """
    timeout_seconds: float = DEFAULT_TIMEOUT
    max_workers: int = 8
    fail_fast: bool = False
    default_branch: str = DEFAULT_BRANCH
    update_check: bool = True
    colors: str = "auto"

    def __post_init__(self):
        """Validate preferences after initialization."""
        if self.timeout_seconds < 1 or self.timeout_seconds > 120:
            raise ValueError(
                f"Invalid timeout_seconds: {self.timeout_seconds}. "
                "Must be between 1 and 120"
            )

        if self.max_workers < 1 or self.max_workers > 64:
            raise ValueError(
                f"Invalid max_workers: {self.max_workers}. "
                "Must be between 1 and 64"
            )

        if not self.default_branch or not self.default_branch.strip():
            raise ValueError("Invalid default_branch: must not be empty")

        if self.colors not in COLOR_MODES:
            raise ValueError(
                f"Invalid colors setting: {self.colors}. "
                f"Must be one of: {', '.join(sorted(COLOR_MODES))}"
            )

    @staticmethod
    def from_dict(data: dict[str, Any]) -> Preferences:
        """Create Preferences from dictionary."""
        return Preferences(
            timeout_seconds=data.get("timeout_seconds", DEFAULT_TIMEOUT),
            max_workers=data.get("max_workers", 8),
            fail_fast=data.get("fail_fast", False),
            default_branch=data.get("default_branch", DEFAULT_BRANCH),
            update_check=data.get("update_check", True),
            colors=data.get("colors", "auto"),
        )


@dataclass(frozen=True)
class Config:
    """
    Complete configuration for checkmydeps.

    Attributes:
        version: Config schema version
        github_token_env: Environment variable holding the GitHub token
        preferences: Global preferences
        source: Path to the configuration file that was loaded
        explicit: Keys written out in the source file, even when equal to
            the default (preference names plus "github_token_env")
    """
    version: int = 1
    github_token_env: str = "GITHUB_TOKEN"
    preferences: Preferences = field(default_factory=Preferences)
    source: str = ""
    explicit: frozenset[str] = field(default=frozenset(), compare=False, repr=False)

    def __post_init__(self):
        """Validate config after initialization."""
        if self.version != 1:
            raise ValueError(f"Unsupported config version: {self.version}. Expected version 1")

    @staticmethod
    def from_dict(data: dict[str, Any], source: str = "") -> Config:
        """Create Config from dictionary."""
        prefs_data = data.get("preferences") or {}
        if not isinstance(prefs_data, dict):
            raise TypeError("preferences must be a mapping")
        explicit = set(prefs_data)
        if "github_token_env" in data:
            explicit.add("github_token_env")
        return Config(
            version=data.get("version", 1),
            github_token_env=data.get("github_token_env", "GITHUB_TOKEN"),
            preferences=Preferences.from_dict(prefs_data),
            source=source,
            explicit=frozenset(explicit),
        )

    def merge_with(self, other: Config) -> Config:
        """
        Merge this config with another, preferring values from this config.

        A value of this config wins when its file sets it explicitly (even to
        the default) or when it differs from the default.

        Args:
            other: Other config to merge (lower priority)

        Returns:
            New merged Config object
        """
        defaults = Preferences()
        mine, theirs = self.preferences, other.preferences

        def pick(attr: str) -> Any:
            value = getattr(mine, attr)
            if attr in self.explicit or value != getattr(defaults, attr):
                return value
            return getattr(theirs, attr)

        merged_preferences = Preferences(
            timeout_seconds=pick("timeout_seconds"),
            max_workers=pick("max_workers"),
            fail_fast=pick("fail_fast"),
            default_branch=pick("default_branch"),
            update_check=pick("update_check"),
            colors=pick("colors"),
        )

        token_env = self.github_token_env
        if "github_token_env" not in self.explicit and token_env == "GITHUB_TOKEN":
            token_env = other.github_token_env

        return Config(
            version=self.version,
            github_token_env=token_env,
            preferences=merged_preferences,
            source=self.source or other.source,
            explicit=self.explicit | other.explicit,
        )

    def github_token(self) -> str | None:
        """GitHub token from the configured environment variable, if set."""
        return os.environ.get(self.github_token_env) or None

    def resolve_options(self, fail_fast: bool | None = None) -> ResolveOptions:
        """
        Build resolution options, applying environment overrides.

        CHECKMYDEPS_MAX_WORKERS and CHECKMYDEPS_TIMEOUT override the file values.

        Raises:
            ValueError: If an override is not a number or is out of range
        """
        prefs = self.preferences
        max_workers = _env_number("CHECKMYDEPS_MAX_WORKERS", int, prefs.max_workers)
        timeout = _env_number("CHECKMYDEPS_TIMEOUT", float, prefs.timeout_seconds)
        return ResolveOptions(
            timeout_seconds=timeout,
            max_workers=max_workers,
            fail_fast=prefs.fail_fast if fail_fast is None else fail_fast,
            default_branch=prefs.default_branch,
        )


def _env_number(name: str, convert: Callable[[str], Any], default: Any) -> Any:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return convert(raw.strip())
    except ValueError:
        raise ValueError(f"Invalid {name}: {raw!r} is not a number") from None


def read_config_data(path: Path) -> dict[str, Any] | None:
    """
    Parse a config file: JSON for a .json suffix, YAML otherwise.

    Returns:
        Top-level mapping ({} for an empty document), or None if the file is
        unreadable or does not parse
    """
    try:
        text = path.read_text(encoding="utf-8")
        data = json.loads(text) if path.suffix == ".json" else yaml.safe_load(text)
    except (OSError, ValueError, yaml.YAMLError):
        return None
    return data if isinstance(data, dict) else {}


def load_config_file(file_path: str | Path, verbose: bool = False) -> Config | None:
    """
    Load and validate a single config file.

    Returns:
        Config, or None when the file is missing, unparsable or invalid
    """
    path = Path(file_path)
    if not path.is_file():
        return None

    data = read_config_data(path)
    if data is None:
        vlog(f"Ignoring unparsable config file: {path}", verbose)
        return None

    try:
        config = Config.from_dict(data, source=str(path))
    except (ValueError, TypeError) as e:
        vlog(f"Ignoring invalid config file {path}: {e}", verbose)
        return None

    vlog(f"Loaded config from {path}", verbose)
    return config


def load_config(custom_path: str | None = None, verbose: bool = False) -> Config:
    """
    Load and merge every config file that exists.

    Precedence, highest first: custom_path, ./.checkmydeps.yml(.yaml),
    ~/.config/checkmydeps/config.yml(.yaml), built-in defaults.

    Raises:
        ValueError: If custom_path is given but cannot be loaded
    """
    found = [c for c in (load_config_file(loc, verbose) for loc in CONFIG_LOCATIONS) if c is not None]

    if custom_path:
        custom = load_config_file(custom_path, verbose)
        if custom is None:
            raise ValueError(f"Could not load config from specified path: {custom_path}")
        found.insert(0, custom)

    if not found:
        vlog("No config files found, using defaults", verbose)
        return Config()
    return functools.reduce(Config.merge_with, found)
