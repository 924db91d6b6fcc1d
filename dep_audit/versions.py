"""
npm-style version constraint evaluation.

Range satisfaction is delegated to semantic_version's NpmSpec, which follows
the node-semver grammar (^, ~, x-ranges, hyphen ranges, || unions).
"""

from __future__ import annotations

import re

from semantic_version import NpmSpec, Version

# ">= 1.0.0" -> ">=1.0.0"; node-semver allows blanks after an operator
OPERATOR_GAP_RE = re.compile(r"([<>]=?|=|~|\^)\s+")


def normalize_constraint(constraint: str) -> str:
    """Collapse whitespace between comparison operators and their versions."""
    return OPERATOR_GAP_RE.sub(r"\1", constraint.strip()) or "*"


def satisfies(version: str, constraint: str) -> bool:
    """
    Check whether an installed version satisfies a declared constraint.

    Mirrors npm's semver.satisfies: an invalid version or a constraint that is
    not a semver range (URL, file: path, dist-tag, unresolved reference) is
    simply not satisfied.

    Args:
        version: Installed version (e.g., "1.3.0")
        constraint: Range or exact version (e.g., "^1.0.0", "2.0.0", "*")

    Returns:
        True if version matches constraint
    """
    constraint = normalize_constraint(constraint)
    try:
        parsed = Version(version.strip().lstrip("v="))
    except ValueError:
        return False
    try:
        spec = NpmSpec(constraint)
    except ValueError:
        return False
    return spec.match(parsed)


def compare_versions(v1: str, v2: str) -> int:
    """
    Compare two semantic versions.

    Args:
        v1: First version
        v2: Second version

    Returns:
        -1 if v1 < v2, 0 if v1 == v2, 1 if v1 > v2

    Raises:
        ValueError: If either version is not a valid semantic version
    """
    ver1 = Version(v1.strip().lstrip("v="))
    ver2 = Version(v2.strip().lstrip("v="))
    if ver1 < ver2:
        return -1
    elif ver1 > ver2:
        return 1
    return 0
