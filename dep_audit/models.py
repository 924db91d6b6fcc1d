"""
Dependency records produced by manifest extraction and resolution.

A DeclaredDependency is what the manifest says. A ResolvedDependency adds the
constraint actually checked, the installed version and the resulting status.
Both are immutable; resolution builds a new record instead of mutating one.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

# Manifest sections, in merge order
KIND_NORMAL = "normal"
KIND_DEV = "dev"
KIND_OPTIONAL = "optional"

MANIFEST_SECTIONS: tuple[tuple[str, str], ...] = (
    ("dependencies", KIND_NORMAL),
    ("devDependencies", KIND_DEV),
    ("optionalDependencies", KIND_OPTIONAL),
)

REF_REGISTRY = "registry"
REF_REMOTE = "remote-reference"

STATUS_UNRESOLVED = "unresolved"
STATUS_SATISFIED = "satisfied"
STATUS_OUTDATED = "outdated"

# Installed version sentinel when node_modules has no copy
NOT_INSTALLED = "none"


@dataclass(frozen=True)
class DeclaredDependency:
    """
    A dependency as declared in a manifest section.

    Attributes:
        name: Registry package name
        kind: Declaring section ('normal', 'dev' or 'optional')
        specifier: Raw specifier string as written in the manifest
        constraint: Specifier with whitespace and any 'github:' prefix stripped
        reference_type: 'registry' or 'remote-reference'
    """
    name: str
    kind: str
    specifier: str
    constraint: str
    reference_type: str = REF_REGISTRY

    @property
    def is_remote(self) -> bool:
        return self.reference_type == REF_REMOTE


@dataclass(frozen=True)
class ResolvedDependency:
    """
    A dependency after constraint resolution and installed-version lookup.

    Attributes:
        name: Registry package name
        kind: Declaring section
        declared_specifier: Raw specifier from the manifest
        constraint: Value checked against the installed version
        reference_type: 'registry' or 'remote-reference'
        installed_version: Installed version, or "none"
        status: 'satisfied' or 'outdated'
        error: Remote resolution failure message, if any
    """
    name: str
    kind: str
    declared_specifier: str
    constraint: str
    reference_type: str
    installed_version: str = NOT_INSTALLED
    status: str = STATUS_UNRESOLVED
    error: str | None = None

    @property
    def is_outdated(self) -> bool:
        return self.status == STATUS_OUTDATED

    @property
    def is_remote(self) -> bool:
        return self.reference_type == REF_REMOTE

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "name": self.name,
            "kind": self.kind,
            "declared_specifier": self.declared_specifier,
            "constraint": self.constraint,
            "reference_type": self.reference_type,
            "installed_version": self.installed_version,
            "status": self.status,
            "error": self.error,
        }


@dataclass(frozen=True)
class ModuleReport:
    """
    Resolution result for one module of a multi-module run.

    Attributes:
        name: Module directory name
        path: Module directory path
        dependencies: Resolved dependencies, sorted by name
        error: Failure message when the module could not be resolved
    """
    name: str
    path: str
    dependencies: tuple[ResolvedDependency, ...] = field(default_factory=tuple)
    error: str | None = None

    @property
    def outdated(self) -> tuple[ResolvedDependency, ...]:
        return tuple(d for d in self.dependencies if d.is_outdated)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "name": self.name,
            "path": self.path,
            "dependencies": [d.to_dict() for d in self.dependencies],
            "error": self.error,
        }
