"""
Dependency resolution for a single module.

Extracts the declared dependencies of a module, resolves GitHub-hosted ones to
their published version in parallel, looks up installed versions under
node_modules and classifies each dependency as satisfied or outdated.
"""

from __future__ import annotations

import logging
import re
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Sequence

from . import remote
from .errors import DepAuditError
from .manifest import read_manifest, resolve_installed_version
from .models import (
    MANIFEST_SECTIONS,
    NOT_INSTALLED,
    REF_REGISTRY,
    REF_REMOTE,
    STATUS_OUTDATED,
    STATUS_SATISFIED,
    DeclaredDependency,
    ResolvedDependency,
)
from .versions import satisfies

logger = logging.getLogger(__name__)

SOURCE_PREFIX = "github:"

# owner/repo with an optional #ref
REMOTE_REFERENCE_RE = re.compile(r"^[\w-]+/[\w.-]+(?:#\S+)?$")


@dataclass(frozen=True)
class ResolveOptions:
    """
    Tunables for a resolution run.

    Attributes:
        timeout_seconds: Timeout for each remote fetch
        max_workers: Maximum parallel fetches (and parallel modules)
        fail_fast: Strict policy: first failure aborts the run
        default_branch: Ref used for references without '#ref'
    """
    timeout_seconds: float = remote.DEFAULT_TIMEOUT
    max_workers: int = 8
    fail_fast: bool = False
    default_branch: str = remote.DEFAULT_BRANCH

    def __post_init__(self):
        if self.max_workers < 1:
            raise ValueError(f"Invalid max_workers: {self.max_workers}. Must be at least 1")
        if self.timeout_seconds <= 0:
            raise ValueError(f"Invalid timeout_seconds: {self.timeout_seconds}. Must be positive")


def strip_source_prefix(specifier: str) -> str:
    """Strip whitespace and a leading 'github:' source prefix."""
    spec = specifier.strip()
    if spec.startswith(SOURCE_PREFIX):
        spec = spec[len(SOURCE_PREFIX):]
    return spec


def classify_specifier(specifier: str) -> str:
    """
    Classify a specifier as a registry range or a remote reference.

    Args:
        specifier: Specifier with the source prefix already stripped

    Returns:
        'remote-reference' for "owner/repo[#ref]", otherwise 'registry'
    """
    return REF_REMOTE if REMOTE_REFERENCE_RE.match(specifier) else REF_REGISTRY


def sort_key(name: str) -> tuple[str, str]:
    return (name.casefold(), name)


def extract_dependencies(manifest: dict[str, Any]) -> list[DeclaredDependency]:
    """
    Extract declared dependencies from all manifest sections.

    A name declared in several sections keeps the entry of the last section
    (dependencies, then devDependencies, then optionalDependencies).

    Args:
        manifest: Parsed package.json

    Returns:
        Declared dependencies sorted by name
    """
    collected: dict[str, DeclaredDependency] = {}

    for section, kind in MANIFEST_SECTIONS:
        entries = manifest.get(section)
        if not isinstance(entries, dict):
            continue
        for name, specifier in entries.items():
            if not isinstance(specifier, str):
                logger.warning(f"Skipping {name} in {section}: specifier is not a string")
                continue
            constraint = strip_source_prefix(specifier)
            collected[name] = DeclaredDependency(
                name=name,
                kind=kind,
                specifier=specifier,
                constraint=constraint,
                reference_type=classify_specifier(constraint),
            )

    return sorted(collected.values(), key=lambda d: sort_key(d.name))


def resolve_remote_constraints(
    deps: Sequence[DeclaredDependency],
    github_token: str | None = None,
    options: ResolveOptions | None = None,
) -> dict[str, tuple[str, str | None]]:
    """
    Resolve every remote reference to its published version, in parallel.

    Returns once all fetches have settled. Under the strict policy the first
    failure is raised and pending fetches are cancelled.

    Args:
        deps: Declared dependencies (registry entries are ignored)
        github_token: Optional GitHub token
        options: Resolution options

    Returns:
        Mapping of dependency name to (constraint, error message or None).
        A failed entry keeps its unresolved reference as constraint.
    """
    options = options or ResolveOptions()
    remote_deps = [d for d in deps if d.is_remote]
    results: dict[str, tuple[str, str | None]] = {}
    if not remote_deps:
        return results

    workers = min(options.max_workers, len(remote_deps))
    with ThreadPoolExecutor(max_workers=workers) as executor:
        future_to_dep = {
            executor.submit(
                remote.fetch_latest_version,
                dep.constraint,
                github_token,
                options.timeout_seconds,
                options.default_branch,
            ): dep
            for dep in remote_deps
        }

        for future in as_completed(future_to_dep):
            dep = future_to_dep[future]
            try:
                results[dep.name] = (future.result(), None)
            except DepAuditError as e:
                if options.fail_fast:
                    executor.shutdown(wait=False, cancel_futures=True)
                    raise
                logger.warning(f"{dep.name}: {e}")
                results[dep.name] = (dep.constraint, str(e))

    return results


def compute_status(installed_version: str, constraint: str) -> str:
    """Outdated when nothing is installed or the installed version misses the constraint."""
    if installed_version == NOT_INSTALLED or not satisfies(installed_version, constraint):
        return STATUS_OUTDATED
    return STATUS_SATISFIED


def resolve_dependency(
    module_dir: str | Path,
    dep: DeclaredDependency,
    constraint: str,
    error: str | None = None,
) -> ResolvedDependency:
    """Build the resolved record for one declared dependency."""
    installed = resolve_installed_version(module_dir, dep.name)
    return ResolvedDependency(
        name=dep.name,
        kind=dep.kind,
        declared_specifier=dep.specifier,
        constraint=constraint,
        reference_type=dep.reference_type,
        installed_version=installed,
        status=compute_status(installed, constraint),
        error=error,
    )


def check_module_dependencies(
    module_path: str | Path,
    github_token: str | None = None,
    options: ResolveOptions | None = None,
) -> list[ResolvedDependency]:
    """
    Check all declared dependencies of a module against installed versions.

    GitHub-hosted dependencies are checked against the version currently
    published at the referenced branch or tag.

    Args:
        module_path: Module directory containing package.json
        github_token: Optional GitHub token for private repositories
        options: Resolution options

    Returns:
        Resolved dependencies sorted by name

    Raises:
        ManifestNotFoundError: If module_path has no package.json
        MalformedManifestError: If the module's package.json cannot be parsed
        DepAuditError: First remote failure, under the strict policy
    """
    options = options or ResolveOptions()
    manifest = read_manifest(module_path)
    declared = extract_dependencies(manifest)
    logger.debug(f"{module_path}: {len(declared)} declared dependencies")

    remote_results = resolve_remote_constraints(declared, github_token, options)

    resolved = []
    for dep in declared:
        constraint, error = remote_results.get(dep.name, (dep.constraint, None))
        resolved.append(resolve_dependency(module_path, dep, constraint, error))
    return resolved
