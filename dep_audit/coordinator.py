"""
Single-module and multi-module dependency checks.

A path holding a package.json is one module. Any other path is treated as a
directory of modules: each immediate subdirectory with a package.json is
checked in parallel, the rest are skipped.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path

from .errors import DepAuditError
from .manifest import has_manifest, list_modules, module_name
from .models import ModuleReport
from .resolver import ResolveOptions, check_module_dependencies

logger = logging.getLogger(__name__)


def check_single_module(
    path: str | Path,
    github_token: str | None = None,
    options: ResolveOptions | None = None,
) -> ModuleReport:
    """Check one module; errors always propagate."""
    deps = check_module_dependencies(path, github_token, options)
    return ModuleReport(name=module_name(path), path=str(path), dependencies=tuple(deps))


def check_all_dependencies(
    path: str | Path,
    github_token: str | None = None,
    options: ResolveOptions | None = None,
) -> dict[str, ModuleReport]:
    """
    Check a module, or every module directly under a directory.

    Args:
        path: Module directory or directory of modules
        github_token: Optional GitHub token for private repositories
        options: Resolution options

    Returns:
        Mapping of module directory name to its report, in name order.
        Empty when no module is found.

    Raises:
        DepAuditError: Target module failures; sub-module failures only
            under the strict policy
    """
    options = options or ResolveOptions()

    if has_manifest(path):
        report = check_single_module(path, github_token, options)
        return {report.name: report}

    modules = list_modules(path)
    logger.debug(f"{path}: found {len(modules)} modules")
    if not modules:
        return {}

    reports: dict[str, ModuleReport] = {}
    with ThreadPoolExecutor(max_workers=min(options.max_workers, len(modules))) as executor:
        future_to_module = {
            executor.submit(check_single_module, Path(path) / name, github_token, options): name
            for name in modules
        }

        for future in as_completed(future_to_module):
            name = future_to_module[future]
            try:
                reports[name] = future.result()
            except (DepAuditError, OSError) as e:
                if options.fail_fast:
                    executor.shutdown(wait=False, cancel_futures=True)
                    raise
                logger.warning(f"{name}: {e}")
                reports[name] = ModuleReport(name=name, path=str(Path(path) / name), error=str(e))

    return {name: reports[name] for name in modules}
