"""
Report rendering for resolved dependencies.

Produces aligned "name | needs X | found Y" tables, optionally colorized,
for a single module or a directory of modules, and a JSON document.
"""

from __future__ import annotations

import json
from typing import Iterable, Mapping

from .models import ModuleReport, ResolvedDependency
from .table import format_table

# ANSI color codes
BOLD_GREEN = "\033[32;1m"
BOLD_RED = "\033[31;1m"
YELLOW = "\033[33m"
RESET = "\033[0m"


def colorize(text: str, color: str, use_colors: bool = True) -> str:
    """Apply color to text.

    Args:
        text: Text to colorize
        color: ANSI color code
        use_colors: Whether colors are enabled

    Returns:
        Colored text or plain text if colors disabled
    """
    if not use_colors or not text:
        return text
    return f"{color}{text}{RESET}"


def needs_display(dep: ResolvedDependency) -> str:
    if dep.is_remote:
        return f"{dep.constraint} (on github)"
    return dep.constraint


def report_row(dep: ResolvedDependency, use_colors: bool = False) -> str:
    """Render one dependency as a pipe-separated row."""
    color = BOLD_RED if dep.is_outdated else BOLD_GREEN
    name = colorize(dep.name, color, use_colors)
    found = colorize(dep.installed_version, color, use_colors)
    row = f"{name} | needs {needs_display(dep)} | found {found}"
    if dep.error:
        row += "  " + colorize(f"[error: {dep.error}]", YELLOW, use_colors)
    return row


def format_report_table(text: str) -> str:
    """(Re)align a report, e.g. after joining several reports into one text."""
    return format_table(text, columns=3)


def create_report_table(deps: Iterable[ResolvedDependency], use_colors: bool = False) -> str:
    """Render dependencies as an aligned table, one row per dependency."""
    text = "\n".join(report_row(dep, use_colors) for dep in deps)
    return format_report_table(text)


def generate_single_module_report(deps: Iterable[ResolvedDependency], use_colors: bool = False) -> str:
    return create_report_table(deps, use_colors)


def generate_multi_module_report(
    reports: Mapping[str, ModuleReport],
    use_colors: bool = False,
    include_satisfied: bool = False,
) -> str:
    """
    Render a report for several modules, aligned across modules.

    Args:
        reports: Module reports keyed by module name
        use_colors: Whether to emit ANSI colors
        include_satisfied: Show satisfied dependencies, not only outdated ones

    Returns:
        Report text (empty when nothing is left to show)
    """
    blocks = []
    for name, report in reports.items():
        if report.error:
            blocks.append(colorize(f"{name}: {report.error}", BOLD_RED, use_colors))
            continue

        deps = report.dependencies if include_satisfied else report.outdated
        if not deps:
            continue

        lines = [name]
        lines.extend("  " + report_row(dep, use_colors) for dep in deps)
        blocks.append("\n".join(lines))

    return format_report_table("\n\n".join(blocks))


def format_summary(reports: Mapping[str, ModuleReport]) -> str:
    """Summary line: dependency, outdated and failure counts."""
    total = sum(len(r.dependencies) for r in reports.values())
    outdated = sum(len(r.outdated) for r in reports.values())
    errors = sum(1 for r in reports.values() for d in r.dependencies if d.error)
    failed = sum(1 for r in reports.values() if r.error)

    parts = [f"{total} dependencies", f"{outdated} outdated"]
    if errors:
        parts.append(f"{errors} unresolved")
    if len(reports) > 1 or failed:
        parts.insert(0, f"{len(reports)} modules")
    if failed:
        parts.append(f"{failed} failed")
    return ", ".join(parts)


def render_json(reports: Mapping[str, ModuleReport]) -> str:
    """Serialize module reports as a JSON document keyed by module name."""
    return json.dumps(
        {name: report.to_dict() for name, report in reports.items()},
        indent=2,
        ensure_ascii=False,
    )
