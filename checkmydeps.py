#!/usr/bin/env python3
"""
checkmydeps - Check installed Node dependencies against package.json.

Checks every dependency declared in a module's package.json against the
version installed in node_modules. GitHub dependencies ("owner/repo#tag")
are checked against the version currently published at that branch or tag.

Usage:
    checkmydeps.py                 # Check the module in the current directory
    checkmydeps.py path/to/module  # Check one module
    checkmydeps.py path/to/dir     # Check every module under a directory
"""

import argparse
import os
import sys

from dep_audit import __version__
from dep_audit.common import env_flag, supports_color
from dep_audit.config import load_config
from dep_audit.coordinator import check_all_dependencies, check_single_module
from dep_audit.errors import DepAuditError
from dep_audit.logging_config import setup_logging
from dep_audit.manifest import has_manifest
from dep_audit.render import (
    BOLD_RED,
    colorize,
    format_summary,
    generate_multi_module_report,
    generate_single_module_report,
    render_json,
)
from dep_audit.update_check import check_for_update, should_check_for_update

TOKEN_NOTE = """\
NOTE:
    You may get some "404" errors if some dependencies use private Github
    repositories. If you can access those repositories, then just provide an
    access token to this tool, using either argument --token, or by setting
    an environment variable GITHUB_TOKEN.
    To create a token, just go to your account settings on Github, in section
    "Personal access tokens". Create a new token with the "repo" capability
    (it only needs to be able to read from a repository)."""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="checkmydeps",
        description="Check installed Node dependencies against package.json",
        epilog=TOKEN_NOTE,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Target node module, or directory of modules (default: current directory)",
    )
    parser.add_argument(
        "-t", "--token",
        help="Token to access private Github repositories (default: $GITHUB_TOKEN)",
    )
    parser.add_argument(
        "-m", "--minimal",
        action="store_true",
        help="Prevent the display of up-to-date dependencies",
    )
    parser.add_argument(
        "-a", "--all",
        action="store_true",
        help="Force the display of up-to-date dependencies (directory of modules)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print results as JSON",
    )
    parser.add_argument(
        "--fail-fast",
        action="store_true",
        help="Abort on the first failing dependency or module",
    )
    parser.add_argument(
        "--config",
        help="Path to a configuration file",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colored output",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Verbose output",
    )
    parser.add_argument(
        "-v", "--version",
        action="version",
        version=f"checkmydeps v{__version__}",
        help="Show the current version of this tool",
    )
    return parser


def error_message(path: str, err: Exception) -> str:
    message = str(err)
    return message if path in message else f"{path}: {message}"


def use_colors_for(mode: str, no_color: bool) -> bool:
    if no_color or mode == "never":
        return False
    if mode == "always":
        return True
    return supports_color(sys.stdout)


def emit(report: str) -> None:
    if report:
        print(report)


def maybe_check_for_update(enabled: bool, use_colors: bool) -> None:
    if not enabled or env_flag("CHECKMYDEPS_NO_UPDATE_CHECK") or not should_check_for_update():
        return
    notice = check_for_update(__version__)
    if notice:
        print("", file=sys.stderr)
        print(colorize(notice, BOLD_RED, use_colors), file=sys.stderr)


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    verbose = args.verbose or env_flag("CHECKMYDEPS_DEBUG")
    setup_logging(verbose=verbose)

    try:
        config = load_config(args.config, verbose=verbose)
        options = config.resolve_options(fail_fast=True if args.fail_fast else None)
    except ValueError as e:
        print(str(e), file=sys.stderr)
        return 1

    path = args.path
    token = args.token or config.github_token()
    use_colors = use_colors_for(config.preferences.colors, args.no_color)

    single = has_manifest(path)
    if not single and not os.path.isdir(path):
        print(f"{path}: no such module or directory", file=sys.stderr)
        return 1

    try:
        if single:
            report = check_single_module(path, token, options)
            reports = {report.name: report}
        else:
            reports = check_all_dependencies(path, token, options)
    except (DepAuditError, OSError) as e:
        print(error_message(path, e), file=sys.stderr)
        return 1

    if args.json:
        print(render_json(reports))
        return 0

    if single:
        deps = report.outdated if args.minimal else report.dependencies
        emit(generate_single_module_report(deps, use_colors))
    else:
        emit(generate_multi_module_report(reports, use_colors, include_satisfied=args.all))

    print(f"\n{format_summary(reports)}", file=sys.stderr)

    maybe_check_for_update(config.preferences.update_check, use_colors)
    return 0


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        sys.exit(130)
