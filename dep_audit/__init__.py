"""
checkmydeps - Node module dependency auditing.

Core Modules:
- Resolution: manifest extraction, GitHub reference resolution, status checks
- Coordination: single module or directory-of-modules runs
- Reporting: aligned text tables, JSON output
- Foundation: configuration, logging, update check
"""

__version__ = "1.0.0"
__author__ = "checkmydeps contributors"

VERSION = __version__

# Errors
from .errors import (
    DepAuditError,
    ManifestNotFoundError,
    MalformedManifestError,
    InvalidReferenceError,
    RemoteFetchError,
)

# Data model
from .models import DeclaredDependency, ResolvedDependency, ModuleReport

# Resolution
from .versions import satisfies, compare_versions
from .manifest import has_manifest, read_manifest, resolve_installed_version, list_modules, module_name
from .remote import RemoteReference, parse_reference, fetch_latest_version
from .resolver import (
    ResolveOptions,
    classify_specifier,
    extract_dependencies,
    check_module_dependencies,
)
from .coordinator import check_all_dependencies

# Reporting
from .render import (
    create_report_table,
    format_report_table,
    generate_single_module_report,
    generate_multi_module_report,
    render_json,
)

# Foundation
from .config import Config, Preferences, load_config
from .logging_config import setup_logging, get_logger

__all__ = [
    # Version
    "__version__",
    "VERSION",
    # Errors
    "DepAuditError",
    "ManifestNotFoundError",
    "MalformedManifestError",
    "InvalidReferenceError",
    "RemoteFetchError",
    # Data model
    "DeclaredDependency",
    "ResolvedDependency",
    "ModuleReport",
    # Resolution
    "satisfies",
    "compare_versions",
    "has_manifest",
    "read_manifest",
    "resolve_installed_version",
    "list_modules",
    "module_name",
    "RemoteReference",
    "parse_reference",
    "fetch_latest_version",
    "ResolveOptions",
    "classify_specifier",
    "extract_dependencies",
    "check_module_dependencies",
    "check_all_dependencies",
    # Reporting
    "create_report_table",
    "format_report_table",
    "generate_single_module_report",
    "generate_multi_module_report",
    "render_json",
    # Foundation
    "Config",
    "Preferences",
    "load_config",
    "setup_logging",
    "get_logger",
]
