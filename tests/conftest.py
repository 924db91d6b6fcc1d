"""
Shared fixtures: on-disk Node modules with installed dependencies.
"""

import json
import logging
from pathlib import Path
from unittest.mock import MagicMock

import pytest


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo setup_logging() between tests so caplog sees dep_audit records."""
    from dep_audit import logging_config

    yield
    logger = logging.getLogger(logging_config.LOGGER_NAME)
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
    logging_config._logger = None


def write_json(path: Path, data) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


@pytest.fixture
def make_module(tmp_path):
    """Factory building a module directory with package.json and node_modules."""

    def _make(
        name="app",
        dependencies=None,
        dev=None,
        optional=None,
        installed=None,
        root=None,
    ):
        module_dir = Path(root or tmp_path) / name
        manifest = {"name": f"{name}-package", "version": "1.0.0"}
        if dependencies is not None:
            manifest["dependencies"] = dependencies
        if dev is not None:
            manifest["devDependencies"] = dev
        if optional is not None:
            manifest["optionalDependencies"] = optional
        write_json(module_dir / "package.json", manifest)

        for dep, version in (installed or {}).items():
            write_json(
                module_dir / "node_modules" / dep / "package.json",
                {"name": dep, "version": version},
            )
        return module_dir

    return _make


def http_response(body, status=200):
    """Context-manager mock standing in for urllib's response object."""
    if not isinstance(body, bytes):
        body = json.dumps(body).encode("utf-8")
    response = MagicMock()
    response.status = status
    response.read.return_value = body
    cm = MagicMock()
    cm.__enter__.return_value = response
    cm.__exit__.return_value = False
    return cm
