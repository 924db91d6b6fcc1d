"""
Error taxonomy for dependency auditing.

Library code raises these; the command-line front end catches DepAuditError
and prints a single human-readable line.
"""

from __future__ import annotations


class DepAuditError(Exception):
    """Base class for all dependency audit failures."""
    pass


class ManifestNotFoundError(DepAuditError):
    """Raised when a module directory has no package.json."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"{path}: specified path has no package.json file")


class MalformedManifestError(DepAuditError):
    """Raised when manifest content cannot be parsed or lacks a required field."""

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"{source}: malformed manifest ({reason})")


class InvalidReferenceError(DepAuditError):
    """Raised when a remote reference does not split into owner and repository."""

    def __init__(self, reference: str):
        self.reference = reference
        super().__init__(f'Invalid github repository: "{reference}"')


class RemoteFetchError(DepAuditError):
    """Raised when the remote source answers with a non-success status or is unreachable."""

    def __init__(self, reference: str, status: int | None = None, reason: str = ""):
        self.reference = reference
        self.status = status
        self.reason = reason
        if status is not None:
            message = f'Github returned status {status} for dependency "{reference}"'
        else:
            message = f'Unable to reach github for dependency "{reference}"'
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
