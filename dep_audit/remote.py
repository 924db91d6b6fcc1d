"""
Resolution of GitHub-hosted dependencies to their published version.

A remote reference ("owner/repo" or "owner/repo#ref") is resolved by fetching
the package.json at that reference from raw.githubusercontent.com and reading
its version field. Refs are mutable, so every request carries a cache-busting
query parameter.
"""

from __future__ import annotations

import http.client
import json
import logging
import time
import urllib.error
import urllib.parse
import urllib.request
from dataclasses import dataclass

from . import __version__
from .errors import InvalidReferenceError, MalformedManifestError, RemoteFetchError
from .manifest import MANIFEST_FILE

logger = logging.getLogger(__name__)

RAW_CONTENT_HOST = "raw.githubusercontent.com"
DEFAULT_BRANCH = "master"
DEFAULT_TIMEOUT = 10
USER_AGENT = f"checkmydeps/{__version__}"


@dataclass(frozen=True)
class RemoteReference:
    """Parsed owner/repo#ref reference."""
    owner: str
    repo: str
    ref: str

    def __str__(self) -> str:
        return f"{self.owner}/{self.repo}#{self.ref}"


def parse_reference(reference: str, default_ref: str = DEFAULT_BRANCH) -> RemoteReference:
    """
    Split a reference into owner, repository and ref.

    Args:
        reference: Reference string (e.g., "acme/widget", "acme/widget#v2")
        default_ref: Ref used when none is given

    Returns:
        RemoteReference

    Raises:
        InvalidReferenceError: If owner or repository is missing
    """
    owner, sep, rest = reference.strip().partition("/")
    repo, _, ref = rest.partition("#")
    if not sep or not owner or not repo:
        raise InvalidReferenceError(reference)
    return RemoteReference(owner=owner, repo=repo, ref=ref or default_ref)


def manifest_url(ref: RemoteReference, nocache: int | None = None) -> str:
    """
    Build the raw-content URL of the manifest at a reference.

    Args:
        ref: Parsed reference
        nocache: Cache-busting value (defaults to current epoch milliseconds)

    Returns:
        Absolute URL
    """
    if nocache is None:
        nocache = int(time.time() * 1000)
    path = "/".join(urllib.parse.quote(part, safe="") for part in (ref.owner, ref.repo))
    ref_path = urllib.parse.quote(ref.ref, safe="/")
    return f"https://{RAW_CONTENT_HOST}/{path}/{ref_path}/{MANIFEST_FILE}?nocache={nocache}"


def build_headers(token: str | None = None) -> dict[str, str]:
    """Request headers, with a bearer credential when a token is supplied."""
    headers = {"User-Agent": USER_AGENT}
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


def fetch_latest_version(
    reference: str,
    token: str | None = None,
    timeout: float = DEFAULT_TIMEOUT,
    default_ref: str = DEFAULT_BRANCH,
) -> str:
    """
    Fetch the version published in a remote reference's package.json.

    Single attempt, no retry.

    Args:
        reference: Reference string ("owner/repo[#ref]")
        token: Optional GitHub token (required for private repositories)
        timeout: Request timeout in seconds
        default_ref: Ref used when the reference has none

    Returns:
        Version string declared by the remote manifest

    Raises:
        InvalidReferenceError: If the reference cannot be parsed
        RemoteFetchError: On non-200 status, transport failure or broken response
        MalformedManifestError: If the body is not a manifest with a version
    """
    ref = parse_reference(reference, default_ref)
    url = manifest_url(ref)
    logger.debug(f"Fetching {ref} from {url}")

    req = urllib.request.Request(url, headers=build_headers(token))
    try:
        with urllib.request.urlopen(req, timeout=timeout) as response:
            status = response.status
            body = response.read()
    except urllib.error.HTTPError as e:
        raise RemoteFetchError(reference, status=e.code) from e
    except (urllib.error.URLError, OSError) as e:
        reason = getattr(e, "reason", e)
        raise RemoteFetchError(reference, reason=str(reason)) from e
    except http.client.HTTPException as e:
        # truncated body or garbled status line
        raise RemoteFetchError(reference, reason=f"{type(e).__name__}: {e}") from e

    if status != 200:
        raise RemoteFetchError(reference, status=status)

    source = f"{ref}:{MANIFEST_FILE}"
    try:
        data = json.loads(body.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise MalformedManifestError(source, f"invalid JSON: {e}") from e

    if not isinstance(data, dict):
        raise MalformedManifestError(source, "top-level value is not an object")

    version = data.get("version")
    if not isinstance(version, str) or not version.strip():
        raise MalformedManifestError(source, "missing version field")

    logger.debug(f"{ref}: version {version}")
    return version.strip()
