"""Endpoint URL construction.

All functions here are pure string builders over an immutable `ClientConfig`.
Two roots exist on an Artifactory server:

- the artifact root, ``scheme://host:port/<context_root>``, serving raw
  repository content;
- the API root, ``<artifact root>/api``, serving every REST endpoint.
"""

from __future__ import annotations

import posixpath
from dataclasses import dataclass, field
from urllib.parse import urlsplit

from artifactory_client.paths import trim_slashes

__all__ = [
    "DEFAULT_CONTEXT_ROOT",
    "DEFAULT_PORT",
    "ClientConfig",
    "api_url",
    "artifact_url",
    "build_url",
    "latest_artifact_url",
    "search_url",
    "storage_url",
    "with_query",
]

DEFAULT_PORT: int = 80
DEFAULT_CONTEXT_ROOT: str = "artifactory"


@dataclass(frozen=True, slots=True)
class ClientConfig:
    """Server coordinates shared by every request of a client."""

    base_url: str
    port: int = DEFAULT_PORT
    context_root: str = DEFAULT_CONTEXT_ROOT
    repository: str = ""
    art_root: str = field(init=False)
    api_root: str = field(init=False)

    def __post_init__(self) -> None:
        base = (self.base_url or "").strip()
        if not base:
            raise ValueError("Invalid Artifactory base URL: value is empty.")
        parts = urlsplit(base)
        if not parts.scheme or not parts.hostname:
            raise ValueError(f"Invalid Artifactory base URL: {base!r} has no scheme or host.")
        port = int(self.port)
        if port <= 0:
            raise ValueError(f"Invalid Artifactory port: {self.port!r}.")

        host = parts.hostname
        if ":" in host:
            host = f"[{host}]"
        context_root = trim_slashes((self.context_root or "").strip())
        art_root = f"{parts.scheme}://{host}:{port}"
        if context_root:
            art_root = f"{art_root}/{context_root}"

        object.__setattr__(self, "base_url", base)
        object.__setattr__(self, "port", port)
        object.__setattr__(self, "context_root", context_root)
        object.__setattr__(self, "repository", trim_slashes(self.repository))
        object.__setattr__(self, "art_root", art_root)
        object.__setattr__(self, "api_root", f"{art_root}/api")


def with_query(url: str, query: str | None) -> str:
    """Append ``?query`` when ``query`` is non-empty."""
    if not query:
        return url
    return f"{url}?{query}"


def _join(root: str, segments: tuple[object, ...]) -> str:
    parts = [str(segment) for segment in segments if segment is not None and str(segment) != ""]
    if not parts:
        return root
    return "/".join([root, *parts])


def api_url(config: ClientConfig, *segments: object, query: str | None = None) -> str:
    """Return ``{api_root}/seg1/seg2[?query]``; empty segments are dropped."""
    return with_query(_join(config.api_root, segments), query)


def storage_url(config: ClientConfig, repo_path: str, query: str | None = None) -> str:
    return api_url(config, "storage", repo_path, query=query)


def build_url(config: ClientConfig, *segments: object, query: str | None = None) -> str:
    return api_url(config, "build", *segments, query=query)


def search_url(config: ClientConfig, kind: str, query: str | None = None) -> str:
    return api_url(config, "search", kind, query=query)


def artifact_url(config: ClientConfig, repo_path: str, suffix: str = "") -> str:
    """Return the raw content URL for ``repo_path`` with an optional suffix."""
    return f"{config.art_root}/{repo_path}{suffix}"


def latest_artifact_url(
    config: ClientConfig,
    repo_path: str,
    *,
    snapshot: str | None = None,
    release: str | None = None,
    integration: str | None = None,
    version: str | None = None,
) -> str:
    """Return the URL of the latest jar matching a version qualifier.

    Exactly one qualifier is used: integration (with version), then release,
    then snapshot (with version).
    """
    base = artifact_url(config, repo_path)
    basename = posixpath.basename(repo_path.rstrip("/"))
    if integration and version:
        qualifier = f"{version}-{integration}"
    elif release:
        qualifier = release
    elif snapshot and version:
        qualifier = f"{version}-{snapshot}"
    else:
        raise ValueError(
            "Latest artifact lookup requires snapshot and version, release, or integration and version."
        )
    return f"{base}/{qualifier}/{basename}-{qualifier}.jar"
