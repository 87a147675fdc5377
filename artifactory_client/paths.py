"""Repository path helpers.

Every storage, artifact and replication endpoint addresses an item as
``<repository>/<path>``. The helpers here produce that segment without
leading, doubled or dangling slashes.
"""

from __future__ import annotations

import re

__all__ = ["normalize", "trim_slashes"]

_SLASH_RUN_RE = re.compile(r"/{2,}")


def _text(value: str | None, *, name: str) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise TypeError(f"{name} must be a string, got {type(value).__name__}.")
    return _SLASH_RUN_RE.sub("/", value)


def trim_slashes(value: str | None) -> str:
    """Strip the leading and trailing slash from a repository-like name."""
    text = _text(value, name="value")
    if text.startswith("/"):
        text = text[1:]
    if text.endswith("/"):
        text = text[:-1]
    return text


def normalize(repository: str | None, path: str | None) -> str:
    """Join a repository name and a repository-relative path.

    The leading slash is removed from ``path`` (a trailing slash is kept,
    since Artifactory uses it to denote folders) and the repository is trimmed
    on both ends. Runs of slashes collapse to one. Empty sides are omitted, so
    ``normalize("", "/a")`` is ``"a"`` and ``normalize("repo", None)`` is
    ``"repo"``.
    """
    repo = trim_slashes(repository)
    relative = _text(path, name="path")
    if relative.startswith("/"):
        relative = relative[1:]
    return "/".join(part for part in (repo, relative) if part)
