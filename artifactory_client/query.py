"""Query string assembly for search and admin endpoints.

Artifactory parses these parameters textually: list values are passed as a
single comma-separated value (``repos=libs-release,libs-snapshot``) and are
not percent-encoded here.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

__all__ = ["build_query", "join_values", "render_value"]


def join_values(values: Sequence[Any]) -> str:
    """Join list values with commas, without a trailing delimiter."""
    if isinstance(values, (str, bytes)) or not isinstance(values, Sequence):
        raise TypeError(f"Expected a list of values, got {type(values).__name__}.")
    return ",".join(render_value(value) for value in values)


def render_value(value: Any) -> str:
    """Render a scalar query value."""
    if isinstance(value, bool):
        return "1" if value else "0"
    if value is None:
        return ""
    if isinstance(value, (Mapping, set, frozenset)):
        raise TypeError(f"Unsupported query value type: {type(value).__name__}.")
    return str(value)


def build_query(delimiter: str, args: Mapping[str, Any] | None) -> str:
    """Flatten ``args`` into ``key=value`` pairs joined by ``delimiter``.

    Lists and tuples are comma-joined; ``None`` entries are treated as not
    supplied and skipped.
    """
    if not args:
        return ""
    parts: list[str] = []
    for key, value in args.items():
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            rendered = join_values(value)
        else:
            try:
                rendered = render_value(value)
            except TypeError as exc:
                raise TypeError(f"Query parameter {key!r}: {exc}") from exc
        parts.append(f"{key}={rendered}")
    return delimiter.join(parts)
