"""Encoding of Artifactory item properties.

Properties are multi-valued: a mapping of name to a list of values, even for a
single value. Artifactory accepts two wire forms:

- matrix parameters attached to a deploy path, ``key=v1;key=v2;other=v3``,
  with values inserted literally;
- the ``properties=`` query form used to set properties and pass plugin
  parameters, ``key=v1,v2|other=v3|``, with every value percent-encoded.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any
from urllib.parse import quote

__all__ = ["PropertyMap", "encode_properties", "matrix_params", "query_params"]

PropertyMap = Mapping[str, Sequence[Any]]


def _values(key: str, values: Any) -> list[str]:
    # A bare string is iterable but is almost always a caller mistake.
    if not isinstance(values, (list, tuple)):
        raise TypeError(
            f"Property {key!r} must map to a list of values, got {type(values).__name__}."
        )
    return ["" if value is None else str(value) for value in values]


def _matrix_group(key: str, values: list[str]) -> str:
    return ";".join(f"{key}={value}" for value in values)


def _query_group(key: str, values: list[str]) -> str:
    encoded = ",".join(quote(value, safe="") for value in values)
    return f"{key}={encoded}|"


def encode_properties(properties: PropertyMap | None, *, matrix: bool) -> str:
    """Serialize ``properties`` into the matrix or query wire form.

    Returns an empty string for an empty or missing mapping. Keys are emitted
    in the mapping's iteration order.
    """
    if not properties:
        return ""
    if not isinstance(properties, Mapping):
        raise TypeError(f"properties must be a mapping, got {type(properties).__name__}.")

    groups: list[str] = []
    for key, raw_values in properties.items():
        values = _values(str(key), raw_values)
        if matrix:
            if values:
                groups.append(_matrix_group(str(key), values))
        else:
            groups.append(_query_group(str(key), values))
    if matrix:
        return ";".join(groups)
    return "".join(groups)


def matrix_params(properties: PropertyMap | None) -> str:
    return encode_properties(properties, matrix=True)


def query_params(properties: PropertyMap | None) -> str:
    return encode_properties(properties, matrix=False)
