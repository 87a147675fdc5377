"""Deployment requests.

A deployment is a ``PUT`` to the artifact URL, with properties attached as
matrix parameters (``.../foo.jar;build=42;team=core``). The body is either
absent (folders, checksum deploys), an in-memory buffer, or a file that is
streamed from disk in chunks so large artifacts are never fully loaded.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO

from artifactory_client.properties import PropertyMap, matrix_params
from artifactory_client.urls import ClientConfig, artifact_url

__all__ = [
    "CHECKSUM_DEPLOY_HEADER",
    "CHECKSUM_SHA1_HEADER",
    "EXPLODE_ARCHIVE_HEADER",
    "DeploymentRequest",
    "build_deploy_request",
]

CHECKSUM_DEPLOY_HEADER = "X-Checksum-Deploy"
CHECKSUM_SHA1_HEADER = "X-Checksum-Sha1"
EXPLODE_ARCHIVE_HEADER = "X-Explode-Archive"

_UPLOAD_CHUNK_BYTES = 65536


def _iter_chunks(fh: BinaryIO, chunk_size: int = _UPLOAD_CHUNK_BYTES) -> Iterator[bytes]:
    while True:
        chunk = fh.read(chunk_size)
        if not chunk:
            return
        yield chunk


@dataclass(frozen=True, slots=True)
class DeploymentRequest:
    """Target URL, headers and body source of a single deployment."""

    url: str
    headers: dict[str, str] = field(default_factory=dict)
    file: Path | None = None
    content: bytes | None = None

    @contextmanager
    def open_body(self) -> Iterator[bytes | Iterator[bytes] | None]:
        """Yield the request body, closing any opened file on exit."""
        if self.file is None:
            yield self.content
            return
        with self.file.open("rb") as fh:
            yield _iter_chunks(fh)

    def body_headers(self) -> dict[str, str]:
        """Headers to send, including the streamed file size."""
        headers = dict(self.headers)
        if self.file is not None and "Content-Length" not in headers:
            headers["Content-Length"] = str(self.file.stat().st_size)
        return headers


def build_deploy_request(
    config: ClientConfig,
    repo_path: str,
    *,
    properties: PropertyMap | None = None,
    headers: Mapping[str, str] | None = None,
    file: str | Path | None = None,
    content: bytes | None = None,
    sha1: str | None = None,
    explode_archive: bool = False,
) -> DeploymentRequest:
    """Assemble a deployment without touching the network or the file.

    Checksum headers are only attached when ``sha1`` is given.
    """
    if file is not None and content is not None:
        raise ValueError("Provide either a file or in-memory content to deploy, not both.")

    url = artifact_url(config, repo_path)
    props = matrix_params(properties)
    if props:
        url = f"{url};{props}"

    merged: dict[str, str] = dict(headers or {})
    if sha1:
        merged[CHECKSUM_DEPLOY_HEADER] = "true"
        merged[CHECKSUM_SHA1_HEADER] = str(sha1)
    if explode_archive:
        merged[EXPLODE_ARCHIVE_HEADER] = "true"

    return DeploymentRequest(
        url=url,
        headers=merged,
        file=Path(file) if file is not None else None,
        content=content,
    )
