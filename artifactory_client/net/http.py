"""Default HTTP transport built on top of httpx.

The client hands every request to a transport object exposing ``get``,
``post``, ``put``, ``delete`` and ``request``. This module provides the
default one: a small sync wrapper around `httpx.Client` that returns the raw
`httpx.Response` for every status code and maps network failures into
`HttpCallError`.
"""

from __future__ import annotations

import json
import weakref
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Mapping

import httpx

__all__ = ["HttpCallError", "HttpClient", "decode_json"]

_MIN_TIMEOUT_SECONDS = 0.1
_MAX_ERROR_TEXT_CHARS = 2048
_DOWNLOAD_CHUNK_BYTES = 65536


class HttpCallError(RuntimeError):
    """Raised when an HTTP request cannot be completed."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = str(message)
        self.status_code = int(status_code) if status_code is not None else None

    def __str__(self) -> str:  # pragma: no cover - trivial
        if self.status_code is None:
            return self.message
        return f"{self.message} (status={self.status_code})"


def _truncate(text: str, *, limit: int) -> str:
    """Return a truncated string with an ellipsis when needed."""
    if limit <= 0:
        return ""
    if len(text) <= limit:
        return text
    head = text[: max(0, limit - 3)].rstrip()
    return f"{head}..."


def _safe_response_text(response: httpx.Response) -> str:
    """Best-effort extraction of response text for error messages."""
    try:
        text = (response.text or "").strip()
    except (UnicodeDecodeError, httpx.ResponseNotRead):
        text = ""
    return _truncate(text, limit=_MAX_ERROR_TEXT_CHARS)


class HttpClient:
    """Sync HTTP transport with consistent defaults.

    Notes:
        - Responses are returned as-is; 4xx/5xx statuses are not raised so the
          caller can inspect them.
        - By default, a short-lived `httpx.Client` is created per request.
        - When `reuse_connections=True`, an internal persistent `httpx.Client` is
          used to enable connection pooling. Call `close()` (or use this object
          as a context manager) to release resources deterministically.
        - Timeouts are clamped to at least `_MIN_TIMEOUT_SECONDS`.
    """

    def __init__(
        self,
        *,
        timeout_seconds: float = 30.0,
        follow_redirects: bool = True,
        user_agent: str | None = None,
        headers: Mapping[str, str] | None = None,
        auth: tuple[str, str] | None = None,
        transport: httpx.BaseTransport | None = None,
        reuse_connections: bool = False,
    ) -> None:
        self.timeout_seconds = float(timeout_seconds)
        self.follow_redirects = bool(follow_redirects)
        self.auth = auth
        self.transport = transport
        self.reuse_connections = bool(reuse_connections)

        merged: dict[str, str] = dict(headers or {})
        if user_agent and "User-Agent" not in merged:
            merged["User-Agent"] = user_agent
        self.headers = merged
        self._client: httpx.Client | None = None
        self._finalizer: weakref.finalize | None = None

    def _build_client(self) -> httpx.Client:
        kwargs: dict[str, object] = {
            "timeout": float(max(_MIN_TIMEOUT_SECONDS, self.timeout_seconds)),
            "follow_redirects": self.follow_redirects,
            "headers": self.headers,
        }
        if self.auth is not None:
            kwargs["auth"] = self.auth
        if self.transport is not None:
            kwargs["transport"] = self.transport
        return httpx.Client(**kwargs)  # type: ignore[arg-type]

    def open(self) -> None:
        """Open an internal persistent `httpx.Client` when reuse is enabled."""
        if not self.reuse_connections:
            return
        if self._client is not None:
            return
        self._client = self._build_client()
        self._finalizer = weakref.finalize(self, self._client.close)

    def close(self) -> None:
        """Close any internal persistent `httpx.Client`."""
        if self._finalizer is not None:
            self._finalizer.detach()
            self._finalizer = None
        if self._client is None:
            return
        self._client.close()
        self._client = None

    def __enter__(self) -> "HttpClient":
        self.open()
        return self

    def __exit__(self, exc_type: object, exc: object, tb: object) -> None:
        self.close()

    @contextmanager
    def _client_ctx(self) -> Iterator[httpx.Client]:
        if self.reuse_connections:
            self.open()
            assert self._client is not None
            yield self._client
            return
        with self._build_client() as client:
            yield client

    def request(
        self,
        method: str,
        url: str,
        *,
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
        content: Any | None = None,
        content_file: str | Path | None = None,
    ) -> httpx.Response:
        """Send an HTTP request and return the response.

        `content` may be bytes, text or an iterator of byte chunks (streamed).
        When `content_file` is given, the response body is written to that path
        chunk by chunk instead of being kept in memory.

        Raises:
            HttpCallError: When the request cannot be sent or the response
                cannot be read.
        """
        method = (method or "GET").strip().upper()
        target = (url or "").strip()
        if not target:
            raise ValueError("url must be non-empty.")

        request_kwargs: dict[str, Any] = {
            "params": dict(params) if params else None,
            "headers": dict(headers) if headers else None,
            "content": content,
        }
        try:
            with self._client_ctx() as client:
                if content_file is None:
                    return client.request(method, target, **request_kwargs)
                destination = Path(content_file)
                destination.parent.mkdir(parents=True, exist_ok=True)
                with client.stream(method, target, **request_kwargs) as response:
                    with destination.open("wb") as fh:
                        for chunk in response.iter_bytes(_DOWNLOAD_CHUNK_BYTES):
                            if chunk:
                                fh.write(chunk)
                    return response
        except httpx.RequestError as exc:
            raise HttpCallError(f"HTTP request failed: {exc}") from exc

    def get(self, url: str, **kwargs: Any) -> httpx.Response:
        return self.request("GET", url, **kwargs)

    def post(self, url: str, **kwargs: Any) -> httpx.Response:
        return self.request("POST", url, **kwargs)

    def put(self, url: str, **kwargs: Any) -> httpx.Response:
        return self.request("PUT", url, **kwargs)

    def delete(self, url: str, **kwargs: Any) -> httpx.Response:
        return self.request("DELETE", url, **kwargs)


def decode_json(response: httpx.Response) -> Any:
    """Decode a JSON response body, raising `HttpCallError` on failure."""
    if response.is_error:
        message = _safe_response_text(response) or "HTTP request failed"
        raise HttpCallError(message, status_code=int(response.status_code))
    try:
        body = response.content
    except httpx.ResponseNotRead as exc:
        raise HttpCallError(
            "Response body was streamed to a file and cannot be decoded as JSON.",
            status_code=int(response.status_code),
        ) from exc
    if not body:
        return None
    try:
        text = body.decode("utf-8", errors="replace")
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise HttpCallError(
            f"Invalid JSON response: {exc}",
            status_code=int(response.status_code),
        ) from exc
