from __future__ import annotations

import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import httpx
import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from artifactory_client.client import ArtifactoryClient
from artifactory_client.config import Settings


@dataclass
class RecordedCall:
    verb: str
    args: tuple[Any, ...]
    kwargs: dict[str, Any]

    @property
    def url(self) -> str:
        if self.verb == "request":
            return str(self.args[1])
        return str(self.args[0])

    @property
    def headers(self) -> dict[str, str]:
        return dict(self.kwargs.get("headers") or {})

    @property
    def body(self) -> Any:
        return self.kwargs.get("content")


@dataclass
class RecordingTransport:
    """Fake transport that records every call and returns a canned response."""

    response: Any = field(default_factory=lambda: httpx.Response(200))
    calls: list[RecordedCall] = field(default_factory=list)

    def _record(self, verb: str, *args: Any, **kwargs: Any) -> Any:
        content = kwargs.get("content")
        # Drain streamed bodies while the caller still holds the file open.
        if content is not None and not isinstance(content, (bytes, str)):
            kwargs = {**kwargs, "content": b"".join(content)}
        self.calls.append(RecordedCall(verb, args, kwargs))
        return self.response

    @property
    def last(self) -> RecordedCall:
        assert self.calls, "transport was never called"
        return self.calls[-1]

    def get(self, *args: Any, **kwargs: Any) -> Any:
        return self._record("get", *args, **kwargs)

    def post(self, *args: Any, **kwargs: Any) -> Any:
        return self._record("post", *args, **kwargs)

    def put(self, *args: Any, **kwargs: Any) -> Any:
        return self._record("put", *args, **kwargs)

    def delete(self, *args: Any, **kwargs: Any) -> Any:
        return self._record("delete", *args, **kwargs)

    def request(self, *args: Any, **kwargs: Any) -> Any:
        return self._record("request", *args, **kwargs)


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def client(transport: RecordingTransport) -> ArtifactoryClient:
    """Client bound to repository ``myrepo`` with a recording transport."""
    return ArtifactoryClient(
        "http://artifactory.local",
        port=8081,
        repository="myrepo",
        transport=transport,
    )


@pytest.fixture
def settings() -> Settings:
    """Return a fresh Settings instance that ignores any local .env file."""
    return Settings(
        _env_file=None,
        artifactory_url="http://artifactory.local",
        artifactory_port=8081,
        artifactory_repository="myrepo",
    )
