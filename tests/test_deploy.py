from __future__ import annotations

from pathlib import Path

import pytest

from artifactory_client.deploy import (
    CHECKSUM_DEPLOY_HEADER,
    CHECKSUM_SHA1_HEADER,
    EXPLODE_ARCHIVE_HEADER,
    build_deploy_request,
)
from artifactory_client.urls import ClientConfig

SHA1 = "2ef7bde608ce5404e97d5f042f95f89f1c232871"


@pytest.fixture
def config() -> ClientConfig:
    return ClientConfig("http://host", port=8081, repository="myrepo")


def test_properties_attach_as_matrix_parameters(config: ClientConfig) -> None:
    request = build_deploy_request(config, "myrepo/foo.jar", properties={"ver": ["1.0"], "team": ["a", "b"]})
    assert request.url == "http://host:8081/artifactory/myrepo/foo.jar;ver=1.0;team=a;team=b"


def test_no_properties_leaves_url_untouched(config: ClientConfig) -> None:
    request = build_deploy_request(config, "myrepo/foo.jar")
    assert request.url == "http://host:8081/artifactory/myrepo/foo.jar"
    assert request.headers == {}


def test_sha1_adds_both_checksum_headers(config: ClientConfig) -> None:
    request = build_deploy_request(config, "myrepo/foo.jar", sha1=SHA1)
    assert request.headers[CHECKSUM_DEPLOY_HEADER] == "true"
    assert request.headers[CHECKSUM_SHA1_HEADER] == SHA1


def test_without_sha1_no_checksum_headers_are_sent(config: ClientConfig) -> None:
    request = build_deploy_request(config, "myrepo/foo.jar", headers={"X-Custom": "1"})
    assert CHECKSUM_DEPLOY_HEADER not in request.headers
    assert CHECKSUM_SHA1_HEADER not in request.headers
    assert request.headers == {"X-Custom": "1"}


def test_explode_archive_header(config: ClientConfig) -> None:
    request = build_deploy_request(config, "myrepo/dir", explode_archive=True)
    assert request.headers == {EXPLODE_ARCHIVE_HEADER: "true"}


def test_file_and_content_are_mutually_exclusive(config: ClientConfig, tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="not both"):
        build_deploy_request(config, "myrepo/a", file=tmp_path / "a", content=b"x")


def test_file_body_is_streamed_in_chunks_and_closed(config: ClientConfig, tmp_path: Path) -> None:
    payload = b"x" * 200_000
    source = tmp_path / "big.bin"
    source.write_bytes(payload)
    request = build_deploy_request(config, "myrepo/big.bin", file=source)

    assert request.body_headers()["Content-Length"] == str(len(payload))
    with request.open_body() as body:
        chunks = list(body)  # type: ignore[arg-type]
    assert len(chunks) > 1
    assert b"".join(chunks) == payload


def test_file_is_closed_when_the_consumer_fails(
    config: ClientConfig, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    source = tmp_path / "a.bin"
    source.write_bytes(b"abc")
    request = build_deploy_request(config, "myrepo/a.bin", file=source)

    opened = []
    real_open = Path.open

    def tracking_open(self, *args, **kwargs):
        handle = real_open(self, *args, **kwargs)
        opened.append(handle)
        return handle

    monkeypatch.setattr(Path, "open", tracking_open)

    with pytest.raises(RuntimeError, match="boom"):
        with request.open_body() as body:
            next(body)  # type: ignore[arg-type]
            raise RuntimeError("boom")
    assert len(opened) == 1
    assert opened[0].closed


def test_in_memory_content_is_passed_as_is(config: ClientConfig) -> None:
    request = build_deploy_request(config, "myrepo/a.txt", content=b"hello")
    assert "Content-Length" not in request.body_headers()
    with request.open_body() as body:
        assert body == b"hello"
