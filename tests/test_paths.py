from __future__ import annotations

import pytest

from artifactory_client.paths import normalize, trim_slashes


@pytest.mark.parametrize(
    ("repository", "path", "expected"),
    [
        ("myrepo", "/foo.jar", "myrepo/foo.jar"),
        ("/myrepo/", "foo/bar.jar", "myrepo/foo/bar.jar"),
        ("myrepo", None, "myrepo"),
        ("myrepo", "", "myrepo"),
        ("", "/foo.jar", "foo.jar"),
        (None, "/a/b", "a/b"),
        ("", None, ""),
        ("myrepo", "/some_dir/", "myrepo/some_dir/"),
    ],
)
def test_normalize_joins_repository_and_path(repository, path, expected) -> None:
    assert normalize(repository, path) == expected


@pytest.mark.parametrize(
    ("repository", "path"),
    [
        ("//repo//", "//a//b"),
        ("/", "/"),
        ("repo/", "/"),
        ("", "///x"),
        ("r", "a/"),
    ],
)
def test_normalize_never_yields_doubled_or_leading_slash(repository, path) -> None:
    result = normalize(repository, path)
    assert "//" not in result
    assert not result.startswith("/")


def test_normalize_is_idempotent_with_empty_repository() -> None:
    once = normalize("/libs-release/", "/org/acme/app.jar")
    assert normalize("", once) == once


def test_normalize_rejects_non_string_path() -> None:
    with pytest.raises(TypeError, match="path must be a string"):
        normalize("repo", 42)  # type: ignore[arg-type]


def test_trim_slashes_strips_both_ends() -> None:
    assert trim_slashes("/libs-release/") == "libs-release"
    assert trim_slashes("libs-release") == "libs-release"
    assert trim_slashes(None) == ""
