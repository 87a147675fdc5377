from __future__ import annotations

from artifactory_client.config import Settings


def test_settings_read_environment(monkeypatch) -> None:
    monkeypatch.setenv("ARTIFACTORY_URL", "https://repo.example.com")
    monkeypatch.setenv("ARTIFACTORY_PORT", "443")
    monkeypatch.setenv("ARTIFACTORY_CONTEXT_ROOT", "/")
    monkeypatch.setenv("ARTIFACTORY_REPOSITORY", "libs-release")
    settings = Settings(_env_file=None)
    assert settings.artifactory_url == "https://repo.example.com"
    assert settings.artifactory_port == 443
    assert settings.artifactory_context_root == "/"
    assert settings.artifactory_repository == "libs-release"


def test_settings_defaults(monkeypatch) -> None:
    for name in ("ARTIFACTORY_URL", "ARTIFACTORY_PORT", "ARTIFACTORY_CONTEXT_ROOT", "ARTIFACTORY_USERNAME"):
        monkeypatch.delenv(name, raising=False)
    settings = Settings(_env_file=None)
    assert settings.artifactory_url is None
    assert settings.artifactory_port == 80
    assert settings.artifactory_context_root == "artifactory"
    assert settings.basic_auth() is None


def test_basic_auth_requires_both_values(monkeypatch) -> None:
    monkeypatch.setenv("ARTIFACTORY_USERNAME", "deployer")
    monkeypatch.delenv("ARTIFACTORY_PASSWORD", raising=False)
    assert Settings(_env_file=None).basic_auth() is None

    monkeypatch.setenv("ARTIFACTORY_PASSWORD", "secret")
    assert Settings(_env_file=None).basic_auth() == ("deployer", "secret")


def test_export_safe_hides_password(monkeypatch) -> None:
    monkeypatch.setenv("ARTIFACTORY_PASSWORD", "secret")
    monkeypatch.setenv("ARTIFACTORY_USERNAME", "deployer")
    exported = Settings(_env_file=None).export_safe()
    assert "secret" not in exported.values()
    assert exported["has_credentials"] is True
