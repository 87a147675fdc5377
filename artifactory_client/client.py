"""Client for the Artifactory REST API.

Method names follow the operation names of the Artifactory REST API
documentation ("Deploy Artifact" is `deploy_artifact`). Each method builds the
endpoint URL and hands the request to a pluggable transport, returning the
transport's response unchanged: status handling and body decoding are up to
the caller.

Properties are mappings of name to a list of values, even for a single value,
because Artifactory treats every property as multi-valued::

    client = ArtifactoryClient("http://artifactory.example.com", port=8081, repository="libs-release")
    client.deploy_artifact("/com/acme/app/1.0/app-1.0.jar", {"team": ["core"]}, file="build/app.jar")

Any object exposing ``get``, ``post``, ``put``, ``delete`` and ``request`` can
be used as transport, and may be swapped at runtime via ``client.transport``.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Mapping, Protocol, Sequence

from loguru import logger

from artifactory_client.config import Settings, get_settings
from artifactory_client.deploy import build_deploy_request
from artifactory_client.net.http import HttpClient
from artifactory_client.paths import normalize, trim_slashes
from artifactory_client.properties import PropertyMap, query_params
from artifactory_client.query import build_query, join_values, render_value
from artifactory_client.urls import (
    DEFAULT_CONTEXT_ROOT,
    DEFAULT_PORT,
    ClientConfig,
    api_url,
    artifact_url,
    build_url,
    latest_artifact_url,
    search_url,
    storage_url,
)

__all__ = ["USER_AGENT", "ArtifactoryClient", "Transport", "default_transport"]

__version__ = "0.1.0"

USER_AGENT = f"python-artifactory-client/{__version__}"

log = logger.bind(module="client")

_JSON_HEADERS = {"Content-Type": "application/json"}
_XML_HEADERS = {"Content-Type": "application/xml"}


class Transport(Protocol):
    """Shape of the HTTP collaborator every request is delegated to."""

    def get(self, url: str, **kwargs: Any) -> Any: ...

    def post(self, url: str, **kwargs: Any) -> Any: ...

    def put(self, url: str, **kwargs: Any) -> Any: ...

    def delete(self, url: str, **kwargs: Any) -> Any: ...

    def request(self, method: str, url: str, **kwargs: Any) -> Any: ...


def default_transport(
    *,
    timeout_seconds: float = 30.0,
    auth: tuple[str, str] | None = None,
) -> HttpClient:
    """Build the httpx-backed transport used when none is supplied."""
    return HttpClient(timeout_seconds=timeout_seconds, user_agent=USER_AGENT, auth=auth)


def _json_request(payload: Any) -> dict[str, Any]:
    return {"headers": dict(_JSON_HEADERS), "content": json.dumps(payload)}


class ArtifactoryClient:
    """Artifactory REST API client bound to one server and default repository."""

    def __init__(
        self,
        base_url: str,
        *,
        port: int = DEFAULT_PORT,
        context_root: str = DEFAULT_CONTEXT_ROOT,
        repository: str = "",
        transport: Transport | None = None,
    ) -> None:
        self.config = ClientConfig(
            base_url=base_url,
            port=port,
            context_root=context_root,
            repository=repository,
        )
        self.transport: Transport = transport if transport is not None else default_transport()

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        *,
        transport: Transport | None = None,
    ) -> "ArtifactoryClient":
        """Build a client from `Settings` (environment or `.env`)."""
        settings = settings or get_settings()
        if not settings.artifactory_url:
            raise ValueError("ARTIFACTORY_URL is required.")
        if transport is None:
            transport = default_transport(
                timeout_seconds=settings.artifactory_timeout_seconds,
                auth=settings.basic_auth(),
            )
        return cls(
            settings.artifactory_url,
            port=settings.artifactory_port,
            context_root=settings.artifactory_context_root,
            repository=settings.artifactory_repository,
            transport=transport,
        )

    @property
    def repository(self) -> str:
        return self.config.repository

    @property
    def api_root(self) -> str:
        return self.config.api_root

    @property
    def art_root(self) -> str:
        return self.config.art_root

    # Generic requests

    def _request(self, verb: str, *args: Any, **kwargs: Any) -> Any:
        """Forward a call to the transport and return whatever it returns."""
        log.debug("{} {}", verb.upper(), " ".join(str(arg) for arg in args[:2]))
        return getattr(self.transport, verb)(*args, **kwargs)

    def get(self, *args: Any, **kwargs: Any) -> Any:
        """Invoke GET on the transport; arguments are passed through."""
        return self._request("get", *args, **kwargs)

    def post(self, *args: Any, **kwargs: Any) -> Any:
        """Invoke POST on the transport; arguments are passed through."""
        return self._request("post", *args, **kwargs)

    def put(self, *args: Any, **kwargs: Any) -> Any:
        """Invoke PUT on the transport; arguments are passed through."""
        return self._request("put", *args, **kwargs)

    def delete(self, *args: Any, **kwargs: Any) -> Any:
        """Invoke DELETE on the transport; arguments are passed through."""
        return self._request("delete", *args, **kwargs)

    def request(self, *args: Any, **kwargs: Any) -> Any:
        """Invoke `request()` on the transport; arguments are passed through."""
        return self._request("request", *args, **kwargs)

    def _send(self, verb: str, url: str, payload: Any = None) -> Any:
        if payload:
            return self._request(verb, url, **_json_request(payload))
        return self._request(verb, url)

    def _repo_path(self, path: str | None) -> str:
        return normalize(self.config.repository, path)

    # Builds

    def _get_build(self, *segments: object, query: str | None = None) -> Any:
        return self.get(build_url(self.config, *segments, query=query))

    def all_builds(self) -> Any:
        """Retrieve information on all builds."""
        return self._get_build()

    def build_runs(self, build_name: str) -> Any:
        """Retrieve the runs of a build."""
        return self._get_build(build_name)

    def build_info(self, build_name: str, build_number: str | int) -> Any:
        """Retrieve the build info of a build run."""
        return self._get_build(build_name, build_number)

    def builds_diff(self, build_name: str, new_number: str | int, old_number: str | int) -> Any:
        """Retrieve the diff between two runs of a build."""
        return self._get_build(build_name, new_number, query=f"diff={old_number}")

    def build_promotion(self, build_name: str, build_number: str | int, payload: Mapping[str, Any]) -> Any:
        """Promote a build run."""
        url = build_url(self.config, "promote", build_name, build_number)
        return self.post(url, **_json_request(payload))

    def delete_build(
        self,
        build_name: str,
        buildnumbers: Sequence[str | int] | None = None,
        artifacts: bool | int | None = None,
        deleteall: bool | int | None = None,
    ) -> Any:
        """Delete runs of a build, optionally with their artifacts or all runs."""
        params: list[str] = []
        if buildnumbers is not None:
            params.append(f"buildNumbers={join_values(buildnumbers)}")
        if artifacts is not None:
            params.append(f"artifacts={render_value(artifacts)}")
        if deleteall is not None:
            params.append(f"deleteAll={render_value(deleteall)}")
        return self.delete(build_url(self.config, build_name, query="&".join(params)))

    def build_rename(self, build_name: str, new_build_name: str) -> Any:
        """Rename a build."""
        url = build_url(self.config, "rename", build_name, query=f"to={new_build_name}")
        return self.post(url)

    # Artifacts & storage

    def _storage(self, path: str | None, query: str | None = None) -> str:
        return storage_url(self.config, self._repo_path(path), query=query)

    def folder_info(self, path: str | None) -> Any:
        """Retrieve folder info."""
        return self.get(self._storage(path))

    def file_info(self, path: str | None) -> Any:
        """Retrieve file info; same endpoint as folder info."""
        return self.folder_info(path)

    def item_last_modified(self, path: str | None) -> Any:
        return self.get(self._storage(path, "lastModified"))

    def file_statistics(self, path: str | None) -> Any:
        return self.get(self._storage(path, "stats"))

    def item_properties(self, path: str | None, properties: Sequence[str] | None = None) -> Any:
        """Retrieve item properties, optionally only the named ones."""
        query = "properties"
        if properties:
            query = f"properties={join_values(properties)}"
        return self.get(self._storage(path, query))

    def set_item_properties(
        self,
        path: str | None,
        properties: PropertyMap,
        recursive: bool | int | None = None,
    ) -> Any:
        """Set item properties.

        Pass ``recursive=0`` to stop the properties from propagating to
        children of a folder.
        """
        query = f"properties={query_params(properties)}"
        if recursive is not None:
            query += f"&recursive={render_value(recursive)}"
        return self.put(self._storage(path, query))

    def delete_item_properties(
        self,
        path: str | None,
        properties: Sequence[str],
        recursive: bool | int | None = None,
    ) -> Any:
        """Delete the named item properties."""
        query = f"properties={join_values(properties)}"
        if recursive is not None:
            query += f"&recursive={render_value(recursive)}"
        return self.delete(self._storage(path, query))

    def retrieve_artifact(self, path: str | None, filename: str | Path | None = None) -> Any:
        """Download an artifact.

        With ``filename`` the content is streamed to that file instead of being
        kept on the response.
        """
        url = artifact_url(self.config, self._repo_path(path))
        if filename:
            return self.get(url, content_file=filename)
        return self.get(url)

    def retrieve_latest_artifact(
        self,
        path: str | None,
        *,
        snapshot: str | None = None,
        release: str | None = None,
        integration: str | None = None,
        version: str | None = None,
    ) -> Any:
        """Download the latest jar for a snapshot, release or integration qualifier."""
        url = latest_artifact_url(
            self.config,
            self._repo_path(path),
            snapshot=snapshot,
            release=release,
            integration=integration,
            version=version,
        )
        return self.get(url)

    def retrieve_build_artifacts_archive(self, payload: Mapping[str, Any]) -> Any:
        return self.post(api_url(self.config, "archive", "buildArtifacts"), **_json_request(payload))

    def trace_artifact_retrieval(self, path: str | None) -> Any:
        return self.get(artifact_url(self.config, self._repo_path(path), "?trace"))

    def archive_entry_download(self, path: str | None, archive_path: str) -> Any:
        """Download a single entry out of an archive stored at ``path``."""
        return self.get(artifact_url(self.config, self._repo_path(path), f"!{archive_path}"))

    def _deploy(self, path: str | None, **kwargs: Any) -> Any:
        deployment = build_deploy_request(self.config, self._repo_path(path), **kwargs)
        log.info("Deploying {} (streamed={})", deployment.url, deployment.file is not None)
        headers = deployment.body_headers()
        with deployment.open_body() as body:
            if body is None:
                return self.put(deployment.url, headers=headers)
            return self.put(deployment.url, headers=headers, content=body)

    def create_directory(self, path: str | None, properties: PropertyMap | None = None) -> Any:
        """Create a folder; ``path`` should end with ``/``."""
        return self.deploy_artifact(path, properties)

    def deploy_artifact(
        self,
        path: str | None,
        properties: PropertyMap | None = None,
        file: str | Path | None = None,
        *,
        content: bytes | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Any:
        """Deploy a local file (streamed) or in-memory content to ``path``."""
        return self._deploy(path, properties=properties, file=file, content=content, headers=headers)

    def deploy_artifact_by_checksum(
        self,
        path: str | None,
        sha1: str,
        properties: PropertyMap | None = None,
    ) -> Any:
        """Deploy by SHA-1 only, reusing content already stored on the server."""
        if not sha1:
            raise ValueError("sha1 is required for a checksum deploy.")
        return self._deploy(path, properties=properties, sha1=sha1)

    def deploy_artifacts_from_archive(self, path: str | None, file: str | Path) -> Any:
        """Upload an archive and have the server extract it under ``path``."""
        return self._deploy(path, file=file, explode_archive=True)

    def file_compliance_info(self, path: str | None) -> Any:
        return self.get(api_url(self.config, "compliance", self._repo_path(path)))

    def delete_item(self, path: str | None) -> Any:
        return self.delete(artifact_url(self.config, self._repo_path(path)))

    def _handle_item(
        self,
        method: str,
        from_path: str,
        to_path: str,
        *,
        dry: bool | int | None,
        suppress_layouts: bool | int | None,
        fail_fast: bool | int | None,
    ) -> Any:
        query = build_query(
            "&",
            {
                "to": to_path,
                "dry": dry,
                "suppressLayouts": suppress_layouts,
                "failFast": fail_fast,
            },
        )
        return self.post(api_url(self.config, method, normalize("", from_path), query=query))

    def copy_item(
        self,
        from_path: str,
        to_path: str,
        *,
        dry: bool | int | None = None,
        suppress_layouts: bool | int | None = None,
        fail_fast: bool | int | None = None,
    ) -> Any:
        """Copy an item.

        Both paths must include the repository name since source and target
        may live in different repositories.
        """
        return self._handle_item(
            "copy", from_path, to_path, dry=dry, suppress_layouts=suppress_layouts, fail_fast=fail_fast
        )

    def move_item(
        self,
        from_path: str,
        to_path: str,
        *,
        dry: bool | int | None = None,
        suppress_layouts: bool | int | None = None,
        fail_fast: bool | int | None = None,
    ) -> Any:
        """Move an item; paths include the repository name as for `copy_item`."""
        return self._handle_item(
            "move", from_path, to_path, dry=dry, suppress_layouts=suppress_layouts, fail_fast=fail_fast
        )

    def _replication_configuration(self, verb: str, payload: Any = None) -> Any:
        url = api_url(self.config, "replications", self.config.repository)
        if isinstance(payload, (str, bytes)) and payload:
            return self._request(verb, url, headers=dict(_JSON_HEADERS), content=payload)
        return self._send(verb, url, payload)

    def get_repository_replication_configuration(self) -> Any:
        return self._replication_configuration("get")

    def set_repository_replication_configuration(self, payload: Any) -> Any:
        return self._replication_configuration("put", payload)

    def update_repository_replication_configuration(self, payload: Any) -> Any:
        return self._replication_configuration("post", payload)

    def delete_repository_replication_configuration(self) -> Any:
        return self._replication_configuration("delete")

    def scheduled_replication_status(self) -> Any:
        return self.get(api_url(self.config, "replication", self.config.repository))

    def pull_push_replication(self, payload: Mapping[str, Any], path: str | None = None) -> Any:
        """Schedule immediate replication of ``path`` between two servers."""
        url = api_url(self.config, "replication", self._repo_path(path))
        return self.post(url, **_json_request(payload))

    def file_list(self, path: str | None, **options: Any) -> Any:
        """List files under a folder; options such as ``deep=1`` are passed through."""
        query = "list"
        extra = build_query("&", options)
        if extra:
            query = f"{query}&{extra}"
        return self.get(self._storage(path, query))

    # Searches

    def _search(self, kind: str, name: str, repos: Sequence[str] | None) -> Any:
        query = build_query("&", {"name": name, "repos": repos})
        return self.get(search_url(self.config, kind, query))

    def _search_props(self, kind: str, params: Mapping[str, Any]) -> Any:
        return self.get(search_url(self.config, kind, build_query("&", params)))

    def artifact_search(self, name: str, repos: Sequence[str] | None = None) -> Any:
        """Search artifacts by part of the file name."""
        return self._search("artifact", name, repos)

    def archive_entry_search(self, name: str, repos: Sequence[str] | None = None) -> Any:
        """Search archive entries for classes or other resources."""
        return self._search("archive", name, repos)

    def gavc_search(self, **params: Any) -> Any:
        """Search by Maven coordinates (``g``, ``a``, ``v``, ``c``)."""
        return self._search_props("gavc", params)

    def property_search(self, **params: Any) -> Any:
        return self._search_props("prop", params)

    def checksum_search(self, **params: Any) -> Any:
        return self._search_props("checksum", params)

    def bad_checksum_search(self, **params: Any) -> Any:
        return self._search_props("badChecksum", params)

    def artifacts_not_downloaded_since(self, **params: Any) -> Any:
        """Artifacts not downloaded since ``notUsedSince`` (Java epoch, msec)."""
        return self._search_props("usage", params)

    def artifacts_created_in_date_range(self, from_: int | str | None = None, **params: Any) -> Any:
        """Artifacts created between ``from_`` and ``to`` (Java epoch, msec)."""
        return self._search_props("creation", {"from": from_, **params})

    def pattern_search(self, pattern: str) -> Any:
        """Artifacts in the default repository matching an Ant path pattern."""
        query = f"pattern={self.config.repository}:{pattern}"
        return self.get(search_url(self.config, "pattern", query))

    def builds_for_dependency(self, **params: Any) -> Any:
        return self._search_props("dependency", params)

    def license_search(self, **params: Any) -> Any:
        return self._search_props("license", params)

    def artifact_version_search(self, **params: Any) -> Any:
        return self._search_props("versions", params)

    def artifact_latest_version_search_based_on_layout(self, **params: Any) -> Any:
        return self._search_props("latestVersion", params)

    def artifact_latest_version_search_based_on_properties(self, repo: str, path: str, **params: Any) -> Any:
        """Search for the artifact with the latest value of its ``version`` property."""
        url = api_url(
            self.config,
            "versions",
            trim_slashes(repo),
            trim_slashes(path),
            query=build_query("&", params),
        )
        return self.get(url)

    def build_artifacts_search(self, **payload: Any) -> Any:
        return self.post(search_url(self.config, "buildArtifacts"), **_json_request(payload))

    # Security

    def _security(self, element: str, label: str | None = None, verb: str = "get", details: Any = None) -> Any:
        return self._send(verb, api_url(self.config, "security", element, label), details)

    def get_users(self) -> Any:
        return self._security("users")

    def get_user_details(self, user: str) -> Any:
        return self._security("users", user)

    def create_or_replace_user(self, user: str, **details: Any) -> Any:
        return self._security("users", user, "put", details)

    def update_user(self, user: str, **details: Any) -> Any:
        return self._security("users", user, "post", details)

    def delete_user(self, user: str) -> Any:
        return self._security("users", user, "delete")

    def get_groups(self) -> Any:
        return self._security("groups")

    def get_group_details(self, group: str) -> Any:
        return self._security("groups", group)

    def create_or_replace_group(self, group: str, **details: Any) -> Any:
        return self._security("groups", group, "put", details)

    def update_group(self, group: str, **details: Any) -> Any:
        return self._security("groups", group, "post", details)

    def delete_group(self, group: str) -> Any:
        return self._security("groups", group, "delete")

    def get_permission_targets(self) -> Any:
        return self._security("permissions")

    def get_permission_target_details(self, name: str) -> Any:
        return self._security("permissions", name)

    def create_or_replace_permission_target(self, name: str, **details: Any) -> Any:
        return self._security("permissions", name, "put", details)

    def delete_permission_target(self, name: str) -> Any:
        return self._security("permissions", name, "delete")

    def effective_item_permissions(self, path: str | None) -> Any:
        return self.get(self._storage(path, "permissions"))

    def security_configuration(self) -> Any:
        """Retrieve security.xml."""
        return self._system("security")

    # Repositories

    def _repositories(self, repo: str, payload: Any, verb: str, params: Mapping[str, Any] | None = None) -> Any:
        url = api_url(self.config, "repositories", trim_slashes(repo), query=build_query("&", params))
        return self._send(verb, url, payload)

    def get_repositories(self, repo_type: str | None = None) -> Any:
        """List repositories, optionally of one type (local, remote, virtual)."""
        query = f"type={repo_type}" if repo_type else None
        return self.get(api_url(self.config, "repositories", query=query))

    def repository_configuration(self, repo: str, **params: Any) -> Any:
        return self._repositories(repo, None, "get", params)

    def create_or_replace_repository_configuration(self, repo: str, payload: Mapping[str, Any], **params: Any) -> Any:
        return self._repositories(repo, payload, "put", params)

    def update_repository_configuration(self, repo: str, payload: Mapping[str, Any]) -> Any:
        return self._repositories(repo, payload, "post")

    def delete_repository(self, repo: str) -> Any:
        """Remove a repository together with all of its content."""
        return self._repositories(repo, None, "delete")

    def calculate_yum_repository_metadata(self, **params: Any) -> Any:
        url = api_url(self.config, "yum", self.config.repository, query=build_query("&", params))
        return self.post(url)

    def calculate_nuget_repository_metadata(self) -> Any:
        return self.post(api_url(self.config, "nuget", self.config.repository, "reindex"))

    def calculate_maven_index(self, **params: Any) -> Any:
        return self.post(api_url(self.config, "maven", query=build_query("&", params)))

    def calculate_maven_metadata(self, path: str | None) -> Any:
        return self.post(api_url(self.config, "maven", "calculateMetadata", self._repo_path(path)))

    # System & configuration

    def _system(self, element: str | None = None) -> Any:
        return self.get(api_url(self.config, "system", element))

    def system_info(self) -> Any:
        return self._system()

    def system_health_ping(self) -> Any:
        return self._system("ping")

    def general_configuration(self) -> Any:
        """Retrieve artifactory.config.xml."""
        return self._system("configuration")

    def save_general_configuration(self, xml_file: str | Path) -> Any:
        """Upload a local artifactory.config.xml."""
        content = Path(xml_file).read_bytes()
        url = api_url(self.config, "system", "configuration")
        return self.post(url, headers=dict(_XML_HEADERS), content=content)

    def version_and_addons_information(self) -> Any:
        return self._system("version")

    # Plugins

    def execute_plugin_code(
        self,
        execution_name: str,
        params: PropertyMap | None = None,
        async_: bool | int | None = None,
    ) -> Any:
        """Run a named execution closure of a user plugin."""
        parts: list[str] = []
        if params:
            parts.append(f"params={query_params(params)}")
        if async_ is not None:
            parts.append(f"async={render_value(async_)}")
        url = api_url(self.config, "plugins", "execute", execution_name, query="&".join(parts))
        return self.post(url)

    def _plugins(self, plugin_type: str | None = None) -> Any:
        return self.get(api_url(self.config, "plugins", plugin_type))

    def retrieve_all_available_plugin_info(self) -> Any:
        return self._plugins()

    def retrieve_plugin_info_of_a_certain_type(self, plugin_type: str) -> Any:
        return self._plugins(plugin_type)

    def retrieve_build_staging_strategy(self, strategy_name: str, build_name: str, **params: Any) -> Any:
        """Retrieve a build staging strategy defined by a user plugin."""
        query = f"buildName={build_name}&params={query_params(params)}"
        return self.get(api_url(self.config, "plugins", "build", "staging", strategy_name, query=query))

    def execute_build_promotion(
        self,
        promotion_name: str,
        build_name: str,
        build_number: str | int,
        **params: Any,
    ) -> Any:
        """Run a named promotion closure of a user plugin."""
        url = api_url(
            self.config,
            "plugins",
            "build",
            "promote",
            promotion_name,
            build_name,
            build_number,
            query=f"params={query_params(params)}",
        )
        return self.post(url)

    # Import & export

    def _system_settings(self, action: str, settings: Mapping[str, Any] | None = None) -> Any:
        url = api_url(self.config, action, "system")
        if settings:
            return self.post(url, **_json_request(settings))
        return self.get(url)

    def import_repository_content(self, **params: Any) -> Any:
        return self.post(api_url(self.config, "import", "repositories", query=build_query("&", params)))

    def import_system_settings_example(self) -> Any:
        return self._system_settings("import")

    def full_system_import(self, **settings: Any) -> Any:
        return self._system_settings("import", settings)

    def export_system_settings_example(self) -> Any:
        return self._system_settings("export")

    def export_system(self, **settings: Any) -> Any:
        return self._system_settings("export", settings)
