"""Python client for the Artifactory REST API."""

from __future__ import annotations

from artifactory_client.client import USER_AGENT, ArtifactoryClient, Transport, __version__, default_transport
from artifactory_client.net.http import HttpCallError, HttpClient
from artifactory_client.urls import ClientConfig

__all__ = [
    "USER_AGENT",
    "ArtifactoryClient",
    "ClientConfig",
    "HttpCallError",
    "HttpClient",
    "Transport",
    "__version__",
    "default_transport",
]
