"""Connectivity doctor for an Artifactory server.

Performs a few fast checks against the configured server:
- Validate that ARTIFACTORY_URL (and optionally credentials) are set.
- Ping the server and report its version.
- Check that the default repository exists when one is configured.

Usage:
    python script/doctor.py --json
"""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import dataclass
from typing import Literal, Sequence

from loguru import logger
from rich.console import Console
from rich.table import Table
from rich.text import Text

from artifactory_client.client import ArtifactoryClient, Transport
from artifactory_client.config import Settings, get_settings
from artifactory_client.net.http import HttpCallError, decode_json

console = Console()
log = logger.bind(module="doctor")

Status = Literal["ok", "warn", "fail"]


@dataclass(slots=True)
class CheckResult:
    name: str
    status: Status
    details: str


def _status_text(status: Status) -> Text:
    styles = {"ok": "bold green", "warn": "bold yellow", "fail": "bold red"}
    return Text(status.upper(), style=styles.get(status, "bold"))


def _configure_logging(level: str) -> None:
    logger.remove()
    logger.add(
        sys.stderr,
        level=(level or "INFO").upper(),
        backtrace=False,
        diagnose=False,
    )


def _check_settings(settings: Settings) -> list[CheckResult]:
    results: list[CheckResult] = []
    if (settings.artifactory_url or "").strip():
        results.append(CheckResult("artifactory_url", "ok", f"configured: {settings.artifactory_url}"))
    else:
        results.append(CheckResult("artifactory_url", "fail", "ARTIFACTORY_URL is not set."))
    if settings.has_credentials:
        results.append(CheckResult("credentials", "ok", f"user: {settings.artifactory_username}"))
    else:
        results.append(
            CheckResult(
                "credentials",
                "warn",
                "ARTIFACTORY_USERNAME/ARTIFACTORY_PASSWORD not set (anonymous access only).",
            )
        )
    return results


def _check_ping(client: ArtifactoryClient) -> CheckResult:
    try:
        response = client.system_health_ping()
    except HttpCallError as exc:
        return CheckResult("ping", "fail", f"unreachable: {client.api_root} ({exc})")
    if response.status_code == 200:
        return CheckResult("ping", "ok", f"reachable: {client.api_root}")
    return CheckResult("ping", "fail", f"{client.api_root} answered {response.status_code}")


def _check_version(client: ArtifactoryClient) -> CheckResult:
    try:
        payload = decode_json(client.version_and_addons_information())
    except HttpCallError as exc:
        return CheckResult("version", "warn", f"unavailable ({exc})")
    version = (payload or {}).get("version") if isinstance(payload, dict) else None
    if not version:
        return CheckResult("version", "warn", "server did not report a version")
    return CheckResult("version", "ok", str(version))


def _check_repository(client: ArtifactoryClient) -> CheckResult:
    repo = client.repository
    try:
        response = client.repository_configuration(repo)
    except HttpCallError as exc:
        return CheckResult("repository", "fail", f"{repo}: request failed ({exc})")
    if response.status_code == 200:
        return CheckResult("repository", "ok", f"found: {repo}")
    if response.status_code == 404:
        return CheckResult("repository", "fail", f"not found: {repo}")
    return CheckResult("repository", "warn", f"{repo}: server answered {response.status_code}")


def _render_table(results: Sequence[CheckResult]) -> None:
    table = Table(title="Artifactory doctor", show_lines=False)
    table.add_column("Check", style="bold")
    table.add_column("Status", justify="center")
    table.add_column("Details")
    for item in results:
        table.add_row(item.name, _status_text(item.status), item.details)
    console.print(table)


def _summarize(results: Sequence[CheckResult]) -> tuple[int, int, int]:
    ok = sum(1 for r in results if r.status == "ok")
    warn = sum(1 for r in results if r.status == "warn")
    fail = sum(1 for r in results if r.status == "fail")
    return ok, warn, fail


def run_checks(settings: Settings, *, transport: Transport | None = None) -> list[CheckResult]:
    """Run every check, skipping network checks when the URL is missing or invalid."""
    results = _check_settings(settings)
    if not (settings.artifactory_url or "").strip():
        return results
    try:
        client = ArtifactoryClient.from_settings(settings, transport=transport)
    except ValueError as exc:
        failed = CheckResult("artifactory_url", "fail", str(exc))
        return [failed if item.name == failed.name else item for item in results]
    results.append(_check_ping(client))
    results.append(_check_version(client))
    if client.repository:
        results.append(_check_repository(client))
    return results


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Run connectivity checks against an Artifactory server.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Treat warnings as failures (non-zero exit code).",
    )
    parser.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        help="Print results as JSON (useful for CI).",
    )
    return parser


def main(
    argv: Sequence[str] | None = None,
    *,
    settings: Settings | None = None,
    transport: Transport | None = None,
) -> int:
    args = _build_arg_parser().parse_args(list(argv) if argv is not None else None)

    settings = settings or get_settings()
    _configure_logging(settings.log_level)

    results = run_checks(settings, transport=transport)

    if args.json_output:
        payload = [{"name": r.name, "status": r.status, "details": r.details} for r in results]
        console.print(json.dumps(payload, ensure_ascii=False, indent=2))
    else:
        _render_table(results)

    ok, warn, fail = _summarize(results)
    summary = f"ok={ok} warn={warn} fail={fail}"
    log.info("Doctor finished: {}", summary)
    if fail:
        console.print(f"[bold red]Doctor failed[/] {summary}")
        return 1
    if warn and args.strict:
        console.print(f"[bold yellow]Doctor warnings (strict)[/] {summary}")
        return 2
    console.print(f"[bold green]Doctor passed[/] {summary}")
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main(sys.argv[1:]))
