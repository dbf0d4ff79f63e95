"""Helm command abstractions.

This module provides commands for Helm repository and release management,
including repo sync, install, upgrade, uninstallation, and status queries.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING

from .types import CommandResult, HelmRelease

if TYPE_CHECKING:
    from .runner import CommandRunner


class HelmCommands:
    """Helm-related shell commands.

    Provides operations for:
    - Repository management (add, update)
    - Release management (install, upgrade, uninstall)
    - Status queries (list releases, release existence)
    """

    def __init__(self, runner: CommandRunner) -> None:
        """Initialize Helm commands.

        Args:
            runner: Command runner for executing shell commands
        """
        self._runner = runner

    # =========================================================================
    # Repository Management
    # =========================================================================

    def repo_add(self, name: str, url: str) -> CommandResult:
        """Register a chart repository under a local alias.

        Args:
            name: Repository alias (e.g., "gitlab")
            url: Repository URL (e.g., "https://charts.gitlab.io")

        Returns:
            CommandResult with repo add status
        """
        return self._runner.run(["helm", "repo", "add", name, url])

    def repo_update(self) -> CommandResult:
        """Refresh the local cache of every registered chart repository."""
        return self._runner.run(["helm", "repo", "update"])

    # =========================================================================
    # Release Management
    # =========================================================================

    def _release_command(
        self,
        action: str,
        release_name: str,
        chart: str,
        namespace: str,
        value_files: list[Path] | None,
        version: str | None,
        on_output: Callable[[str], None] | None,
    ) -> CommandResult:
        cmd = [
            "helm",
            action,
            release_name,
            chart,
            "--namespace",
            namespace,
        ]
        for vf in value_files or []:
            cmd.extend(["--values", str(vf)])
        if version:
            cmd.extend(["--version", version])

        # Use streaming if callback provided, otherwise capture output
        if on_output:
            return self._runner.run_streaming(cmd, on_output=on_output)
        return self._runner.run(cmd, capture_output=True)

    def install(
        self,
        release_name: str,
        chart: str,
        namespace: str,
        *,
        value_files: list[Path] | None = None,
        version: str | None = None,
        on_output: Callable[[str], None] | None = None,
    ) -> CommandResult:
        """Install a new Helm release.

        Args:
            release_name: Name for the Helm release (e.g., "gitlab-runner")
            chart: Repo-qualified chart reference (e.g., "gitlab/gitlab-runner")
            namespace: Kubernetes namespace for deployment
            value_files: Optional list of values.yaml files
            version: Optional chart version constraint
            on_output: Optional callback for real-time output streaming.
                      If provided, each line of output is passed to this function.

        Returns:
            CommandResult with install status

        Example:
            >>> helm.install(
            ...     "gitlab-runner",
            ...     "gitlab/gitlab-runner",
            ...     "gitlab-runner",
            ...     value_files=[Path("gitlab-runner-values.yaml")],
            ...     version="0.60.0",
            ... )
        """
        return self._release_command(
            "install", release_name, chart, namespace, value_files, version, on_output
        )

    def upgrade(
        self,
        release_name: str,
        chart: str,
        namespace: str,
        *,
        value_files: list[Path] | None = None,
        version: str | None = None,
        on_output: Callable[[str], None] | None = None,
    ) -> CommandResult:
        """Upgrade an existing Helm release.

        Args:
            release_name: Name of the release to upgrade
            chart: Repo-qualified chart reference
            namespace: Kubernetes namespace
            value_files: Optional list of values.yaml files
            version: Optional chart version constraint
            on_output: Optional callback for real-time output streaming

        Returns:
            CommandResult with upgrade status
        """
        return self._release_command(
            "upgrade", release_name, chart, namespace, value_files, version, on_output
        )

    def uninstall(
        self,
        release_name: str,
        namespace: str,
        *,
        wait: bool = True,
    ) -> CommandResult:
        """Uninstall a Helm release.

        Args:
            release_name: Name of the release to uninstall
            namespace: Kubernetes namespace
            wait: Whether to wait for resources to be deleted

        Returns:
            CommandResult with uninstall status
        """
        cmd = ["helm", "uninstall", release_name, "-n", namespace]
        if wait:
            cmd.append("--wait")
        return self._runner.run(cmd)

    # =========================================================================
    # Status Queries
    # =========================================================================

    def list_releases(self, namespace: str) -> list[HelmRelease]:
        """List Helm releases in a namespace.

        Args:
            namespace: Kubernetes namespace to query

        Returns:
            List of HelmRelease objects (empty on failure or bad output)
        """
        result = self._runner.run(["helm", "list", "-n", namespace, "-o", "json"])
        if not result.success or not result.stdout:
            return []

        try:
            releases_data = json.loads(result.stdout)
            return [
                HelmRelease(
                    name=r.get("name", ""),
                    namespace=r.get("namespace", ""),
                    status=r.get("status", ""),
                    revision=str(r.get("revision", "")),
                    chart=r.get("chart", ""),
                )
                for r in releases_data or []
            ]
        except json.JSONDecodeError:
            return []

    def release_exists(self, release_name: str, namespace: str) -> bool:
        """Check whether a release with exactly this name exists.

        Args:
            release_name: Release name to look for
            namespace: Kubernetes namespace

        Returns:
            True if the release is listed in the namespace
        """
        return any(r.name == release_name for r in self.list_releases(namespace))
