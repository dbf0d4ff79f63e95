"""Helm release management.

This module handles chart repository sync and the install-or-upgrade
decision for the runner release.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Literal

from rich.text import Text

from .errors import raise_for_result

if TYPE_CHECKING:
    from runner_forge.cli.shared.console import CLIConsole
    from runner_forge.config import ChartConfig

    from ..shell_commands import ShellCommands


class HelmReleaseManager:
    """Manages the runner's Helm release.

    Handles:
    - Adding and refreshing the upstream chart repository
    - Installing the release, or upgrading it when it already exists
    """

    def __init__(self, commands: ShellCommands, console: CLIConsole) -> None:
        """Initialize the Helm release manager.

        Args:
            commands: Shell command executor
            console: Console for output
        """
        self.commands = commands
        self.console = console

    def sync_repo(self, chart: ChartConfig) -> None:
        """Add the chart repository and refresh the local index.

        Raises:
            DeploymentError: If helm repo add or update fails
        """
        self.console.info("Adding GitLab Helm repository...")
        raise_for_result(
            self.commands.helm.repo_add(chart.repo_name, chart.repo_url),
            f"Failed to add Helm repository {chart.repo_url}",
        )
        raise_for_result(
            self.commands.helm.repo_update(),
            "Failed to update Helm repositories",
        )
        self.console.ok("Helm repository added and updated.")

    def _print_helm_output(self, line: str) -> None:
        """Print Helm output in real-time, filtering noise."""
        line = line.strip()
        if not line:
            return
        # Skip noisy warning lines about table values
        if "warning:" in line.lower() and "table" in line.lower():
            return
        self.console.print(Text(f"  {line}", style="dim"))

    def install_or_upgrade(
        self,
        chart: ChartConfig,
        namespace: str,
        values_file: Path,
    ) -> Literal["install", "upgrade"]:
        """Install the release, or upgrade it if it is already present.

        Args:
            chart: Chart and release identity
            namespace: Target Kubernetes namespace
            values_file: Rendered Helm values file

        Returns:
            The action that was performed

        Raises:
            DeploymentError: If helm install/upgrade fails
        """
        self.console.info("Installing GitLab Runner...")

        helm = self.commands.helm
        if helm.release_exists(chart.release_name, namespace):
            self.console.warn("GitLab Runner already installed. Upgrading...")
            action: Literal["install", "upgrade"] = "upgrade"
            release_fn = helm.upgrade
        else:
            action = "install"
            release_fn = helm.install

        result = release_fn(
            chart.release_name,
            chart.reference,
            namespace,
            value_files=[values_file],
            version=chart.version,
            on_output=self._print_helm_output,
        )
        raise_for_result(
            result,
            f"Helm {action} failed",
            recovery=(
                "Common causes:\n"
                "  • Chart version not found in the repository\n"
                "  • Invalid values in the rendered values file\n"
                "  • A previous release is stuck in a pending state\n\n"
                "Recovery steps:\n"
                f"  1. Inspect releases: helm list -n {namespace} --all\n"
                f"  2. Check chart versions: helm search repo {chart.reference} --versions\n"
                f"  3. Remove a stuck release: helm uninstall {chart.release_name} -n {namespace}"
            ),
        )

        self.console.ok("GitLab Runner installation completed.")
        return action
