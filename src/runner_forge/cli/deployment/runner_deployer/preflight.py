"""Pre-deployment checks.

Verifies that the required CLIs are installed and that the cluster is
reachable before anything is mutated.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from runner_forge.infra.constants import DeploymentConstants

from .errors import DeploymentError, raise_for_result

if TYPE_CHECKING:
    from runner_forge.cli.shared.console import CLIConsole

    from ..shell_commands import ShellCommands


_INSTALL_HINTS: dict[str, str] = {
    "kubectl": "https://kubernetes.io/docs/tasks/tools/",
    "helm": "https://helm.sh/docs/intro/install/",
}


class PreflightChecker:
    """Checks tooling and cluster connectivity.

    Handles:
    - Presence of kubectl and helm on PATH
    - Reachability of the current kubectl context
    """

    def __init__(
        self,
        commands: ShellCommands,
        console: CLIConsole,
        constants: DeploymentConstants | None = None,
    ) -> None:
        self.commands = commands
        self.console = console
        self.constants = constants or DeploymentConstants()

    def check(self) -> None:
        """Run every preflight check, failing on the first problem.

        Raises:
            DeploymentError: If a tool is missing or the cluster is unreachable
        """
        self.console.info("Checking prerequisites...")

        for tool in self.constants.REQUIRED_TOOLS:
            if not self.commands.tool_available(tool):
                raise DeploymentError(
                    f"{tool} not found. Please install {tool}.",
                    details=(
                        f"'{tool}' must be available on PATH.\n\n"
                        f"Installation guide: {_INSTALL_HINTS.get(tool, tool)}"
                    ),
                )

        result = self.commands.kubectl.cluster_info()
        raise_for_result(
            result,
            "Cannot connect to Kubernetes cluster.",
            recovery=(
                "Recovery steps:\n"
                "  1. Check the active context: kubectl config current-context\n"
                "  2. Verify the API server is up: kubectl cluster-info\n"
                "  3. Check KUBECONFIG points at the intended cluster"
            ),
        )

        self.console.ok("Prerequisites check passed!")
