"""Namespace management for the runner deployment."""

from __future__ import annotations

from typing import TYPE_CHECKING

from runner_forge.infra.constants import DeploymentConstants

from .errors import raise_for_result

if TYPE_CHECKING:
    from runner_forge.cli.shared.console import CLIConsole

    from ..shell_commands import ShellCommands


class NamespaceManager:
    """Creates the runner namespace when it is absent."""

    def __init__(
        self,
        commands: ShellCommands,
        console: CLIConsole,
        constants: DeploymentConstants | None = None,
    ) -> None:
        self.commands = commands
        self.console = console
        self.constants = constants or DeploymentConstants()

    def ensure_namespace(self, namespace: str) -> bool:
        """Create and label the namespace if it does not exist yet.

        An existing namespace is left untouched, labels included.

        Args:
            namespace: Namespace to ensure

        Returns:
            True if the namespace was created, False if it already existed

        Raises:
            DeploymentError: If creating or labelling the namespace fails
        """
        self.console.info(f"Creating namespace: {namespace}")

        if self.commands.kubectl.namespace_exists(namespace):
            self.console.warn(f"Namespace {namespace} already exists.")
            return False

        raise_for_result(
            self.commands.kubectl.create_namespace(namespace),
            f"Failed to create namespace {namespace}",
        )
        raise_for_result(
            self.commands.kubectl.label_namespace(
                namespace,
                {
                    "name": namespace,
                    "component": self.constants.NAMESPACE_COMPONENT_LABEL,
                },
            ),
            f"Failed to label namespace {namespace}",
        )
        self.console.ok("Namespace created successfully.")
        return True
