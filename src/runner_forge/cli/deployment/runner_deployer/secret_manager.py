"""Registry pull secret management.

The secret is always recreated so that changed registry credentials take
effect on the next run.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .errors import raise_for_result

if TYPE_CHECKING:
    from runner_forge.cli.shared.console import CLIConsole
    from runner_forge.config import RegistryConfig

    from ..shell_commands import ShellCommands


class SecretManager:
    """Manages the docker-registry secret used for private image pulls.

    Handles:
    - Detecting an existing secret
    - Deleting it before recreation
    - Creating the docker-registry secret from registry credentials
    """

    def __init__(self, commands: ShellCommands, console: CLIConsole) -> None:
        """Initialize the secret manager.

        Args:
            commands: Shell command executor
            console: Console for output
        """
        self.commands = commands
        self.console = console

    def ensure_registry_secret(self, namespace: str, registry: RegistryConfig) -> None:
        """Delete any existing registry secret, then create it afresh.

        Args:
            namespace: Target Kubernetes namespace
            registry: Registry server and credentials

        Raises:
            DeploymentError: If deleting or creating the secret fails
        """
        self.console.info("Creating registry secret...")
        kubectl = self.commands.kubectl

        if kubectl.secret_exists(registry.secret_name, namespace):
            self.console.warn(
                "Registry secret already exists. Deleting and recreating..."
            )
            raise_for_result(
                kubectl.delete_secret(registry.secret_name, namespace),
                f"Failed to delete secret {registry.secret_name}",
            )

        raise_for_result(
            kubectl.create_docker_registry_secret(
                registry.secret_name,
                namespace,
                server=registry.server,
                username=registry.username,
                password=registry.password,
                email=registry.email,
            ),
            f"Failed to create secret {registry.secret_name}",
            recovery=(
                "Check the registry settings (server, username, password) and "
                f"that you may create secrets in namespace '{namespace}'."
            ),
        )
        self.console.ok("Registry secret created successfully.")
