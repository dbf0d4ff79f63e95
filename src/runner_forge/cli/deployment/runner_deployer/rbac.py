"""RBAC resources for the runner service account."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import yaml  # type: ignore[import-untyped]
from rich.text import Text

from .errors import raise_for_result

if TYPE_CHECKING:
    from runner_forge.cli.shared.console import CLIConsole

    from ..shell_commands import ShellCommands


def build_rbac_resources(namespace: str, service_account: str) -> list[dict[str, Any]]:
    """Build the ServiceAccount, Role and RoleBinding for the runner.

    The Role lets the Kubernetes executor manage job pods and read the
    secrets and configmaps they mount.

    Args:
        namespace: Namespace all three resources live in
        service_account: Name shared by the account, role and binding

    Returns:
        The three resource documents in apply order
    """
    metadata = {"name": service_account, "namespace": namespace}
    return [
        {
            "apiVersion": "v1",
            "kind": "ServiceAccount",
            "metadata": dict(metadata),
        },
        {
            "apiVersion": "rbac.authorization.k8s.io/v1",
            "kind": "Role",
            "metadata": dict(metadata),
            "rules": [
                {
                    "apiGroups": [""],
                    "resources": ["pods", "pods/log", "pods/exec", "pods/attach"],
                    "verbs": ["get", "list", "watch", "create", "delete"],
                },
                {
                    "apiGroups": [""],
                    "resources": ["secrets", "configmaps"],
                    "verbs": ["get", "list", "watch"],
                },
            ],
        },
        {
            "apiVersion": "rbac.authorization.k8s.io/v1",
            "kind": "RoleBinding",
            "metadata": dict(metadata),
            "roleRef": {
                "apiGroup": "rbac.authorization.k8s.io",
                "kind": "Role",
                "name": service_account,
            },
            "subjects": [
                {
                    "kind": "ServiceAccount",
                    "name": service_account,
                    "namespace": namespace,
                }
            ],
        },
    ]


def render_rbac_manifest(namespace: str, service_account: str) -> str:
    """Render the RBAC resources as a multi-document YAML stream."""
    return yaml.safe_dump_all(
        build_rbac_resources(namespace, service_account),
        default_flow_style=False,
        sort_keys=False,
    )


class RbacManager:
    """Applies the runner's RBAC resources."""

    def __init__(self, commands: ShellCommands, console: CLIConsole) -> None:
        self.commands = commands
        self.console = console

    def apply(self, namespace: str, service_account: str) -> None:
        """Apply the RBAC manifest via kubectl apply -f -.

        Raises:
            DeploymentError: If kubectl apply fails
        """
        self.console.info("Creating RBAC resources...")
        manifest = render_rbac_manifest(namespace, service_account)
        result = self.commands.kubectl.apply_manifest(manifest)
        raise_for_result(
            result,
            "Failed to apply RBAC resources",
            recovery="Your kubectl user needs permission to manage Roles and "
            "RoleBindings in the target namespace.",
        )
        for line in result.stdout.strip().splitlines():
            self.console.print(Text(f"  {line}", style="dim"))
        self.console.ok("RBAC resources created successfully.")
