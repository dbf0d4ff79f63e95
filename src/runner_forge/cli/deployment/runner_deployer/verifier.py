"""Post-install verification of the runner deployment."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.table import Table
from rich.text import Text

from .errors import raise_for_result

if TYPE_CHECKING:
    from runner_forge.cli.shared.console import CLIConsole
    from runner_forge.config import VerifyConfig

    from ..shell_commands import ShellCommands


class DeploymentVerifier:
    """Waits for the runner to become ready and reports its state.

    Handles:
    - Blocking until runner pods are ready (fixed timeout)
    - Showing runner pods, recent logs, services and secrets
    """

    def __init__(self, commands: ShellCommands, console: CLIConsole) -> None:
        self.commands = commands
        self.console = console

    def verify(self, namespace: str, verify: VerifyConfig) -> None:
        """Wait for readiness, then display pods, logs, services and secrets.

        Args:
            namespace: Runner namespace
            verify: Label selector, readiness timeout and log tail length

        Raises:
            DeploymentError: If the pods do not become ready or any kubectl
                query fails
        """
        self.console.info("Verifying deployment...")

        self.wait_until_ready(namespace, verify)
        self.show_status(namespace, verify)

    def wait_until_ready(self, namespace: str, verify: VerifyConfig) -> None:
        """Block until runner pods report Ready, or the timeout expires."""
        self.console.print()
        self.console.info("Waiting for runner pod to be ready...")
        raise_for_result(
            self.commands.kubectl.wait_for_pods(
                namespace, verify.label_selector, timeout=verify.timeout
            ),
            f"Runner pods did not become ready within {verify.timeout}",
            recovery=(
                f"Check pod events: kubectl describe pods -n {namespace} "
                f"-l {verify.label_selector}"
            ),
        )

    def show_status(self, namespace: str, verify: VerifyConfig) -> None:
        """Display runner pods, recent logs, services and secrets."""
        kubectl = self.commands.kubectl

        self.console.print()
        self.console.info("Runner pods:")
        pods_table = Table(show_header=True, header_style="bold")
        for column in ("Name", "Ready", "Status", "Restarts", "Node"):
            pods_table.add_column(column)
        result, pods = kubectl.get_pods(namespace, verify.label_selector)
        raise_for_result(result, "Failed to list runner pods")
        for pod in pods:
            status_style = "green" if pod.status == "Running" else "yellow"
            pods_table.add_row(
                pod.name,
                pod.ready,
                Text(pod.status, style=status_style),
                str(pod.restarts),
                pod.node,
            )
        self.console.print(pods_table)

        self.console.print()
        self.console.info(f"Runner logs (last {verify.log_tail} lines):")
        logs = kubectl.get_pod_logs(
            namespace, label_selector=verify.label_selector, tail=verify.log_tail
        )
        raise_for_result(logs, "Failed to fetch runner logs")
        for line in logs.stdout.rstrip().splitlines():
            self.console.print(Text(f"  {line}", style="dim"))

        self.console.print()
        self.console.info("Runner service:")
        svc_table = Table(show_header=True, header_style="bold")
        for column in ("Name", "Type", "Cluster IP", "Ports"):
            svc_table.add_column(column)
        result, services = kubectl.get_services(namespace)
        raise_for_result(result, "Failed to list services")
        for svc in services:
            svc_table.add_row(svc.name, svc.type, svc.cluster_ip, svc.ports)
        self.console.print(svc_table)

        self.console.print()
        self.console.info("Runner secrets:")
        secret_table = Table(show_header=True, header_style="bold")
        for column in ("Name", "Type", "Data"):
            secret_table.add_column(column)
        result, secrets = kubectl.get_secrets(namespace)
        raise_for_result(result, "Failed to list secrets")
        for secret in secrets:
            secret_table.add_row(secret.name, secret.type, str(secret.data_keys))
        self.console.print(secret_table)
