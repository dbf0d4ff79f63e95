"""Kubectl command abstractions.

This module provides commands for Kubernetes resource management via
kubectl subprocess calls: cluster reachability, namespaces, secrets,
manifest application, pod readiness, logs, and read-only listings.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from .types import CommandResult, PodInfo, SecretInfo, ServiceInfo

if TYPE_CHECKING:
    from .runner import CommandRunner


class KubectlCommands:
    """Kubectl-related shell commands.

    Provides operations for:
    - Cluster connectivity checks
    - Namespace management (exists, create, label, delete)
    - Secret management (exists, delete, create docker-registry)
    - Manifest application from stdin
    - Pod operations (wait for condition, list, logs)
    - Service and secret listings
    """

    def __init__(self, runner: CommandRunner) -> None:
        """Initialize kubectl commands.

        Args:
            runner: Command runner for executing shell commands
        """
        self._runner = runner

    def _run_kubectl(
        self,
        args: list[str],
        *,
        capture_output: bool = True,
        input_data: str | None = None,
    ) -> CommandResult:
        return self._runner.run(
            ["kubectl", *args],
            capture_output=capture_output,
            input_data=input_data,
        )

    def _get_items(
        self, args: list[str]
    ) -> tuple[CommandResult, list[dict[str, Any]]]:
        """Run a `get ... -o json` listing.

        Unparseable output is reported as a failed result so callers only
        have to check `success`.
        """
        result = self._run_kubectl([*args, "-o", "json"])
        if not result.success:
            return result, []
        try:
            items: list[dict[str, Any]] = json.loads(result.stdout or "{}").get(
                "items", []
            )
        except json.JSONDecodeError as e:
            return (
                CommandResult(
                    success=False,
                    stdout=result.stdout,
                    stderr=f"Unparseable kubectl output: {e}",
                    returncode=result.returncode,
                ),
                [],
            )
        return result, items

    # =========================================================================
    # Cluster Context
    # =========================================================================

    def cluster_info(self) -> CommandResult:
        """Query the control plane to verify the cluster is reachable."""
        return self._run_kubectl(["cluster-info"])

    # =========================================================================
    # Namespace Management
    # =========================================================================

    def namespace_exists(self, namespace: str) -> bool:
        """Check if a namespace exists."""
        return self._run_kubectl(["get", "namespace", namespace]).success

    def create_namespace(self, namespace: str) -> CommandResult:
        """Create a namespace."""
        return self._run_kubectl(["create", "namespace", namespace])

    def label_namespace(self, namespace: str, labels: dict[str, str]) -> CommandResult:
        """Attach labels to a namespace.

        Args:
            namespace: Namespace to label
            labels: Label key/value pairs

        Returns:
            CommandResult with label status
        """
        args = ["label", "namespace", namespace]
        args.extend(f"{key}={value}" for key, value in labels.items())
        return self._run_kubectl(args)

    def delete_namespace(
        self,
        namespace: str,
        *,
        wait: bool = True,
        timeout: str = "120s",
    ) -> CommandResult:
        """Delete a Kubernetes namespace and all its resources."""
        args = ["delete", "namespace", namespace]
        if wait:
            args.append("--wait=true")
            args.extend(["--timeout", timeout])
        return self._run_kubectl(args)

    # =========================================================================
    # Secret Management
    # =========================================================================

    def secret_exists(self, name: str, namespace: str) -> bool:
        """Check if a secret exists in a namespace."""
        return self._run_kubectl(["get", "secret", name, "-n", namespace]).success

    def delete_secret(self, name: str, namespace: str) -> CommandResult:
        """Delete a secret by name."""
        return self._run_kubectl(["delete", "secret", name, "-n", namespace])

    def create_docker_registry_secret(
        self,
        name: str,
        namespace: str,
        *,
        server: str,
        username: str,
        password: str,
        email: str,
    ) -> CommandResult:
        """Create an image pull secret for a private container registry.

        Args:
            name: Secret name
            namespace: Target namespace
            server: Registry host (e.g., harbor.k8s.local)
            username: Registry user
            password: Registry password
            email: Email recorded in the docker config

        Returns:
            CommandResult with creation status
        """
        return self._run_kubectl(
            [
                "create",
                "secret",
                "docker-registry",
                name,
                f"--docker-server={server}",
                f"--docker-username={username}",
                f"--docker-password={password}",
                f"--docker-email={email}",
                f"--namespace={namespace}",
            ]
        )

    def get_secrets(self, namespace: str) -> tuple[CommandResult, list[SecretInfo]]:
        """List secrets in a namespace (metadata only, never values).

        Returns:
            The listing's result and the parsed secrets ([] on failure)
        """
        result, items = self._get_items(["get", "secrets", "-n", namespace])
        secrets = [
            SecretInfo(
                name=item.get("metadata", {}).get("name", ""),
                type=item.get("type", ""),
                data_keys=len(item.get("data") or {}),
            )
            for item in items
        ]
        return result, secrets

    # =========================================================================
    # Resource Operations
    # =========================================================================

    def apply_manifest(self, manifest: str) -> CommandResult:
        """Apply a YAML manifest passed on stdin (kubectl apply -f -).

        Args:
            manifest: YAML document stream

        Returns:
            CommandResult with apply status
        """
        return self._run_kubectl(["apply", "-f", "-"], input_data=manifest)

    # =========================================================================
    # Pod Operations
    # =========================================================================

    def wait_for_pods(
        self,
        namespace: str,
        label_selector: str,
        *,
        condition: str = "ready",
        timeout: str = "300s",
    ) -> CommandResult:
        """Block until pods matching a selector reach a condition."""
        return self._run_kubectl(
            [
                "wait",
                "--for",
                f"condition={condition}",
                "pod",
                "-l",
                label_selector,
                "-n",
                namespace,
                f"--timeout={timeout}",
            ],
            capture_output=False,
        )

    def get_pods(
        self,
        namespace: str,
        label_selector: str | None = None,
    ) -> tuple[CommandResult, list[PodInfo]]:
        """List pods in a namespace with their status.

        Args:
            namespace: Kubernetes namespace to search
            label_selector: Optional label selector (e.g., "app=gitlab-runner")

        Returns:
            The listing's result and the matching pods ([] on failure)
        """
        args = ["get", "pods", "-n", namespace]
        if label_selector:
            args.extend(["-l", label_selector])

        result, items = self._get_items(args)
        pods = []
        for pod in items:
            metadata = pod.get("metadata", {})
            status = pod.get("status", {})
            container_statuses = status.get("containerStatuses", [])

            pod_status = status.get("phase", "Unknown")
            restarts = 0
            ready_count = 0
            for cs in container_statuses:
                restarts += cs.get("restartCount", 0)
                if cs.get("ready"):
                    ready_count += 1
                waiting = cs.get("state", {}).get("waiting")
                if waiting and waiting.get("reason"):
                    pod_status = waiting["reason"]

            pods.append(
                PodInfo(
                    name=metadata.get("name", ""),
                    status=pod_status,
                    ready=f"{ready_count}/{len(container_statuses)}",
                    restarts=restarts,
                    node=pod.get("spec", {}).get("nodeName", ""),
                )
            )
        return result, pods

    def get_pod_logs(
        self,
        namespace: str,
        *,
        label_selector: str,
        tail: int = 20,
    ) -> CommandResult:
        """Get the most recent log lines from pods matching a selector."""
        return self._run_kubectl(
            ["logs", "-n", namespace, "-l", label_selector, f"--tail={tail}"]
        )

    # =========================================================================
    # Service Operations
    # =========================================================================

    def get_services(
        self, namespace: str
    ) -> tuple[CommandResult, list[ServiceInfo]]:
        """List services in a namespace, with the listing's result."""
        result, items = self._get_items(["get", "services", "-n", namespace])
        services = []
        for svc in items:
            spec = svc.get("spec", {})
            ports = []
            for port in spec.get("ports", []):
                port_str = f"{port.get('port')}"
                if proto := port.get("protocol"):
                    port_str += f"/{proto}"
                ports.append(port_str)
            services.append(
                ServiceInfo(
                    name=svc.get("metadata", {}).get("name", ""),
                    type=spec.get("type", ""),
                    cluster_ip=spec.get("clusterIP", ""),
                    ports=",".join(ports),
                )
            )
        return result, services
