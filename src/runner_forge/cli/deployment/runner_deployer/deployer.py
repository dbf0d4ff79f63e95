"""GitLab Runner deployer using kubectl and Helm.

This module provides the RunnerDeployer class which orchestrates the
runner installation. It coordinates specialized components for:
- Preflight checks
- Namespace and registry secret setup
- RBAC resources
- Helm values rendering and release install/upgrade
- Post-install verification and artifact generation

Every phase runs in order and the first failure aborts the run. Nothing
that already happened is rolled back.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from runner_forge.infra.constants import DeploymentConstants, DeploymentPaths

from ..base import BaseDeployer
from ..shell_commands import ShellCommands
from .artifacts import ArtifactWriter
from .errors import DeploymentError, raise_for_result
from .helm_release import HelmReleaseManager
from .namespace_manager import NamespaceManager
from .preflight import PreflightChecker
from .rbac import RbacManager
from .secret_manager import SecretManager
from .values_renderer import ValuesRenderer
from .verifier import DeploymentVerifier

if TYPE_CHECKING:
    from runner_forge.cli.shared.console import CLIConsole
    from runner_forge.config import RunnerForgeConfig

__all__ = ["RunnerDeployer", "DeploymentError"]


class RunnerDeployer(BaseDeployer):
    """Deployer for a GitLab Runner on Kubernetes.

    The deployment workflow consists of:
    1. Check the registration token is set
    2. Check kubectl, helm and cluster connectivity
    3. Ensure the namespace exists
    4. Recreate the registry pull secret
    5. Apply RBAC resources
    6. Render the Helm values file
    7. Add/update the chart repository
    8. Install or upgrade the release
    9. Wait for pods and show status
    10. Write the sample pipeline and print next steps

    Attributes:
        config: Deployment configuration
        constants: Deployment constants
        paths: Output path resolver
        commands: Shell command executor
    """

    def __init__(
        self,
        console: CLIConsole,
        config: RunnerForgeConfig,
        commands: ShellCommands | None = None,
        constants: DeploymentConstants | None = None,
    ):
        """Initialize the runner deployer.

        Args:
            console: Console for output
            config: Deployment configuration
            commands: Shell command executor (created if not provided)
            constants: Deployment constants (defaults if not provided)
        """
        super().__init__(console)

        self.config = config
        self.constants = constants or DeploymentConstants()
        self.paths = DeploymentPaths(config.output_dir)
        self.commands = commands or ShellCommands()

        self.preflight = PreflightChecker(self.commands, console, self.constants)
        self.namespaces = NamespaceManager(self.commands, console, self.constants)
        self.secret_manager = SecretManager(self.commands, console)
        self.rbac = RbacManager(self.commands, console)
        self.values_renderer = ValuesRenderer(console)
        self.helm_release = HelmReleaseManager(self.commands, console)
        self.verifier = DeploymentVerifier(self.commands, console)
        self.artifacts = ArtifactWriter(console)

    # =========================================================================
    # Validation
    # =========================================================================

    def _require_token(self) -> None:
        """Refuse to continue without a runner registration token.

        Raises:
            DeploymentError: If the registration token is empty
        """
        if not self.config.gitlab.registration_token.strip():
            raise DeploymentError(
                "RUNNER_REGISTRATION_TOKEN is not set!",
                details=(
                    "Set your GitLab runner registration token with --token, the "
                    "RUNNER_REGISTRATION_TOKEN environment variable, or "
                    "gitlab.registration_token in runner-forge.yaml.\n\n"
                    "You can find it at: GitLab > Settings > CI/CD > Runners > New runner"
                ),
            )

    # =========================================================================
    # Public Interface
    # =========================================================================

    def deploy(self, *, skip_verify: bool = False, **kwargs: Any) -> None:
        """Install or upgrade the runner.

        Args:
            skip_verify: Skip waiting for pod readiness and the status dump
            **kwargs: Reserved for future options

        Raises:
            DeploymentError: On the first failing step
        """
        config = self.config
        self.console.print_header("GitLab Runner Deployment")

        self._require_token()

        self.preflight.check()
        self.namespaces.ensure_namespace(config.namespace)
        self.secret_manager.ensure_registry_secret(config.namespace, config.registry)
        self.rbac.apply(config.namespace, config.runner.service_account)
        values_file = self.values_renderer.write(config, self.paths.values_file)
        self.helm_release.sync_repo(config.chart)
        self.helm_release.install_or_upgrade(config.chart, config.namespace, values_file)

        if skip_verify:
            self.console.warn("Skipping deployment verification.")
        else:
            self.verifier.verify(config.namespace, config.verify)

        pipeline_file = self.artifacts.write_sample_pipeline(
            config, self.paths.sample_pipeline_file
        )
        self.artifacts.print_instructions(config, pipeline_file)

    def render(self) -> None:
        """Write the values file and sample pipeline without touching the cluster."""
        if not self.config.gitlab.registration_token.strip():
            self.console.warn(
                "Registration token is empty; the values file cannot register a runner."
            )
        self.values_renderer.write(self.config, self.paths.values_file)
        self.artifacts.write_sample_pipeline(
            self.config, self.paths.sample_pipeline_file
        )

    def show_status(self) -> None:
        """Wait for the runner pods and display their status."""
        self.preflight.check()
        self.verifier.verify(self.config.namespace, self.config.verify)

    def teardown(self, *, delete_namespace: bool = False, **kwargs: Any) -> None:
        """Uninstall the runner release.

        Args:
            delete_namespace: Also delete the namespace and everything in it
            **kwargs: Reserved for future options

        Raises:
            DeploymentError: If uninstalling or deleting the namespace fails
        """
        config = self.config
        self.preflight.check()

        release = config.chart.release_name
        if self.commands.helm.release_exists(release, config.namespace):
            with self.console.status(f"[bold red]Uninstalling {release}..."):
                result = self.commands.helm.uninstall(release, config.namespace)
            raise_for_result(result, f"Failed to uninstall release {release}")
            self.console.ok(f"Release {release} uninstalled")
        else:
            self.console.warn(
                f"Release {release} not found in namespace {config.namespace}"
            )

        if delete_namespace:
            if not self.commands.kubectl.namespace_exists(config.namespace):
                self.console.warn(f"Namespace {config.namespace} does not exist")
                return
            with self.console.status(
                f"[bold red]Deleting namespace {config.namespace}..."
            ):
                result = self.commands.kubectl.delete_namespace(config.namespace)
            raise_for_result(result, f"Failed to delete namespace {config.namespace}")
            self.console.ok(f"Namespace {config.namespace} deleted")
