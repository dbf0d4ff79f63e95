"""Runner deployer package for Kubernetes deployments.

This package provides a modular approach to installing a GitLab Runner
via kubectl and Helm, with each pipeline phase in its own module:

- preflight: Tool and cluster connectivity checks
- namespace_manager: Create-if-absent namespace handling
- secret_manager: Registry pull secret recreation
- rbac: ServiceAccount, Role and RoleBinding
- values_renderer: Helm values and runner config.toml rendering
- helm_release: Chart repository sync and install/upgrade
- verifier: Pod readiness wait and status display
- artifacts: Sample pipeline and post-install instructions

The RunnerDeployer class in deployer.py orchestrates these components.

Usage:
    from runner_forge.cli.deployment.runner_deployer import RunnerDeployer

    deployer = RunnerDeployer(console, config)
    deployer.deploy()
"""

from .artifacts import ArtifactWriter
from .deployer import RunnerDeployer
from .errors import DeploymentError, raise_for_result
from .helm_release import HelmReleaseManager
from .namespace_manager import NamespaceManager
from .preflight import PreflightChecker
from .rbac import RbacManager
from .secret_manager import SecretManager
from .values_renderer import ValuesRenderer
from .verifier import DeploymentVerifier

__all__ = [
    "RunnerDeployer",
    "DeploymentError",
    "raise_for_result",
    # Component classes for testing/extension
    "PreflightChecker",
    "NamespaceManager",
    "SecretManager",
    "RbacManager",
    "ValuesRenderer",
    "HelmReleaseManager",
    "DeploymentVerifier",
    "ArtifactWriter",
]
