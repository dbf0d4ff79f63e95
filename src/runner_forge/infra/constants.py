"""Deployment constants and configuration.

This module centralizes all magic strings, file names, and default values
used throughout the runner deployment process.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class DeploymentConstants:
    """Constants for the GitLab Runner Kubernetes/Helm deployment.

    This class provides a centralized location for all deployment-related
    constants, making them easy to find, update, and test.

    All attributes are class-level and immutable.
    """

    # Kubernetes identifiers
    DEFAULT_NAMESPACE: str = "gitlab-runner"
    NAMESPACE_COMPONENT_LABEL: str = "cicd"
    SERVICE_ACCOUNT_NAME: str = "gitlab-runner"
    REGISTRY_SECRET_NAME: str = "harbor-registry-secret"
    RUNNER_POD_LABEL: str = "app=gitlab-runner"

    # Helm identifiers
    HELM_REPO_NAME: str = "gitlab"
    HELM_REPO_URL: str = "https://charts.gitlab.io"
    HELM_CHART_NAME: str = "gitlab-runner"
    HELM_RELEASE_NAME: str = "gitlab-runner"
    HELM_CHART_VERSION: str = "0.60.0"

    # GitLab and registry defaults
    DEFAULT_GITLAB_URL: str = "https://gitlab.com/"
    DEFAULT_REGISTRY_SERVER: str = "harbor.k8s.local"
    DEFAULT_REGISTRY_USERNAME: str = "admin"
    DEFAULT_REGISTRY_PASSWORD: str = "Harbor12345"
    DEFAULT_REGISTRY_EMAIL: str = "admin@example.com"
    DEFAULT_REGISTRY_PROJECT: str = "library"

    # Timeouts
    POD_READY_TIMEOUT: str = "300s"
    LOG_TAIL_LINES: int = 20

    # Metrics
    METRICS_PORT: int = 9252

    # Generated artifacts
    VALUES_FILE_NAME: str = "gitlab-runner-values.yaml"
    SAMPLE_PIPELINE_FILE_NAME: str = "sample-gitlab-ci.yml"

    # Config discovery
    CONFIG_FILE_NAME: str = "runner-forge.yaml"

    # Required CLI tools, checked in order during preflight
    REQUIRED_TOOLS: tuple[str, ...] = ("kubectl", "helm")


class DeploymentPaths:
    """Path resolver for files generated during deployment.

    All artifacts are written beneath a single output directory, which
    defaults to the current working directory.
    """

    def __init__(self, output_dir: Path | None = None) -> None:
        """Initialize deployment paths.

        Args:
            output_dir: Directory for generated files (default: cwd)
        """
        self.output_dir = Path(output_dir) if output_dir else Path.cwd()
        self._constants = DeploymentConstants()

    @property
    def values_file(self) -> Path:
        """Get path to the rendered Helm values file."""
        return self.output_dir / self._constants.VALUES_FILE_NAME

    @property
    def sample_pipeline_file(self) -> Path:
        """Get path to the sample GitLab CI pipeline."""
        return self.output_dir / self._constants.SAMPLE_PIPELINE_FILE_NAME


DEFAULT_CONSTANTS = DeploymentConstants()
