"""Configuration models for the runner deployment."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field

from runner_forge.infra.constants import DEFAULT_CONSTANTS as C


class GitLabConfig(BaseModel):
    """GitLab instance the runner registers with."""

    url: str = C.DEFAULT_GITLAB_URL
    # Get from GitLab Settings > CI/CD > Runners
    registration_token: str = ""


class RegistryConfig(BaseModel):
    """Private container registry used for image pulls and pushes."""

    server: str = C.DEFAULT_REGISTRY_SERVER
    username: str = C.DEFAULT_REGISTRY_USERNAME
    password: str = C.DEFAULT_REGISTRY_PASSWORD
    email: str = C.DEFAULT_REGISTRY_EMAIL
    project: str = C.DEFAULT_REGISTRY_PROJECT
    secret_name: str = C.REGISTRY_SECRET_NAME


class ChartConfig(BaseModel):
    """Upstream Helm chart and release identity."""

    repo_name: str = C.HELM_REPO_NAME
    repo_url: str = C.HELM_REPO_URL
    chart_name: str = C.HELM_CHART_NAME
    release_name: str = C.HELM_RELEASE_NAME
    version: str | None = C.HELM_CHART_VERSION

    @property
    def reference(self) -> str:
        return f"{self.repo_name}/{self.chart_name}"


class ResourceSpec(BaseModel):
    cpu: str
    memory: str


class JobPodConfig(BaseModel):
    """Settings for the pods the Kubernetes executor spawns per job."""

    image: str = "ubuntu:22.04"
    privileged: bool = False
    cpu_limit: str = "2"
    cpu_request: str = "500m"
    memory_limit: str = "4Gi"
    memory_request: str = "1Gi"
    helper_image: str = "gitlab/gitlab-runner-helper:x86_64-latest"
    poll_interval: int = 3
    builds_dir: str = "/builds"
    cache_volume_name: str = "build-cache"
    cache_mount_path: str = "/cache"
    cache_medium: str = "Memory"


class ManagerConfig(BaseModel):
    """Settings for the long-running runner manager pod."""

    limits: ResourceSpec = Field(
        default_factory=lambda: ResourceSpec(cpu="200m", memory="256Mi")
    )
    requests: ResourceSpec = Field(
        default_factory=lambda: ResourceSpec(cpu="100m", memory="128Mi")
    )
    concurrent: int = 10
    check_interval: int = 3
    log_level: str = "info"
    log_format: str = "json"
    run_as_user: int = 100
    fs_group: int = 65533
    metrics_enabled: bool = True
    metrics_port: int = C.METRICS_PORT


class RunnerConfig(BaseModel):
    service_account: str = C.SERVICE_ACCOUNT_NAME
    job: JobPodConfig = Field(default_factory=JobPodConfig)
    manager: ManagerConfig = Field(default_factory=ManagerConfig)


class VerifyConfig(BaseModel):
    """Post-install verification settings."""

    label_selector: str = C.RUNNER_POD_LABEL
    timeout: str = C.POD_READY_TIMEOUT
    log_tail: int = C.LOG_TAIL_LINES


class RunnerForgeConfig(BaseModel):
    """Root configuration for a runner deployment."""

    namespace: str = C.DEFAULT_NAMESPACE
    gitlab: GitLabConfig = Field(default_factory=GitLabConfig)
    registry: RegistryConfig = Field(default_factory=RegistryConfig)
    chart: ChartConfig = Field(default_factory=ChartConfig)
    runner: RunnerConfig = Field(default_factory=RunnerConfig)
    verify: VerifyConfig = Field(default_factory=VerifyConfig)
    output_dir: Path | None = None
