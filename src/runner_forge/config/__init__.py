"""Runner deployment configuration."""

from .config_data import (
    ChartConfig,
    GitLabConfig,
    JobPodConfig,
    ManagerConfig,
    RegistryConfig,
    ResourceSpec,
    RunnerConfig,
    RunnerForgeConfig,
    VerifyConfig,
)
from .config_loader import apply_overrides, load_config

__all__ = [
    "RunnerForgeConfig",
    "GitLabConfig",
    "RegistryConfig",
    "ChartConfig",
    "RunnerConfig",
    "JobPodConfig",
    "ManagerConfig",
    "ResourceSpec",
    "VerifyConfig",
    "load_config",
    "apply_overrides",
]
