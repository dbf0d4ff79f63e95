"""Helm values rendering for the gitlab-runner chart.

Builds the values document from the deployment config and writes it to
disk. The chart's ``runners.config`` key holds the runner's own
``config.toml`` fragment as a string, which is rendered here too.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml  # type: ignore[import-untyped]

if TYPE_CHECKING:
    from runner_forge.cli.shared.console import CLIConsole
    from runner_forge.config import RunnerForgeConfig

VALUES_HEADER = "# GitLab Runner Helm Values\n"

# Expanded by the chart at install time, not by us
RELEASE_NAMESPACE_TEMPLATE = "{{.Release.Namespace}}"


def _toml_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, list | tuple):
        return "[" + ", ".join(_toml_value(v) for v in value) + "]"
    # TOML basic strings share JSON's escaping rules for these values
    return json.dumps(str(value))


def render_runner_toml(config: RunnerForgeConfig) -> str:
    """Render the ``[[runners]]`` config.toml fragment for the chart.

    Args:
        config: Deployment configuration

    Returns:
        TOML text with the Kubernetes executor settings
    """
    job = config.runner.job
    kubernetes: list[tuple[str, Any]] = [
        ("namespace", RELEASE_NAMESPACE_TEMPLATE),
        ("image", job.image),
        ("privileged", job.privileged),
        ("image_pull_secrets", [config.registry.secret_name]),
        ("cpu_limit", job.cpu_limit),
        ("cpu_request", job.cpu_request),
        ("memory_limit", job.memory_limit),
        ("memory_request", job.memory_request),
        ("service_account", config.runner.service_account),
        ("helper_image", job.helper_image),
        ("poll_interval", job.poll_interval),
        ("builds_dir", job.builds_dir),
    ]
    cache_volume: list[tuple[str, Any]] = [
        ("name", job.cache_volume_name),
        ("mount_path", job.cache_mount_path),
        ("medium", job.cache_medium),
    ]

    lines = ["[[runners]]", "  [runners.kubernetes]"]
    lines.extend(f"    {key} = {_toml_value(value)}" for key, value in kubernetes)
    lines.append("    [[runners.kubernetes.volumes.empty_dir]]")
    lines.extend(f"      {key} = {_toml_value(value)}" for key, value in cache_volume)
    return "\n".join(lines) + "\n"


def build_values(config: RunnerForgeConfig) -> dict[str, Any]:
    """Build the Helm values for the gitlab-runner chart.

    Args:
        config: Deployment configuration

    Returns:
        Values mapping in the order the chart documents them
    """
    manager = config.runner.manager
    values: dict[str, Any] = {
        "gitlabUrl": config.gitlab.url,
        "runnerRegistrationToken": config.gitlab.registration_token,
        "runners": {"config": render_runner_toml(config)},
        "resources": {
            "limits": {
                "memory": manager.limits.memory,
                "cpu": manager.limits.cpu,
            },
            "requests": {
                "memory": manager.requests.memory,
                "cpu": manager.requests.cpu,
            },
        },
        "concurrent": manager.concurrent,
        "checkInterval": manager.check_interval,
        "logLevel": manager.log_level,
        "logFormat": manager.log_format,
        "rbac": {
            "create": False,
            "serviceAccountName": config.runner.service_account,
        },
        "securityContext": {
            "runAsNonRoot": True,
            "runAsUser": manager.run_as_user,
            "fsGroup": manager.fs_group,
        },
        "podAnnotations": {
            "prometheus.io/scrape": "true",
            "prometheus.io/port": str(manager.metrics_port),
            "prometheus.io/path": "/metrics",
        },
        "metrics": {
            "enabled": manager.metrics_enabled,
            "portName": "metrics",
            "port": manager.metrics_port,
        },
        "affinity": {
            "podAntiAffinity": {
                "preferredDuringSchedulingIgnoredDuringExecution": [
                    {
                        "weight": 100,
                        "podAffinityTerm": {
                            "labelSelector": {
                                "matchExpressions": [
                                    {
                                        "key": "app",
                                        "operator": "In",
                                        "values": [config.chart.release_name],
                                    }
                                ]
                            },
                            "topologyKey": "kubernetes.io/hostname",
                        },
                    }
                ]
            }
        },
    }
    return values


def _string_representer(dumper: yaml.SafeDumper, data: str) -> yaml.ScalarNode:
    """Represent multi-line strings as literal blocks so TOML stays readable."""
    if "\n" in data:
        return dumper.represent_scalar("tag:yaml.org,2002:str", data, style="|")
    return dumper.represent_scalar("tag:yaml.org,2002:str", data)


class _ValuesDumper(yaml.SafeDumper):
    pass


_ValuesDumper.add_representer(str, _string_representer)


def dump_values(values: dict[str, Any]) -> str:
    """Serialize values to YAML, keeping key order and block-style TOML."""
    return VALUES_HEADER + yaml.dump(
        values,
        Dumper=_ValuesDumper,
        default_flow_style=False,
        sort_keys=False,
        indent=2,
    )


class ValuesRenderer:
    """Writes the Helm values file for the runner release."""

    def __init__(self, console: CLIConsole) -> None:
        self.console = console

    def write(self, config: RunnerForgeConfig, path: Path) -> Path:
        """Render values for ``config`` and write them to ``path``.

        Args:
            config: Deployment configuration
            path: Destination file

        Returns:
            The written path
        """
        self.console.info("Creating Helm values file...")
        path.parent.mkdir(parents=True, exist_ok=True)
        content = dump_values(build_values(config))
        # Holds the registration token; created owner-only
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        # An existing file keeps its old mode on open
        os.fchmod(fd, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        self.console.ok(f"Helm values file created: {path}")
        return path
