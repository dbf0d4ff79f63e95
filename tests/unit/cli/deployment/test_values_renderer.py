"""Tests for Helm values rendering."""

import os
import stat
from unittest.mock import MagicMock, patch

import yaml

from runner_forge.cli.deployment.runner_deployer.values_renderer import (
    VALUES_HEADER,
    ValuesRenderer,
    build_values,
    dump_values,
    render_runner_toml,
)
from runner_forge.config import RunnerForgeConfig


class TestRunnerToml:
    """Tests for the embedded config.toml fragment."""

    def test_kubernetes_executor_settings(self, config):
        toml = render_runner_toml(config)

        assert toml.startswith("[[runners]]\n  [runners.kubernetes]\n")
        assert '    namespace = "{{.Release.Namespace}}"' in toml
        assert '    image = "ubuntu:22.04"' in toml
        assert "    privileged = false" in toml
        assert '    image_pull_secrets = ["harbor-registry-secret"]' in toml
        assert '    service_account = "gitlab-runner"' in toml
        assert "    poll_interval = 3" in toml

    def test_cache_volume(self, config):
        toml = render_runner_toml(config)

        assert "    [[runners.kubernetes.volumes.empty_dir]]" in toml
        assert '      name = "build-cache"' in toml
        assert '      mount_path = "/cache"' in toml
        assert '      medium = "Memory"' in toml

    def test_privileged_override(self):
        config = RunnerForgeConfig.model_validate({"runner": {"job": {"privileged": True}}})

        assert "    privileged = true" in render_runner_toml(config)


class TestBuildValues:
    """Tests for the values mapping."""

    def test_core_keys(self, config):
        values = build_values(config)

        assert values["gitlabUrl"] == "https://gitlab.com/"
        assert values["runnerRegistrationToken"] == "glrt-test-token"
        assert values["concurrent"] == 10
        assert values["checkInterval"] == 3
        assert values["rbac"] == {"create": False, "serviceAccountName": "gitlab-runner"}
        assert values["resources"]["limits"] == {"memory": "256Mi", "cpu": "200m"}
        assert values["resources"]["requests"] == {"memory": "128Mi", "cpu": "100m"}

    def test_security_and_metrics(self, config):
        values = build_values(config)

        assert values["securityContext"] == {
            "runAsNonRoot": True,
            "runAsUser": 100,
            "fsGroup": 65533,
        }
        assert values["podAnnotations"]["prometheus.io/port"] == "9252"
        assert values["metrics"]["port"] == 9252

    def test_anti_affinity_targets_release(self, config):
        term = build_values(config)["affinity"]["podAntiAffinity"][
            "preferredDuringSchedulingIgnoredDuringExecution"
        ][0]

        assert term["weight"] == 100
        expr = term["podAffinityTerm"]["labelSelector"]["matchExpressions"][0]
        assert expr["values"] == ["gitlab-runner"]


class TestDumpValues:
    """Tests for YAML serialization of the values."""

    def test_round_trips_and_uses_literal_block(self, config):
        text = dump_values(build_values(config))

        assert text.startswith(VALUES_HEADER)
        assert "config: |" in text
        loaded = yaml.safe_load(text)
        assert loaded["runners"]["config"] == render_runner_toml(config)

    def test_keeps_key_order(self, config):
        text = dump_values(build_values(config))

        assert text.index("gitlabUrl") < text.index("runnerRegistrationToken")
        assert text.index("runners:") < text.index("affinity:")


class TestValuesRenderer:
    """Tests for writing the values file."""

    def test_writes_owner_only_file(self, config, tmp_path):
        path = tmp_path / "out" / "gitlab-runner-values.yaml"

        written = ValuesRenderer(MagicMock()).write(config, path)

        assert written == path
        assert yaml.safe_load(path.read_text())["gitlabUrl"] == "https://gitlab.com/"
        assert stat.S_IMODE(path.stat().st_mode) == 0o600

    def test_overwrites_existing_file(self, config, tmp_path):
        path = tmp_path / "gitlab-runner-values.yaml"
        path.write_text("stale: true\n")

        ValuesRenderer(MagicMock()).write(config, path)

        assert "stale" not in path.read_text()

    def test_existing_world_readable_file_is_tightened(self, config, tmp_path):
        path = tmp_path / "gitlab-runner-values.yaml"
        path.write_text("old: true\n")
        path.chmod(0o644)

        ValuesRenderer(MagicMock()).write(config, path)

        assert stat.S_IMODE(path.stat().st_mode) == 0o600

    def test_file_is_created_owner_only(self, config, tmp_path):
        path = tmp_path / "gitlab-runner-values.yaml"

        with patch(
            "runner_forge.cli.deployment.runner_deployer.values_renderer.os.open",
            wraps=os.open,
        ) as mock_open:
            ValuesRenderer(MagicMock()).write(config, path)

        assert mock_open.call_args[0][0] == path
        assert mock_open.call_args[0][2] == 0o600
