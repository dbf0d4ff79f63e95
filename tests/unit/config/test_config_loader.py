"""Tests for configuration loading and overrides."""

from pathlib import Path

import pytest

from runner_forge.config import RunnerForgeConfig, apply_overrides, load_config
from runner_forge.config.config_utils import substitute_env_vars


class TestSubstituteEnvVars:
    """Tests for ${VAR} placeholder expansion."""

    def test_required_variable(self, monkeypatch):
        monkeypatch.setenv("RF_TOKEN", "glrt-abc")

        assert substitute_env_vars("token: ${RF_TOKEN}") == "token: glrt-abc"

    def test_default_value(self, monkeypatch):
        monkeypatch.delenv("RF_MISSING", raising=False)

        assert substitute_env_vars("ns: ${RF_MISSING:-ci}") == "ns: ci"

    def test_missing_required_variable(self, monkeypatch):
        monkeypatch.delenv("RF_MISSING", raising=False)

        with pytest.raises(ValueError, match="RF_MISSING"):
            substitute_env_vars("${RF_MISSING}")

    def test_custom_error_message(self, monkeypatch):
        monkeypatch.delenv("RF_MISSING", raising=False)

        with pytest.raises(ValueError, match="set the registry password"):
            substitute_env_vars("${RF_MISSING:?set the registry password}")

    def test_comment_lines_are_not_expanded(self, monkeypatch):
        monkeypatch.delenv("VAR", raising=False)
        text = "# set ${VAR} in your shell\n  # or ${VAR:?needed}\nkey: value\n"

        assert substitute_env_vars(text) == text

    def test_values_after_comments_still_expanded(self, monkeypatch):
        monkeypatch.setenv("RF_NS", "ci")

        assert substitute_env_vars("# ns\nnamespace: ${RF_NS}\n") == "# ns\nnamespace: ci\n"

    def test_helm_templates_untouched(self):
        assert substitute_env_vars("{{.Release.Namespace}}") == "{{.Release.Namespace}}"


class TestLoadConfig:
    """Tests for YAML config loading."""

    def test_defaults_without_file(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        config = load_config()

        assert config == RunnerForgeConfig()
        assert config.namespace == "gitlab-runner"
        assert config.chart.version == "0.60.0"
        assert config.gitlab.registration_token == ""

    def test_discovers_file_in_cwd(self, tmp_path, monkeypatch):
        (tmp_path / "runner-forge.yaml").write_text(
            "config:\n  namespace: ci-runners\n"
        )
        monkeypatch.chdir(tmp_path)

        assert load_config().namespace == "ci-runners"

    def test_explicit_file_with_env(self, tmp_path, monkeypatch):
        monkeypatch.setenv("RF_TOKEN", "glrt-from-env")
        path = tmp_path / "custom.yaml"
        path.write_text(
            "config:\n"
            "  gitlab:\n"
            "    url: https://gitlab.example.com/\n"
            "    registration_token: ${RF_TOKEN}\n"
            "  registry:\n"
            "    server: ${RF_REGISTRY:-registry.example.com}\n"
            "  runner:\n"
            "    job:\n"
            "      privileged: true\n"
        )

        config = load_config(path)

        assert config.gitlab.url == "https://gitlab.example.com/"
        assert config.gitlab.registration_token == "glrt-from-env"
        assert config.registry.server == "registry.example.com"
        assert config.runner.job.privileged is True
        assert config.runner.job.image == "ubuntu:22.04"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.yaml")

    def test_missing_config_key(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("namespace: ci\n")

        with pytest.raises(ValueError, match="missing 'config' key"):
            load_config(path)

    def test_empty_config_section_uses_defaults(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("config:\n")

        assert load_config(path) == RunnerForgeConfig()

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("config: [unclosed\n")

        with pytest.raises(ValueError, match="Error parsing YAML"):
            load_config(path)

    def test_invalid_types(self, tmp_path):
        path = tmp_path / "types.yaml"
        path.write_text("config:\n  verify:\n    log_tail: many\n")

        with pytest.raises(ValueError, match="Invalid configuration"):
            load_config(path)


class TestApplyOverrides:
    """Tests for layering CLI options over the loaded config."""

    def test_none_values_keep_file_values(self):
        base = RunnerForgeConfig.model_validate({"namespace": "from-file"})

        result = apply_overrides(
            base, {"namespace": None, "gitlab": {"url": None, "registration_token": None}}
        )

        assert result is base

    def test_nested_override_keeps_siblings(self):
        base = RunnerForgeConfig.model_validate(
            {"registry": {"server": "harbor.example.com", "username": "robot"}}
        )

        result = apply_overrides(base, {"registry": {"password": "s3cret"}})

        assert result.registry.password == "s3cret"
        assert result.registry.server == "harbor.example.com"
        assert result.registry.username == "robot"
        assert base.registry.password == "Harbor12345"

    def test_output_dir_override(self, tmp_path):
        result = apply_overrides(RunnerForgeConfig(), {"output_dir": tmp_path})

        assert result.output_dir == Path(tmp_path)

    def test_invalid_override(self):
        with pytest.raises(ValueError, match="Invalid configuration"):
            apply_overrides(RunnerForgeConfig(), {"verify": {"log_tail": "lots"}})


class TestExampleConfig:
    """The shipped example must load as documented."""

    EXAMPLE = Path(__file__).resolve().parents[3] / "runner-forge.yaml.example"

    def test_example_loads_without_environment(self, tmp_path, monkeypatch):
        monkeypatch.delenv("GITLAB_URL", raising=False)
        (tmp_path / "runner-forge.yaml").write_text(self.EXAMPLE.read_text())
        monkeypatch.chdir(tmp_path)

        config = load_config()

        assert config.gitlab.url == "https://gitlab.com/"
        assert config.gitlab.registration_token == ""
        assert config.registry.password == "Harbor12345"
        assert config.chart.version == "0.60.0"

    def test_example_picks_up_token(self, monkeypatch):
        monkeypatch.setenv("RUNNER_REGISTRATION_TOKEN", "glrt-example")

        assert load_config(self.EXAMPLE).gitlab.registration_token == "glrt-example"
