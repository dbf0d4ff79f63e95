"""Tests for the runner-forge command-line interface."""

from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from runner_forge.cli import app
from runner_forge.cli.deployment.runner_deployer.errors import DeploymentError

DEPLOYER = "runner_forge.cli.commands.runner.RunnerDeployer"


@pytest.fixture
def cli_runner():
    return CliRunner()


@pytest.fixture(autouse=True)
def _in_tmp(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)


def _config(mock_deployer_cls):
    return mock_deployer_cls.call_args[0][1]


class TestInstallCommand:
    """Tests for `runner-forge install`."""

    def test_options_override_defaults(self, cli_runner, tmp_path):
        with patch(DEPLOYER) as mock_cls:
            result = cli_runner.invoke(
                app,
                [
                    "install",
                    "-n",
                    "ci-runners",
                    "--token",
                    "glrt-cli",
                    "--gitlab-url",
                    "https://gitlab.example.com/",
                    "--registry-server",
                    "harbor.example.com",
                    "--chart-version",
                    "0.61.0",
                    "-o",
                    str(tmp_path / "out"),
                    "--skip-verify",
                ],
            )

        assert result.exit_code == 0, result.output
        config = _config(mock_cls)
        assert config.namespace == "ci-runners"
        assert config.gitlab.registration_token == "glrt-cli"
        assert config.gitlab.url == "https://gitlab.example.com/"
        assert config.registry.server == "harbor.example.com"
        assert config.registry.username == "admin"
        assert config.chart.version == "0.61.0"
        assert config.output_dir == tmp_path / "out"
        mock_cls.return_value.deploy.assert_called_once_with(skip_verify=True)

    def test_token_from_environment(self, cli_runner):
        with patch(DEPLOYER) as mock_cls:
            result = cli_runner.invoke(
                app, ["install"], env={"RUNNER_REGISTRATION_TOKEN": "glrt-env"}
            )

        assert result.exit_code == 0, result.output
        assert _config(mock_cls).gitlab.registration_token == "glrt-env"
        mock_cls.return_value.deploy.assert_called_once_with(skip_verify=False)

    def test_config_file_is_layered_under_options(self, cli_runner, tmp_path):
        path = tmp_path / "custom.yaml"
        path.write_text(
            "config:\n  namespace: from-file\n  registry:\n    server: file.example.com\n"
        )

        with patch(DEPLOYER) as mock_cls:
            result = cli_runner.invoke(
                app, ["--config", str(path), "install", "--registry-server", "cli.example.com"]
            )

        assert result.exit_code == 0, result.output
        config = _config(mock_cls)
        assert config.namespace == "from-file"
        assert config.registry.server == "cli.example.com"

    def test_deployment_error_exits_1(self, cli_runner):
        with patch(DEPLOYER) as mock_cls:
            mock_cls.return_value.deploy.side_effect = DeploymentError(
                "RUNNER_REGISTRATION_TOKEN is not set!"
            )
            result = cli_runner.invoke(app, ["install"])

        assert result.exit_code == 1
        assert "RUNNER_REGISTRATION_TOKEN is not set!" in result.output

    def test_missing_token_fails_before_cluster_calls(self, cli_runner):
        with patch(
            "runner_forge.cli.context.ShellCommands"
        ) as mock_commands_cls:
            result = cli_runner.invoke(app, ["install"])

        assert result.exit_code == 1
        assert "RUNNER_REGISTRATION_TOKEN is not set!" in result.output
        mock_commands_cls.return_value.tool_available.assert_not_called()


class TestOtherCommands:
    """Tests for render, status and uninstall."""

    def test_render(self, cli_runner, tmp_path):
        result = cli_runner.invoke(
            app, ["render", "-o", str(tmp_path), "--token", "glrt-render"]
        )

        assert result.exit_code == 0, result.output
        values = (tmp_path / "gitlab-runner-values.yaml").read_text()
        assert "glrt-render" in values
        assert (tmp_path / "sample-gitlab-ci.yml").exists()

    def test_status(self, cli_runner):
        with patch(DEPLOYER) as mock_cls:
            result = cli_runner.invoke(app, ["status", "-n", "ci"])

        assert result.exit_code == 0, result.output
        assert _config(mock_cls).namespace == "ci"
        mock_cls.return_value.show_status.assert_called_once()

    def test_uninstall_with_yes(self, cli_runner):
        with patch(DEPLOYER) as mock_cls:
            mock_cls.return_value.console.confirm_action.return_value = True
            result = cli_runner.invoke(app, ["uninstall", "--delete-namespace", "-y"])

        assert result.exit_code == 0, result.output
        deployer = mock_cls.return_value
        assert deployer.console.confirm_action.call_args.kwargs["force"] is True
        deployer.teardown.assert_called_once_with(delete_namespace=True)

    def test_uninstall_declined(self, cli_runner):
        with patch(DEPLOYER) as mock_cls:
            mock_cls.return_value.console.confirm_action.return_value = False
            result = cli_runner.invoke(app, ["uninstall"])

        assert result.exit_code == 0, result.output
        mock_cls.return_value.teardown.assert_not_called()

    def test_invalid_config_file(self, cli_runner, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("namespace: ci\n")

        result = cli_runner.invoke(app, ["--config", str(path), "install"])

        assert result.exit_code == 1
        assert "Invalid configuration" in result.output
