"""Shared fixtures for runner-forge tests."""

from unittest.mock import MagicMock

import pytest

from runner_forge.config import RunnerForgeConfig


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch):
    """Keep host credentials from leaking into config and CLI options."""
    monkeypatch.delenv("RUNNER_REGISTRATION_TOKEN", raising=False)
    monkeypatch.delenv("REGISTRY_PASSWORD", raising=False)


@pytest.fixture
def mock_commands():
    """Create a mock shell commands instance."""
    commands = MagicMock()
    commands.kubectl = MagicMock()
    commands.helm = MagicMock()
    return commands


@pytest.fixture
def mock_console():
    """Create a mock CLI console."""
    return MagicMock()


@pytest.fixture
def config(tmp_path):
    """Default config with a token and a temporary output directory."""
    return RunnerForgeConfig.model_validate(
        {
            "gitlab": {"registration_token": "glrt-test-token"},
            "output_dir": tmp_path,
        }
    )
