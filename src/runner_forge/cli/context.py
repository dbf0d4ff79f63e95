"""CLI context and dependency container."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import click
import typer
from dotenv import load_dotenv

from runner_forge.cli.deployment.runner_deployer.errors import DeploymentError
from runner_forge.cli.deployment.shell_commands import ShellCommands
from runner_forge.cli.shared.console import CLIConsole, console
from runner_forge.config import RunnerForgeConfig, load_config
from runner_forge.infra.constants import DeploymentConstants


@dataclass(frozen=True)
class CLIContext:
    """Runtime dependencies for CLI commands."""

    console: CLIConsole
    commands: ShellCommands
    constants: DeploymentConstants
    config: RunnerForgeConfig


def build_cli_context(config_path: Path | None = None) -> CLIContext:
    """Build a fresh CLIContext.

    Loads ``.env`` from the working directory (without overriding the real
    environment) before reading the config file, so placeholders in the
    file can refer to values kept in ``.env``.

    Args:
        config_path: Explicit config file, or None to auto-discover

    Raises:
        DeploymentError: If the config file is missing or invalid
    """
    load_dotenv(Path.cwd() / ".env", override=False)

    try:
        config = load_config(config_path)
    except FileNotFoundError as e:
        raise DeploymentError(
            f"Config file not found: {config_path}",
            details=str(e),
        ) from e
    except ValueError as e:
        raise DeploymentError("Invalid configuration", details=str(e)) from e

    return CLIContext(
        console=console,
        commands=ShellCommands(),
        constants=DeploymentConstants(),
        config=config,
    )


def get_cli_context(ctx: typer.Context | None = None) -> CLIContext:
    """Return the CLIContext from Typer, falling back to a new instance."""
    context = ctx or click.get_current_context(silent=True)
    if context and isinstance(context.obj, CLIContext):
        return context.obj
    return build_cli_context()
