"""Main CLI application module.

This module provides the main entry point for the runner-forge CLI, which
installs a GitLab Runner onto Kubernetes via kubectl and Helm.

Commands:
- install: Install or upgrade the runner
- render: Write the values file and sample pipeline only
- status: Show the runner's pods, logs, services and secrets
- uninstall: Remove the runner release
"""

import sys
from pathlib import Path
from typing import Annotated

import typer
from loguru import logger

from .commands import install, render, status, uninstall
from .context import build_cli_context
from .deployment.runner_deployer.errors import DeploymentError
from .shared.console import console

app = typer.Typer(
    help="🏃 runner-forge - GitLab Runner deployment for Kubernetes",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


def configure_logging(verbose: bool) -> None:
    """Route loguru output to stderr at the requested verbosity."""
    logger.remove()
    logger.add(
        sys.stderr,
        level="DEBUG" if verbose else "WARNING",
        format="<dim>{time:HH:mm:ss}</dim> <level>{level: <8}</level> {message}",
    )


@app.callback()
def main_callback(
    ctx: typer.Context,
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to a runner-forge.yaml config file",
            exists=True,
            dir_okay=False,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log every external command"),
    ] = False,
) -> None:
    """Load configuration shared by every command."""
    configure_logging(verbose)
    try:
        ctx.obj = build_cli_context(config)
    except DeploymentError as e:
        console.handle_error(e.message, e.details)


app.command()(install)
app.command()(render)
app.command()(status)
app.command()(uninstall)


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
