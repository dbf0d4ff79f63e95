"""GitLab Runner deployment commands.

This module provides commands for installing, inspecting, and removing
a GitLab Runner on Kubernetes, plus offline rendering of its artifacts.
"""

from pathlib import Path
from typing import Annotated, Any

import typer

from runner_forge.cli.context import get_cli_context
from runner_forge.cli.deployment.runner_deployer import DeploymentError, RunnerDeployer
from runner_forge.cli.shared.console import with_error_handling
from runner_forge.config import RunnerForgeConfig, apply_overrides

# ---------------------------------------------------------------------------
# Deployer Factory
# ---------------------------------------------------------------------------


def _get_deployer(
    ctx: typer.Context, overrides: dict[str, Any] | None = None
) -> RunnerDeployer:
    """Get a runner deployer for the current CLI context.

    Args:
        ctx: Typer context carrying the CLIContext
        overrides: Nested config overrides from command-line options

    Returns:
        RunnerDeployer configured from file, environment and options
    """
    cli_ctx = get_cli_context(ctx)
    config: RunnerForgeConfig = cli_ctx.config
    if overrides:
        try:
            config = apply_overrides(config, overrides)
        except ValueError as e:
            raise DeploymentError("Invalid configuration", details=str(e)) from e

    return RunnerDeployer(
        cli_ctx.console,
        config,
        commands=cli_ctx.commands,
        constants=cli_ctx.constants,
    )


NamespaceOption = Annotated[
    str | None,
    typer.Option("--namespace", "-n", help="Kubernetes namespace for the runner"),
]
OutputDirOption = Annotated[
    Path | None,
    typer.Option(
        "--output-dir",
        "-o",
        help="Directory for the values file and sample pipeline (default: cwd)",
        file_okay=False,
    ),
]


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@with_error_handling
def install(
    ctx: typer.Context,
    namespace: NamespaceOption = None,
    gitlab_url: Annotated[
        str | None,
        typer.Option("--gitlab-url", help="GitLab instance URL"),
    ] = None,
    token: Annotated[
        str | None,
        typer.Option(
            "--token",
            envvar="RUNNER_REGISTRATION_TOKEN",
            help="Runner registration token",
            show_default=False,
        ),
    ] = None,
    registry_server: Annotated[
        str | None,
        typer.Option("--registry-server", help="Private registry host"),
    ] = None,
    registry_username: Annotated[
        str | None,
        typer.Option("--registry-username", help="Registry user"),
    ] = None,
    registry_password: Annotated[
        str | None,
        typer.Option(
            "--registry-password",
            envvar="REGISTRY_PASSWORD",
            help="Registry password",
            show_default=False,
        ),
    ] = None,
    chart_version: Annotated[
        str | None,
        typer.Option("--chart-version", help="gitlab-runner chart version"),
    ] = None,
    output_dir: OutputDirOption = None,
    skip_verify: Annotated[
        bool,
        typer.Option("--skip-verify", help="Don't wait for the runner pods"),
    ] = False,
) -> None:
    """Install or upgrade the GitLab Runner on the current cluster.

    This command:
    - Checks kubectl, helm and cluster connectivity
    - Creates the namespace if missing
    - Recreates the registry pull secret
    - Applies the runner's RBAC resources
    - Renders the Helm values file
    - Installs or upgrades the gitlab-runner release
    - Waits for the runner pods and shows their status
    - Writes a sample .gitlab-ci.yml

    Examples:
        runner-forge install --token glrt-XXXX
        runner-forge install -n ci-runners --chart-version 0.60.0
        RUNNER_REGISTRATION_TOKEN=glrt-XXXX runner-forge install --skip-verify
    """
    deployer = _get_deployer(
        ctx,
        {
            "namespace": namespace,
            "output_dir": output_dir,
            "gitlab": {"url": gitlab_url, "registration_token": token},
            "registry": {
                "server": registry_server,
                "username": registry_username,
                "password": registry_password,
            },
            "chart": {"version": chart_version},
        },
    )
    deployer.deploy(skip_verify=skip_verify)


@with_error_handling
def render(
    ctx: typer.Context,
    output_dir: OutputDirOption = None,
    token: Annotated[
        str | None,
        typer.Option(
            "--token",
            envvar="RUNNER_REGISTRATION_TOKEN",
            help="Runner registration token",
            show_default=False,
        ),
    ] = None,
) -> None:
    """Write the Helm values file and sample pipeline without installing.

    Examples:
        runner-forge render
        runner-forge render -o build/
    """
    deployer = _get_deployer(
        ctx,
        {"output_dir": output_dir, "gitlab": {"registration_token": token}},
    )
    deployer.render()


@with_error_handling
def status(ctx: typer.Context, namespace: NamespaceOption = None) -> None:
    """Wait for the runner pods and show pods, logs, services and secrets.

    Examples:
        runner-forge status
        runner-forge status -n ci-runners
    """
    deployer = _get_deployer(ctx, {"namespace": namespace})
    deployer.console.print_header("GitLab Runner Status")
    deployer.show_status()


@with_error_handling
def uninstall(
    ctx: typer.Context,
    namespace: NamespaceOption = None,
    delete_namespace: Annotated[
        bool,
        typer.Option(
            "--delete-namespace",
            help="Also delete the namespace and everything in it",
        ),
    ] = False,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Skip confirmation prompt"),
    ] = False,
) -> None:
    """Uninstall the GitLab Runner release.

    Examples:
        runner-forge uninstall
        runner-forge uninstall --delete-namespace -y
    """
    deployer = _get_deployer(ctx, {"namespace": namespace})
    config = deployer.config

    details = f"This will:\n  • Uninstall Helm release '{config.chart.release_name}'"
    if delete_namespace:
        details += f"\n  • Delete namespace '{config.namespace}' and all resources"

    if not deployer.console.confirm_action(
        "Remove GitLab Runner", details, force=yes
    ):
        deployer.console.print("[dim]Operation cancelled[/dim]")
        raise typer.Exit(0)

    deployer.teardown(delete_namespace=delete_namespace)
