"""Sample pipeline generation and post-install instructions."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml  # type: ignore[import-untyped]
from rich.panel import Panel

if TYPE_CHECKING:
    from runner_forge.cli.shared.console import CLIConsole
    from runner_forge.config import RunnerForgeConfig

SAMPLE_PIPELINE_HEADER = (
    "# Sample GitLab CI/CD Pipeline\n"
    "# Place this file as .gitlab-ci.yml in your repository root\n\n"
)

KANIKO_IMAGE = "gcr.io/kaniko-project/executor:debug"


def build_sample_pipeline(config: RunnerForgeConfig) -> dict[str, Any]:
    """Build a build/test/package pipeline that pushes to the registry.

    CI variables (``$CI_PROJECT_NAME`` and friends) are left for GitLab to
    expand at job time.

    Args:
        config: Deployment configuration (job image and registry)

    Returns:
        Pipeline mapping in .gitlab-ci.yml key order
    """
    auth_json = (
        'echo "{\\"auths\\":{\\"$HARBOR_REGISTRY\\":{\\"auth\\":'
        '\\"$(echo -n $HARBOR_USERNAME:$HARBOR_PASSWORD | base64)\\"}}}" '
        "> /kaniko/.docker/config.json"
    )
    return {
        "image": config.runner.job.image,
        "stages": ["build", "test", "package"],
        "variables": {
            "HARBOR_REGISTRY": config.registry.server,
            "HARBOR_PROJECT": config.registry.project,
            "IMAGE_NAME": "$HARBOR_REGISTRY/$HARBOR_PROJECT/$CI_PROJECT_NAME",
            "IMAGE_TAG": "$CI_COMMIT_SHORT_SHA",
        },
        "before_script": ["apt-get update -qq"],
        "build": {
            "stage": "build",
            "script": [
                'echo "Building application..."',
                "apt-get install -y build-essential",
                'echo "Build completed successfully!"',
            ],
            "artifacts": {"paths": ["build/"], "expire_in": "1 hour"},
        },
        "test": {
            "stage": "test",
            "script": [
                'echo "Running tests..."',
                "apt-get install -y curl",
                'echo "Tests passed!"',
            ],
        },
        "package": {
            "stage": "package",
            "image": {"name": KANIKO_IMAGE, "entrypoint": [""]},
            "script": [
                'echo "Building Docker image with Kaniko..."',
                "mkdir -p /kaniko/.docker",
                auth_json,
                " ".join(
                    [
                        "/kaniko/executor",
                        "--context $CI_PROJECT_DIR",
                        "--dockerfile $CI_PROJECT_DIR/Dockerfile",
                        "--destination $IMAGE_NAME:$IMAGE_TAG",
                        "--destination $IMAGE_NAME:latest",
                        "--cache=true",
                        "--cache-repo=$HARBOR_REGISTRY/cache/$CI_PROJECT_NAME",
                    ]
                ),
            ],
            "only": ["main", "develop"],
        },
    }


def render_sample_pipeline(config: RunnerForgeConfig) -> str:
    return SAMPLE_PIPELINE_HEADER + yaml.safe_dump(
        build_sample_pipeline(config),
        default_flow_style=False,
        sort_keys=False,
        width=200,
    )


class ArtifactWriter:
    """Writes the sample pipeline and prints next steps."""

    def __init__(self, console: CLIConsole) -> None:
        self.console = console

    def write_sample_pipeline(self, config: RunnerForgeConfig, path: Path) -> Path:
        """Write the sample .gitlab-ci.yml to ``path``."""
        self.console.info("Creating sample GitLab CI/CD pipeline...")
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(render_sample_pipeline(config))
        self.console.ok(f"Sample pipeline created: {path}")
        return path

    def print_instructions(self, config: RunnerForgeConfig, pipeline_file: Path) -> None:
        """Print the post-installation checklist."""
        ns = config.namespace
        selector = config.verify.label_selector
        port = config.runner.manager.metrics_port
        steps = [
            "[bold]1. Verify runner registration in GitLab:[/bold]\n"
            f"   - Go to: {config.gitlab.url} (your project/group)\n"
            "   - Navigate to: Settings > CI/CD > Runners\n"
            "   - You should see your runner listed",
            "[bold]2. Create a sample repository and add the pipeline:[/bold]\n"
            f"   - Copy {pipeline_file.name} to your repository as .gitlab-ci.yml\n"
            "   - Commit and push to trigger the pipeline",
            "[bold]3. Monitor runner logs:[/bold]\n"
            f"   [cyan]kubectl logs -n {ns} -l {selector} -f[/cyan]",
            "[bold]4. Check runner status:[/bold]\n"
            f"   [cyan]kubectl get pods -n {ns}[/cyan]",
            "[bold]5. Access runner metrics (if Prometheus is configured):[/bold]\n"
            f"   [cyan]kubectl port-forward -n {ns} "
            f"svc/{config.chart.release_name}-metrics {port}:{port}[/cyan]",
        ]

        self.console.print()
        self.console.print(
            Panel(
                "\n\n".join(steps),
                title="[bold green]GitLab Runner Installation Complete![/bold green]",
                subtitle="Next steps",
                border_style="green",
            )
        )
