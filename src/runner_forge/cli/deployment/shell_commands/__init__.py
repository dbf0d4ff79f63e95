"""Shell command abstractions for Kubernetes/Helm deployment operations.

This package provides a clean, well-documented interface for the external
tools the runner deployment drives. It is organized into specialized
modules for each tool:

- helm: Helm repository and release management
- kubectl: Kubernetes resource management

Usage:
    from runner_forge.cli.deployment.shell_commands import ShellCommands

    commands = ShellCommands()
    if commands.kubectl.namespace_exists("gitlab-runner"):
        print("Namespace already there")
"""

from pathlib import Path

from .helm import HelmCommands
from .kubectl import KubectlCommands
from .runner import CommandRunner, redact_command
from .types import CommandResult, HelmRelease, PodInfo, SecretInfo, ServiceInfo


class ShellCommands:
    """Unified interface for all shell command operations.

    This class provides a facade over the specialized command modules,
    offering a single point of access for deployment operations while
    maintaining separation of concerns internally.

    Attributes:
        helm: Helm-related commands
        kubectl: Kubernetes kubectl commands

    Example:
        >>> commands = ShellCommands()
        >>> if commands.tool_available("helm"):
        ...     commands.helm.repo_update()
    """

    def __init__(self, working_dir: Path | None = None) -> None:
        """Initialize the shell commands executor.

        Args:
            working_dir: Directory commands are executed from
                         (defaults to the current working directory).
        """
        self._runner = CommandRunner(working_dir)

        self.helm = HelmCommands(self._runner)
        self.kubectl = KubectlCommands(self._runner)

    def tool_available(self, tool: str) -> bool:
        """Check whether an executable is on PATH."""
        return self._runner.which(tool) is not None


__all__ = [
    "ShellCommands",
    "CommandResult",
    "HelmRelease",
    "PodInfo",
    "ServiceInfo",
    "SecretInfo",
    # Specialized command classes for direct usage
    "HelmCommands",
    "KubectlCommands",
    "CommandRunner",
    "redact_command",
]
