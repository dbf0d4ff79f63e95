"""Interface every runner deployer implements."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from runner_forge.cli.shared.console import CLIConsole


class BaseDeployer(ABC):
    """Install, inspect and remove a runner on some target platform."""

    def __init__(self, console: CLIConsole):
        self.console = console

    @abstractmethod
    def deploy(self, **kwargs: Any) -> None:
        """Install or upgrade the runner, aborting on the first failed step."""

    @abstractmethod
    def teardown(self, **kwargs: Any) -> None:
        """Remove what ``deploy`` installed."""

    @abstractmethod
    def show_status(self) -> None:
        """Report the health of an existing installation."""
