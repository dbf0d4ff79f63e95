"""Terminal output for runner-forge.

All user-facing output goes through ``CLIConsole`` so that every pipeline
phase prints the same ``[INFO]`` / ``[WARN]`` / ``[ERROR]`` prefixes the
runner install log is read by.
"""

from collections.abc import Callable
from functools import wraps

import typer
from rich.console import Console, ConsoleRenderable
from rich.markup import escape
from rich.panel import Panel
from rich.status import Status
from rich.text import Text

from runner_forge.cli.deployment.runner_deployer.errors import DeploymentError


class CLIConsole:
    """Rich console wrapper with level-prefixed messages."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def print(self, msg: ConsoleRenderable | str | None = None) -> None:
        if msg is None:
            self.console.print()
        else:
            self.console.print(msg)

    def status(self, status: str) -> Status:
        return self.console.status(status)

    def info(self, msg: str) -> None:
        self.console.print(f"[green]\\[INFO][/green] {msg}")

    def ok(self, msg: str) -> None:
        self.console.print(f"[green]✅[/green] {msg}")

    def warn(self, msg: str) -> None:
        self.console.print(f"[yellow]\\[WARN][/yellow] {msg}")

    def error(self, msg: str) -> None:
        self.console.print(f"[red]\\[ERROR][/red] {msg}")

    def print_header(self, title: str, style: str = "blue") -> None:
        self.console.print(
            Panel.fit(f"[bold {style}]{title}[/bold {style}]", border_style=style)
        )

    def confirm_action(
        self,
        action: str,
        details: str | None = None,
        *,
        force: bool = False,
    ) -> bool:
        """Ask before a destructive operation such as removing the runner.

        Args:
            action: Short title of the operation
            details: What will be removed, shown inside the prompt panel
            force: Answer yes without prompting (``--yes``)

        Returns:
            True only for an explicit "y"/"yes"
        """
        if force:
            return True

        body = f"[bold red]⚠️  {action}[/bold red]"
        if details:
            body += f"\n\n{details}"
        self.console.print(Panel(body, title="Confirmation Required", border_style="red"))

        try:
            answer = self.console.input("\n[bold]Continue?[/bold] \\[y/N]: ")
        except (KeyboardInterrupt, EOFError):
            self.console.print("\n[dim]Cancelled.[/dim]")
            return False
        return answer.strip().lower() in ("y", "yes")

    def handle_error(
        self, message: str, details: str | None = None, exit_code: int = 1
    ) -> None:
        """Print a failure (plus optional details panel) and exit.

        Raises:
            typer.Exit: Always, with ``exit_code``
        """
        self.error(f"[bold red]{escape(message)}[/bold red]")
        if details:
            self.console.print(
                Panel(Text(details), title="Details", border_style="red")
            )
        raise typer.Exit(exit_code)


def with_error_handling(func: Callable[..., None]) -> Callable[..., None]:
    """Map pipeline failures and Ctrl-C to CLI exit codes.

    ``DeploymentError`` exits 1 after printing its details. ``KeyboardInterrupt``
    exits 130. Anything else propagates.
    """

    @wraps(func)
    def wrapper(*args: object, **kwargs: object) -> None:
        try:
            func(*args, **kwargs)
        except DeploymentError as e:
            console.handle_error(e.message, e.details)
        except KeyboardInterrupt:
            console.print("\n[dim]Operation cancelled by user.[/dim]")
            raise typer.Exit(130) from None

    return wrapper


# Shared console instance for consistent output
console = CLIConsole()
