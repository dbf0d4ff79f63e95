"""Deployment error type shared by every pipeline phase."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..shell_commands import CommandResult


class DeploymentError(Exception):
    """Raised when a deployment operation fails."""

    def __init__(self, message: str, details: str | None = None):
        self.message = message
        self.details = details
        super().__init__(message)


def raise_for_result(
    result: CommandResult,
    message: str,
    recovery: str | None = None,
) -> None:
    """Abort the pipeline when an external command did not succeed.

    Args:
        result: Result of the external command
        message: Headline for the error
        recovery: Optional recovery hint appended to the details

    Raises:
        DeploymentError: If the command exited non-zero
    """
    if result.success:
        return

    output = (result.stderr or result.stdout).strip()
    details = [f"Exit code: {result.returncode}"]
    if output:
        details.append(f"\n{output}")
    if recovery:
        details.append(f"\n{recovery}")
    raise DeploymentError(message, details="\n".join(details))
