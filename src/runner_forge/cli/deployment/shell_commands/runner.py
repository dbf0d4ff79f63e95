"""Subprocess execution for kubectl and helm.

Every external call made by the deployment pipeline goes through
``CommandRunner`` so that results, logging and secret redaction are uniform.
"""

from __future__ import annotations

import shutil
import subprocess
from collections.abc import Callable, Sequence
from pathlib import Path

from loguru import logger

from .types import CommandResult

# Arguments whose values must never reach the logs
_SENSITIVE_FLAGS: tuple[str, ...] = ("--docker-password=", "--password=")
_REDACTED = "********"


def redact_command(cmd: Sequence[str]) -> str:
    """Join ``cmd`` into a printable line with password values masked."""
    parts = []
    for arg in cmd:
        for flag in _SENSITIVE_FLAGS:
            if arg.startswith(flag):
                arg = f"{flag}{_REDACTED}"
                break
        parts.append(arg)
    return " ".join(parts)


class CommandRunner:
    """Runs external tools and wraps their outcome in ``CommandResult``.

    A non-zero exit never raises here. Callers decide whether a failure
    aborts the pipeline (see ``raise_for_result``).
    """

    def __init__(self, working_dir: Path | None = None) -> None:
        """
        Args:
            working_dir: Default cwd for commands (None means the process cwd)
        """
        self.working_dir = working_dir

    def which(self, tool: str) -> str | None:
        return shutil.which(tool)

    def run(
        self,
        cmd: Sequence[str],
        *,
        cwd: Path | None = None,
        capture_output: bool = True,
        input_data: str | None = None,
    ) -> CommandResult:
        """Run ``cmd`` to completion.

        Output is decoded as UTF-8; undecodable bytes (binary log lines)
        become U+FFFD instead of raising.

        Args:
            cmd: Program and arguments
            cwd: Overrides ``working_dir`` for this call
            capture_output: False lets the tool write straight to the terminal
                (used for ``kubectl wait`` progress)
            input_data: Text piped to stdin, e.g. a manifest for ``apply -f -``

        Returns:
            The result; a missing executable yields returncode 127
        """
        logger.debug(f"Running: {redact_command(cmd)}")
        try:
            completed = subprocess.run(
                list(cmd),
                cwd=cwd or self.working_dir,
                capture_output=capture_output,
                text=True,
                encoding="utf-8",
                errors="replace",
                input=input_data,
                check=False,
            )
        except FileNotFoundError as e:
            logger.debug(f"Executable not found: {cmd[0]}")
            return CommandResult(success=False, stderr=str(e), returncode=127)

        if completed.returncode:
            logger.debug(f"{cmd[0]} exited with code {completed.returncode}")
        return CommandResult(
            success=completed.returncode == 0,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
            returncode=completed.returncode,
        )

    def run_streaming(
        self,
        cmd: Sequence[str],
        *,
        cwd: Path | None = None,
        on_output: Callable[[str], None] | None = None,
    ) -> CommandResult:
        """Run ``cmd`` and hand each non-empty output line to ``on_output``.

        stderr is merged into stdout, so on failure the collected output is
        also exposed as ``stderr`` for error reporting.
        """
        logger.debug(f"Running (streaming): {redact_command(cmd)}")

        try:
            proc = subprocess.Popen(
                list(cmd),
                cwd=cwd or self.working_dir,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                encoding="utf-8",
                errors="replace",
                bufsize=1,
            )
        except FileNotFoundError as e:
            return CommandResult(success=False, stderr=str(e), returncode=127)

        collected: list[str] = []
        if proc.stdout:
            for raw in iter(proc.stdout.readline, ""):
                text = raw.rstrip("\n")
                if not text:
                    continue
                collected.append(text)
                if on_output:
                    on_output(text)
        proc.wait()

        code = proc.returncode or 0
        output = "\n".join(collected)
        return CommandResult(
            success=code == 0,
            stdout=output,
            stderr=output if code else "",
            returncode=code,
        )
