"""CLI command modules.

Commands:
- install: Install or upgrade the runner
- render: Write the values file and sample pipeline only
- status: Show runner pods, logs, services and secrets
- uninstall: Remove the runner release
"""

from .runner import install, render, status, uninstall

__all__ = ["install", "render", "status", "uninstall"]
