"""Plain records returned by the kubectl and helm wrappers."""

from __future__ import annotations

from dataclasses import dataclass

__all__ = [
    "CommandResult",
    "HelmRelease",
    "PodInfo",
    "ServiceInfo",
    "SecretInfo",
]


@dataclass
class CommandResult:
    """Outcome of one external command. Never raised, only inspected."""

    success: bool
    stdout: str = ""
    stderr: str = ""
    returncode: int = 0


@dataclass
class HelmRelease:
    """One row of `helm list -o json`.

    `revision` is kept as text; helm reports it as a number.
    """

    name: str
    namespace: str
    status: str
    revision: str
    chart: str = ""


@dataclass
class PodInfo:
    """Runner pod summary for the status table."""

    name: str
    status: str
    ready: str = "0/0"
    restarts: int = 0
    node: str = ""


@dataclass
class ServiceInfo:
    """Service summary; `ports` is e.g. "9252/TCP"."""

    name: str
    type: str
    cluster_ip: str
    ports: str = ""


@dataclass
class SecretInfo:
    """Secret name, type and key count. Values are never read."""

    name: str
    type: str
    data_keys: int = 0
