"""Sandbox provider interface."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from swe_workspace.models.sandbox import ExecResult, SandboxResources


class SandboxError(RuntimeError):
    """Raised when a sandbox cannot be reached or does not exist."""


class CommandExecutor(Protocol):
    def execute_command(
        self,
        command: str,
        cwd: str | None = None,
        env: dict[str, str] | None = None,
        timeout_s: int | None = None,
    ) -> ExecResult:
        ...


class SandboxProvider(Protocol):
    def create_sandbox(
        self,
        name: str,
        resources: SandboxResources,
        image: str | None = None,
        env: dict[str, str] | None = None,
        labels: dict[str, str] | None = None,
    ) -> str:
        ...

    def delete_sandbox(self, sandbox_id: str) -> None:
        ...

    def exec(
        self,
        sandbox_id: str,
        command: str,
        cwd: str | None = None,
        env: dict[str, str] | None = None,
        timeout_s: int | None = None,
    ) -> ExecResult:
        ...


@dataclass(frozen=True)
class SandboxHandle:
    """A single sandbox of a provider, usable as a ``CommandExecutor``."""

    provider: SandboxProvider
    sandbox_id: str

    def execute_command(
        self,
        command: str,
        cwd: str | None = None,
        env: dict[str, str] | None = None,
        timeout_s: int | None = None,
    ) -> ExecResult:
        return self.provider.exec(
            self.sandbox_id, command, cwd=cwd, env=env, timeout_s=timeout_s
        )
