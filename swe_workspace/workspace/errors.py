"""Errors raised by the workspace lifecycle operations."""

from __future__ import annotations

from typing import Iterable

from swe_workspace.models.sandbox import ExecResult
from swe_workspace.workspace.redact import redact_secrets


class WorkspaceError(RuntimeError):
    pass


class MissingIdentifierError(WorkspaceError, ValueError):
    pass


class MissingRepoNameError(WorkspaceError, ValueError):
    pass


class MissingAppNameError(WorkspaceError, ValueError):
    pass


class CommandError(WorkspaceError):
    """A sandbox command that exited nonzero where failure is not tolerated.

    ``command`` and ``result`` are redacted here, before anything can log them.
    """

    def __init__(
        self,
        command: str,
        result: str,
        exit_code: int,
        secrets: Iterable[str | None] = (),
    ) -> None:
        secrets = tuple(secrets)
        self.command = redact_secrets(command, secrets)
        self.result = redact_secrets(result, secrets)
        self.exit_code = exit_code
        super().__init__(
            f"Command failed with exit code {exit_code}: {self.command}\n"
            f"{self.result.strip()}"
        )

    @classmethod
    def from_result(
        cls,
        command: str,
        result: ExecResult,
        secrets: Iterable[str | None] = (),
    ) -> "CommandError":
        return cls(command, result.result, result.exit_code, secrets)
