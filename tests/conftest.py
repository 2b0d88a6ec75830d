"""Pytest configuration and fixtures for swe_workspace tests.

``FakeSandbox`` stands in for a remote sandbox: responses are scripted per
command prefix (longest prefix wins) and every issued command is recorded.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

import pytest

from swe_workspace.config import Settings
from swe_workspace.models.repository import TargetRepository
from swe_workspace.models.sandbox import ExecResult
from swe_workspace.providers.sandbox.base import SandboxError
from swe_workspace.workspace.identity import GitIdentity

TOKEN = "ghs_s3cr3t:t0k@en"

Response = Union[ExecResult, BaseException]


def ok(output: str = "") -> ExecResult:
    return ExecResult(exit_code=0, result=output)


def fail(output: str = "", exit_code: int = 1) -> ExecResult:
    return ExecResult(exit_code=exit_code, result=output)


@dataclass(frozen=True)
class Call:
    command: str
    cwd: Optional[str]
    timeout_s: Optional[int]


class FakeSandbox:
    def __init__(self, default: ExecResult | None = None) -> None:
        self.calls: list[Call] = []
        self.default = default or ok()
        self._scripts: dict[str, list[Response]] = {}

    def on(self, prefix: str, *responses: Response) -> "FakeSandbox":
        """Script responses for commands starting with ``prefix``.

        Responses are consumed in order; the last one repeats.
        """
        self._scripts[prefix] = list(responses)
        return self

    def execute_command(
        self,
        command: str,
        cwd: str | None = None,
        env: dict[str, str] | None = None,
        timeout_s: int | None = None,
    ) -> ExecResult:
        self.calls.append(Call(command, cwd, timeout_s))
        matches = [prefix for prefix in self._scripts if command.startswith(prefix)]
        if not matches:
            return self.default
        queue = self._scripts[max(matches, key=len)]
        response = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(response, BaseException):
            raise response
        return response

    @property
    def commands(self) -> list[str]:
        return [call.command for call in self.calls]

    def issued(self, prefix: str) -> list[str]:
        return [command for command in self.commands if command.startswith(prefix)]


class FakeProvider:
    """Sandbox provider whose sandboxes all share one ``FakeSandbox``."""

    def __init__(self, sandbox: FakeSandbox, sandbox_ids: tuple[str, ...] = ("sbx-1",)) -> None:
        self.sandbox = sandbox
        self.sandbox_ids = set(sandbox_ids)

    def create_sandbox(self, name, resources, image=None, env=None, labels=None) -> str:
        sandbox_id = f"{name}-{len(self.sandbox_ids) + 1}"
        self.sandbox_ids.add(sandbox_id)
        return sandbox_id

    def delete_sandbox(self, sandbox_id: str) -> None:
        if sandbox_id not in self.sandbox_ids:
            raise SandboxError(f"Unknown sandbox id: {sandbox_id}")
        self.sandbox_ids.discard(sandbox_id)

    def exec(self, sandbox_id, command, cwd=None, env=None, timeout_s=None) -> ExecResult:
        if sandbox_id not in self.sandbox_ids:
            raise SandboxError(f"Unknown sandbox id: {sandbox_id}")
        return self.sandbox.execute_command(command, cwd=cwd, env=env, timeout_s=timeout_s)


@pytest.fixture
def sandbox() -> FakeSandbox:
    return FakeSandbox()


@pytest.fixture
def target() -> TargetRepository:
    return TargetRepository(owner="acme", repo="widgets", branch="main")


@pytest.fixture
def identity() -> GitIdentity:
    return GitIdentity.for_app("open-swe-dev", TOKEN)


@pytest.fixture
def settings() -> Settings:
    return Settings(app_name="open-swe-dev")
