"""Data models for sandbox interactions."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SandboxResources:
    vcpu: int
    memory_gib: int
    disk_gib: int


@dataclass(frozen=True)
class ExecResult:
    """Outcome of one command run inside a sandbox.

    ``result`` holds the combined stdout/stderr text. Any nonzero
    ``exit_code`` is a failure; nothing else is inferred from its value.
    """

    exit_code: int
    result: str
    duration_ms: int = 0

    @property
    def ok(self) -> bool:
        return self.exit_code == 0
