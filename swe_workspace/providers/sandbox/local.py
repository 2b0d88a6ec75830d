"""Sandboxes backed by per-task directories on the local host."""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path
import shutil
import subprocess
import tempfile
import time
from uuid import uuid4

from swe_workspace.models.sandbox import ExecResult, SandboxResources
from swe_workspace.providers.sandbox.base import SandboxError, SandboxProvider

TIMEOUT_EXIT_CODE = 124


@dataclass(frozen=True)
class _SandboxRecord:
    sandbox_id: str
    root: Path
    env: dict[str, str]


class LocalProvider(SandboxProvider):
    """Runs sandbox commands with ``bash -c`` on the local machine.

    Each sandbox gets its own directory; absolute sandbox paths such as
    ``/home/daytona/widgets`` are mirrored underneath it.
    """

    def __init__(self, base_dir: str | None = None, shell: str = "bash") -> None:
        self._base_dir = Path(base_dir) if base_dir else Path(
            tempfile.mkdtemp(prefix="swe-local-")
        )
        self._shell = shell
        self._sandboxes: dict[str, _SandboxRecord] = {}

    def create_sandbox(
        self,
        name: str,
        resources: SandboxResources,
        image: str | None = None,
        env: dict[str, str] | None = None,
        labels: dict[str, str] | None = None,
    ) -> str:
        sandbox_id = f"{name}-{uuid4().hex[:8]}"
        root = self._base_dir / sandbox_id
        root.mkdir(parents=True, exist_ok=False)
        record = _SandboxRecord(sandbox_id=sandbox_id, root=root, env=dict(env or {}))
        self._sandboxes[sandbox_id] = record
        return sandbox_id

    def delete_sandbox(self, sandbox_id: str) -> None:
        record = self._get_record(sandbox_id)
        shutil.rmtree(record.root, ignore_errors=True)
        self._sandboxes.pop(sandbox_id, None)

    def exec(
        self,
        sandbox_id: str,
        command: str,
        cwd: str | None = None,
        env: dict[str, str] | None = None,
        timeout_s: int | None = None,
    ) -> ExecResult:
        record = self._get_record(sandbox_id)
        workdir = self._resolve_path(sandbox_id, cwd) if cwd else record.root
        workdir.mkdir(parents=True, exist_ok=True)
        start = time.monotonic()
        try:
            process = subprocess.run(
                [self._shell, "-c", command],
                cwd=workdir,
                env=self._merge_env(record.env, env),
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                timeout=timeout_s,
                check=False,
            )
        except subprocess.TimeoutExpired:
            duration_ms = int((time.monotonic() - start) * 1000)
            return ExecResult(
                exit_code=TIMEOUT_EXIT_CODE,
                result=f"Command timed out after {timeout_s}s",
                duration_ms=duration_ms,
            )
        except OSError as exc:
            raise SandboxError(f"Failed to run command in {sandbox_id}: {exc}") from exc
        duration_ms = int((time.monotonic() - start) * 1000)
        return ExecResult(
            exit_code=process.returncode,
            result=process.stdout,
            duration_ms=duration_ms,
        )

    def _get_record(self, sandbox_id: str) -> _SandboxRecord:
        if sandbox_id not in self._sandboxes:
            raise SandboxError(f"Unknown sandbox id: {sandbox_id}")
        return self._sandboxes[sandbox_id]

    def _resolve_path(self, sandbox_id: str, path: str) -> Path:
        root = self._get_record(sandbox_id).root.resolve()
        resolved = (root / path.lstrip("/")).resolve()
        if root != resolved and root not in resolved.parents:
            raise SandboxError(f"Path escapes sandbox: {path}")
        return resolved

    def _merge_env(
        self, sandbox_env: dict[str, str], env: dict[str, str] | None
    ) -> dict[str, str]:
        merged = os.environ.copy()
        merged.update(sandbox_env)
        if env:
            merged.update(env)
        return merged
