"""Put a sandbox working directory on the task branch."""

from __future__ import annotations

import logging

from swe_workspace.models.sandbox import ExecResult
from swe_workspace.providers.sandbox.base import CommandExecutor
from swe_workspace.workspace.redact import redact_secrets

log = logging.getLogger("swe_workspace.branch")

DEFAULT_TIMEOUT_S = 60


def checkout_branch(
    sandbox: CommandExecutor,
    repo_dir: str,
    branch: str,
    timeout_s: int = DEFAULT_TIMEOUT_S,
) -> ExecResult | None:
    """Check out ``branch`` in ``repo_dir``, creating it when it does not exist.

    Returns the checkout result, a synthetic success when the workspace is
    already on ``branch`` (no checkout is issued), or ``None`` on failure.
    Sandbox transport errors are logged and reported as ``None``.
    """

    log.info("Checking out branch '%s' in %s", branch, repo_dir)

    try:
        current = sandbox.execute_command(
            "git branch --show-current", cwd=repo_dir, timeout_s=timeout_s
        )
    except Exception:
        log.error("Failed to get current branch in %s", repo_dir, exc_info=True)
        return None

    if not current.ok:
        log.error(
            "Failed to get current branch in %s (exit %s): %s",
            repo_dir,
            current.exit_code,
            redact_secrets(current.result).strip(),
        )
    elif current.result.strip() == branch:
        log.info("Already on branch '%s'. No checkout needed.", branch)
        return ExecResult(exit_code=0, result=f"Already on branch {branch}")

    try:
        exists = sandbox.execute_command(
            f'git rev-parse --verify --quiet "refs/heads/{branch}"',
            cwd=repo_dir,
            timeout_s=timeout_s,
        )
    except Exception:
        log.error("Error checking if branch '%s' exists", branch, exc_info=True)
        return None

    # Any nonzero exit, including an ambiguous ref, means "create it".
    if exists.ok:
        checkout_command = f'git checkout "{branch}"'
    else:
        checkout_command = f'git checkout -b "{branch}"'

    try:
        result = sandbox.execute_command(
            checkout_command, cwd=repo_dir, timeout_s=timeout_s
        )
    except Exception:
        log.error("Error checking out branch '%s'", branch, exc_info=True)
        return None

    if not result.ok:
        log.error(
            "Failed to checkout branch '%s' (exit %s): %s",
            branch,
            result.exit_code,
            redact_secrets(result.result).strip(),
        )
        return None

    log.info("Checked out branch '%s' successfully.", branch)
    return result
