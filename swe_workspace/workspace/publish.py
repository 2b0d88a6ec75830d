"""Commit, push and sync helpers for a sandbox checkout.

Every helper here is a soft operation: git failures and sandbox transport
errors are logged and reported through the return value, never raised.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging

from swe_workspace.models.sandbox import ExecResult
from swe_workspace.providers.sandbox.base import CommandExecutor
from swe_workspace.workspace.branch import checkout_branch
from swe_workspace.workspace.redact import redact_secrets

log = logging.getLogger("swe_workspace.publish")

DEFAULT_TIMEOUT_S = 60
PUSH_CURRENT_BRANCH_COMMAND = "git push -u origin $(git rev-parse --abbrev-ref HEAD)"


@dataclass(frozen=True)
class PublishResult:
    commit: ExecResult | None = None
    push: ExecResult | None = None

    @property
    def committed(self) -> bool:
        return self.commit is not None

    @property
    def pushed(self) -> bool:
        return self.push is not None

    def __bool__(self) -> bool:
        return self.committed and self.pushed


def _double_quoted(value: str) -> str:
    for char in ("\\", '"', "$", "`"):
        value = value.replace(char, f"\\{char}")
    return f'"{value}"'


def _run_soft(
    sandbox: CommandExecutor,
    command: str,
    repo_dir: str,
    timeout_s: int,
    failure: str,
) -> ExecResult | None:
    try:
        result = sandbox.execute_command(command, cwd=repo_dir, timeout_s=timeout_s)
    except Exception:
        log.error("%s in %s", failure, repo_dir, exc_info=True)
        return None
    if not result.ok:
        log.error(
            "%s in %s (exit %s): %s",
            failure,
            repo_dir,
            result.exit_code,
            redact_secrets(result.result).strip(),
        )
        return None
    return result


def commit_all(
    sandbox: CommandExecutor,
    repo_dir: str,
    message: str,
    timeout_s: int = DEFAULT_TIMEOUT_S,
) -> ExecResult | None:
    """Stage everything and commit; ``None`` when there was nothing to commit or git failed."""
    return _run_soft(
        sandbox,
        f"git add -A && git commit -m {_double_quoted(message)}",
        repo_dir,
        timeout_s,
        "Failed to commit all changes to git repository",
    )


def commit_all_and_push(
    sandbox: CommandExecutor,
    repo_dir: str,
    message: str,
    timeout_s: int = DEFAULT_TIMEOUT_S,
) -> PublishResult:
    commit = commit_all(sandbox, repo_dir, message, timeout_s=timeout_s)
    if commit is None:
        return PublishResult()

    log.info("Committed changes to git repository successfully. Now pushing...")
    push = _run_soft(
        sandbox,
        PUSH_CURRENT_BRANCH_COMMAND,
        repo_dir,
        timeout_s,
        "Failed to push changes to git repository",
    )
    return PublishResult(commit=commit, push=push)


def pull_latest_changes(
    sandbox: CommandExecutor,
    repo_dir: str,
    timeout_s: int = DEFAULT_TIMEOUT_S,
) -> ExecResult | None:
    return _run_soft(
        sandbox, "git pull", repo_dir, timeout_s, "Failed to pull latest changes"
    )


def stash_and_clear_changes(
    sandbox: CommandExecutor,
    repo_dir: str,
    timeout_s: int = DEFAULT_TIMEOUT_S,
) -> ExecResult | None:
    return _run_soft(
        sandbox,
        "git add -A && git stash && git reset --hard",
        repo_dir,
        timeout_s,
        "Failed to stash and clear changes",
    )


def get_changed_files_status(
    sandbox: CommandExecutor,
    repo_dir: str,
    timeout_s: int = DEFAULT_TIMEOUT_S,
) -> list[str]:
    result = _run_soft(
        sandbox,
        "git status --porcelain",
        repo_dir,
        timeout_s,
        "Failed to get changed files status",
    )
    if result is None:
        return []
    return [line.strip() for line in result.result.splitlines() if line.strip()]


def checkout_branch_and_commit(
    sandbox: CommandExecutor,
    repo_dir: str,
    branch: str,
    message: str = "Apply patch",
    timeout_s: int = DEFAULT_TIMEOUT_S,
) -> PublishResult:
    log.info("Checking out branch and committing changes...")
    if checkout_branch(sandbox, repo_dir, branch, timeout_s=timeout_s) is None:
        log.warning("Committing on the current branch; checkout of '%s' failed", branch)

    log.info("Committing changes to branch %s", branch)
    outcome = commit_all_and_push(sandbox, repo_dir, message, timeout_s=timeout_s)
    if outcome:
        log.info("Successfully checked out & committed changes.")
    return outcome
