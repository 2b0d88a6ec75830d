"""Clone a target repository into a sandbox.

Three outcomes are handled:

* the requested branch exists upstream and is cloned directly;
* the branch is missing upstream, so the default branch is cloned and the
  branch is created locally;
* a base commit is pinned, so it is checked out after either clone.

Whether the branch exists is decided with ``git ls-remote`` before cloning.
Only when that probe is inconclusive does a failed ``git clone -b`` get
classified by its output, through a ``MissingBranchDetector``.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable

from swe_workspace.models.repository import TargetRepository
from swe_workspace.models.sandbox import ExecResult
from swe_workspace.providers.sandbox.base import CommandExecutor
from swe_workspace.workspace.errors import CommandError
from swe_workspace.workspace.identity import authenticated_remote_url
from swe_workspace.workspace.paths import (
    DEFAULT_SANDBOX_ROOT,
    repo_absolute_path,
    require_target,
)
from swe_workspace.workspace.redact import redact_secrets

log = logging.getLogger("swe_workspace.clone")

DEFAULT_CLONE_TIMEOUT_S = 300
DEFAULT_TIMEOUT_S = 60

# git: "warning: Could not find remote branch foo to clone." /
#      "fatal: Remote branch foo not found in upstream origin"
MISSING_BRANCH_PHRASES = ("not found in upstream", "could not find remote branch")

# ls-remote --exit-code exits 2 when no matching ref exists.
LS_REMOTE_NO_MATCH = 2

MissingBranchDetector = Callable[[ExecResult], bool]


def output_reports_missing_branch(result: ExecResult) -> bool:
    text = result.result.lower()
    return any(phrase in text for phrase in MISSING_BRANCH_PHRASES)


def remote_branch_exists(
    sandbox: CommandExecutor,
    url: str,
    branch: str,
    cwd: str,
    timeout_s: int = DEFAULT_TIMEOUT_S,
    secrets: Iterable[str | None] = (),
) -> bool | None:
    """Return whether ``branch`` exists on the remote, or ``None`` if unknown."""
    command = f'git ls-remote --exit-code --heads {url} "{branch}"'
    try:
        result = sandbox.execute_command(command, cwd=cwd, timeout_s=timeout_s)
    except Exception:
        log.warning(
            "Could not list remote branches: %s",
            redact_secrets(command, secrets),
            exc_info=True,
        )
        return None
    if result.ok:
        return True
    if result.exit_code == LS_REMOTE_NO_MATCH:
        return False
    log.warning(
        "Remote branch lookup was inconclusive (exit %s): %s",
        result.exit_code,
        redact_secrets(result.result, secrets).strip(),
    )
    return None


def repository_is_cloned(
    sandbox: CommandExecutor,
    repo_dir: str,
    timeout_s: int = DEFAULT_TIMEOUT_S,
) -> bool:
    """Whether ``repo_dir`` is the top of a git checkout.

    ``--git-dir`` prints ``.git`` only at the top of a work tree, so a directory
    nested inside some other repository does not count.
    """
    try:
        result = sandbox.execute_command(
            "git rev-parse --git-dir", cwd=repo_dir, timeout_s=timeout_s
        )
    except Exception:
        log.warning("Could not inspect %s, assuming it is not cloned", repo_dir, exc_info=True)
        return False
    return result.ok and result.result.strip() == ".git"


def _run(
    sandbox: CommandExecutor,
    command: str,
    cwd: str,
    timeout_s: int,
    secrets: tuple[str, ...],
) -> ExecResult:
    try:
        return sandbox.execute_command(command, cwd=cwd, timeout_s=timeout_s)
    except Exception:
        log.error(
            "Sandbox failed to run: %s",
            redact_secrets(command, secrets),
            exc_info=True,
        )
        raise


def _run_or_raise(
    sandbox: CommandExecutor,
    command: str,
    cwd: str,
    timeout_s: int,
    secrets: tuple[str, ...],
) -> ExecResult:
    result = _run(sandbox, command, cwd, timeout_s, secrets)
    if not result.ok:
        error = CommandError.from_result(command, result, secrets)
        log.error(
            "Command failed (exit %s): %s\n%s",
            error.exit_code,
            error.command,
            error.result.strip(),
        )
        raise error
    return result


def clone_repo(
    sandbox: CommandExecutor,
    target: TargetRepository,
    token: str,
    branch: str | None = None,
    host: str = "github.com",
    root: str = DEFAULT_SANDBOX_ROOT,
    timeout_s: int = DEFAULT_CLONE_TIMEOUT_S,
    checkout_timeout_s: int = DEFAULT_TIMEOUT_S,
    detect_missing_branch: MissingBranchDetector = output_reports_missing_branch,
) -> ExecResult:
    """Clone ``target`` under ``root`` and return the clone's result.

    ``branch`` overrides ``target.branch``. Raises ``CommandError`` when the
    clone fails for any reason other than a missing branch, or when a
    pinned ``base_commit`` cannot be checked out.
    """

    require_target(target)
    repo_dir = repo_absolute_path(target, root)
    url = authenticated_remote_url(host, target.owner, target.repo, token)
    secrets = (token,)
    branch = branch or target.branch
    default_clone = f"git clone {url}"

    log.info(
        "Cloning repository %s (branch=%s, base_commit=%s)",
        target.full_name,
        branch,
        target.base_commit,
    )

    create_branch = False
    if not branch:
        result = _run_or_raise(sandbox, default_clone, root, timeout_s, secrets)
    elif remote_branch_exists(sandbox, url, branch, root, checkout_timeout_s, secrets) is False:
        log.info("Branch '%s' does not exist upstream; cloning the default branch", branch)
        result = _run_or_raise(sandbox, default_clone, root, timeout_s, secrets)
        create_branch = True
    else:
        branch_clone = f"git clone -b {branch} {url}"
        result = _run(sandbox, branch_clone, root, timeout_s, secrets)
        if not result.ok:
            if not detect_missing_branch(result):
                error = CommandError.from_result(branch_clone, result, secrets)
                log.error("Failed to clone repository %s: %s", target.full_name, error)
                raise error
            log.info(
                "Clone reported branch '%s' missing upstream; cloning the default branch",
                branch,
            )
            result = _run_or_raise(sandbox, default_clone, root, timeout_s, secrets)
            create_branch = True

    if create_branch:
        _run_or_raise(
            sandbox, f'git checkout -b "{branch}"', repo_dir, checkout_timeout_s, secrets
        )
        log.info("Created branch '%s' locally", branch)

    if target.base_commit:
        log.info("Checking out base commit %s", target.base_commit)
        _run_or_raise(
            sandbox,
            f"git checkout {target.base_commit}",
            repo_dir,
            checkout_timeout_s,
            secrets,
        )
        log.info("Successfully checked out base commit %s", target.base_commit)

    log.info("Successfully cloned repository %s", target.full_name)
    return result
