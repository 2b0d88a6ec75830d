"""Pure resolvers for branch names and on-sandbox repository paths."""

from __future__ import annotations

from swe_workspace.models.repository import TargetRepository
from swe_workspace.workspace.errors import MissingIdentifierError, MissingRepoNameError

DEFAULT_BRANCH_PREFIX = "open-swe"
DEFAULT_SANDBOX_ROOT = "/home/daytona"


def branch_name(task_id: str | None, prefix: str = DEFAULT_BRANCH_PREFIX) -> str:
    if not task_id:
        raise MissingIdentifierError("No thread ID provided")
    return f"{prefix}/{task_id}"


def repo_absolute_path(
    target: TargetRepository, root: str = DEFAULT_SANDBOX_ROOT
) -> str:
    if not target.repo:
        raise MissingRepoNameError("No repository name provided")
    return f"{root.rstrip('/')}/{target.repo}"


def require_target(target: TargetRepository) -> TargetRepository:
    if not target.repo:
        raise MissingRepoNameError("No repository name provided")
    if not target.owner:
        raise MissingRepoNameError(f"No owner provided for repository '{target.repo}'")
    return target
