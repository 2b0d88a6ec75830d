"""Git workspace lifecycle operations run against a sandbox."""

from swe_workspace.workspace.branch import checkout_branch
from swe_workspace.workspace.clone import (
    clone_repo,
    output_reports_missing_branch,
    repository_is_cloned,
)
from swe_workspace.workspace.errors import (
    CommandError,
    MissingAppNameError,
    MissingIdentifierError,
    MissingRepoNameError,
    WorkspaceError,
)
from swe_workspace.workspace.identity import GitIdentity, configure_git_user_in_repo
from swe_workspace.workspace.paths import branch_name, repo_absolute_path
from swe_workspace.workspace.publish import (
    PublishResult,
    checkout_branch_and_commit,
    commit_all,
    commit_all_and_push,
    get_changed_files_status,
    pull_latest_changes,
    stash_and_clear_changes,
)
from swe_workspace.workspace.pull_request import create_pull_request
from swe_workspace.workspace.redact import redact_secrets

__all__ = [
    "CommandError",
    "GitIdentity",
    "MissingAppNameError",
    "MissingIdentifierError",
    "MissingRepoNameError",
    "PublishResult",
    "WorkspaceError",
    "branch_name",
    "checkout_branch",
    "checkout_branch_and_commit",
    "clone_repo",
    "commit_all",
    "commit_all_and_push",
    "configure_git_user_in_repo",
    "create_pull_request",
    "get_changed_files_status",
    "output_reports_missing_branch",
    "pull_latest_changes",
    "redact_secrets",
    "repo_absolute_path",
    "repository_is_cloned",
    "stash_and_clear_changes",
]
