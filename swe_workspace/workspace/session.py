"""Per-task workflow tying the workspace operations together."""

from __future__ import annotations

from dataclasses import dataclass
import logging

from swe_workspace.config import Settings
from swe_workspace.models.repository import TargetRepository
from swe_workspace.models.sandbox import ExecResult
from swe_workspace.models.scm import PullRequestInfo
from swe_workspace.providers.sandbox.base import CommandExecutor
from swe_workspace.providers.scm.base import ScmProvider
from swe_workspace.workspace.branch import checkout_branch
from swe_workspace.workspace.clone import clone_repo, repository_is_cloned
from swe_workspace.workspace.identity import GitIdentity, configure_git_user_in_repo
from swe_workspace.workspace.paths import branch_name, repo_absolute_path, require_target
from swe_workspace.workspace.publish import (
    PublishResult,
    commit_all_and_push,
    get_changed_files_status,
    pull_latest_changes,
)
from swe_workspace.workspace.pull_request import create_pull_request

log = logging.getLogger("swe_workspace.session")


@dataclass(frozen=True)
class PublishOutcome:
    publish: PublishResult
    pull_request: PullRequestInfo | None = None


def resolve_identity(settings: Settings, token: str, scm: ScmProvider) -> GitIdentity:
    """Pick the commit identity for a session from ``settings.identity_source``.

    ``app`` uses the hosting app's bot identity, ``user`` the owner of ``token``.
    """
    if settings.identity_source == "user":
        return GitIdentity.from_user(scm, token, settings.git_host)
    return GitIdentity.for_app(settings.app_name, token, settings.git_host)


@dataclass(frozen=True)
class WorkspaceSession:
    """One task's view of one sandbox.

    Holds no mutable state; every call works from what is in the sandbox.
    Callers must not run two sessions' operations against the same sandbox
    at once.
    """

    sandbox: CommandExecutor
    settings: Settings
    target: TargetRepository
    identity: GitIdentity
    task_id: str

    def __post_init__(self) -> None:
        require_target(self.target)
        branch_name(self.task_id, self.settings.branch_prefix)

    @property
    def branch(self) -> str:
        return branch_name(self.task_id, self.settings.branch_prefix)

    @property
    def repo_dir(self) -> str:
        return repo_absolute_path(self.target, self.settings.sandbox_root_dir)

    def prepare(self) -> ExecResult | None:
        """Clone, configure and move onto the task branch.

        A sandbox that already holds the checkout is resumed instead: the
        remote credentials are refreshed, the branch synced and upstream
        changes pulled.
        """
        if repository_is_cloned(
            self.sandbox, self.repo_dir, timeout_s=self.settings.command_timeout_s
        ):
            log.info("Resuming existing checkout at %s", self.repo_dir)
            self.configure_git()
            checkout = self.sync_branch()
            if checkout is not None:
                self.pull()
            return checkout

        clone_repo(
            self.sandbox,
            self.target,
            self.identity.token,
            branch=self.branch,
            host=self.settings.git_host,
            root=self.settings.sandbox_root_dir,
            timeout_s=self.settings.clone_timeout_s,
            checkout_timeout_s=self.settings.command_timeout_s,
        )
        self.configure_git()
        return self.sync_branch()

    def configure_git(self) -> None:
        configure_git_user_in_repo(
            self.sandbox,
            self.repo_dir,
            self.target,
            self.identity,
            host=self.settings.git_host,
            timeout_s=self.settings.command_timeout_s,
        )

    def sync_branch(self) -> ExecResult | None:
        return checkout_branch(
            self.sandbox,
            self.repo_dir,
            self.branch,
            timeout_s=self.settings.command_timeout_s,
        )

    def pull(self) -> ExecResult | None:
        return pull_latest_changes(
            self.sandbox, self.repo_dir, timeout_s=self.settings.command_timeout_s
        )

    def changed_files(self) -> list[str]:
        return get_changed_files_status(
            self.sandbox, self.repo_dir, timeout_s=self.settings.command_timeout_s
        )

    def publish(
        self,
        scm: ScmProvider,
        message: str,
        title: str,
        body: str = "",
        draft: bool = False,
    ) -> PublishOutcome:
        """Commit and push the task branch, then open its pull request."""
        if self.sync_branch() is None:
            return PublishOutcome(publish=PublishResult())

        self.configure_git()
        result = commit_all_and_push(
            self.sandbox,
            self.repo_dir,
            message,
            timeout_s=self.settings.command_timeout_s,
        )
        if not result:
            log.warning(
                "Not opening a pull request for %s (committed=%s, pushed=%s)",
                self.branch,
                result.committed,
                result.pushed,
            )
            return PublishOutcome(publish=result)

        labels = [self.settings.pr_label] if self.settings.pr_label else None
        pull_request = create_pull_request(
            scm,
            self.target.owner,
            self.target.repo,
            self.branch,
            title,
            body,
            draft=draft,
            labels=labels,
        )
        return PublishOutcome(publish=result, pull_request=pull_request)
