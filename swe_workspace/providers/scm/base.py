"""SCM provider interface."""

from __future__ import annotations

from typing import Protocol

from swe_workspace.models.scm import PullRequestInfo, ScmUser


class ScmProvider(Protocol):
    def get_authenticated_user(self) -> ScmUser:
        ...

    def get_repo_default_branch(self, repo: str) -> str:
        ...

    def open_pr(
        self,
        repo: str,
        head_branch: str,
        base_branch: str,
        title: str,
        body: str,
        draft: bool = False,
    ) -> PullRequestInfo:
        ...

    def list_prs(self, repo: str, head: str, state: str = "open") -> list[PullRequestInfo]:
        ...

    def add_labels(self, repo: str, pr_number: int, labels: list[str]) -> None:
        ...
