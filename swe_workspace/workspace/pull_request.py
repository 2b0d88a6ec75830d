"""Open (or find) the pull request for a task branch."""

from __future__ import annotations

import logging

from swe_workspace.models.scm import PullRequestInfo
from swe_workspace.providers.scm.base import ScmProvider

log = logging.getLogger("swe_workspace.pull_request")


def get_existing_pull_request(
    scm: ScmProvider, owner: str, repo: str, head_branch: str
) -> PullRequestInfo | None:
    try:
        pull_requests = scm.list_prs(f"{owner}/{repo}", head_branch)
    except Exception:
        log.error(
            "Failed to get existing pull request for %s/%s@%s",
            owner,
            repo,
            head_branch,
            exc_info=True,
        )
        return None
    return pull_requests[0] if pull_requests else None


def create_pull_request(
    scm: ScmProvider,
    owner: str,
    repo: str,
    head_branch: str,
    title: str,
    body: str = "",
    draft: bool = False,
    labels: list[str] | None = None,
) -> PullRequestInfo | None:
    """Open a PR from ``head_branch`` against the repository's default branch.

    If one already exists for the branch it is returned instead. Any other
    failure is logged and yields ``None``.
    """

    full_name = f"{owner}/{repo}"
    try:
        base_branch = scm.get_repo_default_branch(full_name)
        log.info("Creating pull request against default branch: %s", base_branch)
        pull_request = scm.open_pr(
            full_name, head_branch, base_branch, title, body, draft=draft
        )
    except Exception as exc:
        if "already exists" in str(exc):
            log.info("Pull request already exists. Getting existing pull request...")
            return get_existing_pull_request(scm, owner, repo, head_branch)
        log.error("Failed to create pull request for %s", full_name, exc_info=True)
        return None

    log.info("Pull request created: %s", pull_request.url)

    if labels:
        try:
            scm.add_labels(full_name, pull_request.number, labels)
        except Exception:
            log.warning(
                "Failed to add labels %s to pull request #%s",
                labels,
                pull_request.number,
                exc_info=True,
            )
    return pull_request
