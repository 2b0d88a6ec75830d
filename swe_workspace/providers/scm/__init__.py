"""SCM provider implementations and interfaces."""

from swe_workspace.providers.scm.base import ScmProvider
from swe_workspace.providers.scm.github import GitHubApiError, GitHubProvider

__all__ = ["GitHubApiError", "GitHubProvider", "ScmProvider"]
