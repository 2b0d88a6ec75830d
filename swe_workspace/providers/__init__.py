"""Provider package for sandbox and SCM integrations."""

from swe_workspace.providers.sandbox import LocalProvider, SandboxHandle, SandboxProvider
from swe_workspace.providers.scm import GitHubProvider, ScmProvider

__all__ = [
    "GitHubProvider",
    "LocalProvider",
    "SandboxHandle",
    "SandboxProvider",
    "ScmProvider",
]
