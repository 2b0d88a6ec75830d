"""Shared data models for the swe-workspace service."""

from swe_workspace.models.repository import TargetRepository
from swe_workspace.models.sandbox import ExecResult, SandboxResources
from swe_workspace.models.scm import PullRequestInfo, ScmUser

__all__ = [
    "ExecResult",
    "PullRequestInfo",
    "SandboxResources",
    "ScmUser",
    "TargetRepository",
]
