"""Data models for SCM interactions."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PullRequestInfo:
    url: str
    number: int
    head_branch: str = ""
    draft: bool = False


@dataclass(frozen=True)
class ScmUser:
    login: str
    id: int | None = None
    name: str | None = None
    email: str | None = None
