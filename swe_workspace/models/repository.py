"""Data models describing the repository a task works against."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class TargetRepository:
    owner: str
    repo: str
    branch: Optional[str] = None
    base_commit: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"
