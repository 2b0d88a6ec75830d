"""Sandbox provider implementations and interfaces."""

from swe_workspace.providers.sandbox.base import (
    CommandExecutor,
    SandboxError,
    SandboxHandle,
    SandboxProvider,
)
from swe_workspace.providers.sandbox.local import LocalProvider

__all__ = [
    "CommandExecutor",
    "LocalProvider",
    "SandboxError",
    "SandboxHandle",
    "SandboxProvider",
]
