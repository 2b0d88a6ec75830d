"""Tests for checking out the task branch."""

import logging

from swe_workspace.models.sandbox import ExecResult
from swe_workspace.workspace.branch import checkout_branch
from swe_workspace.providers.sandbox.base import SandboxError
from tests.conftest import FakeSandbox, fail, ok

REPO_DIR = "/home/daytona/widgets"
BRANCH = "open-swe/task-42"


class TestCheckoutBranch:
    def test_already_on_branch_skips_checkout(self, sandbox: FakeSandbox) -> None:
        sandbox.on("git branch --show-current", ok(f"{BRANCH}\n"))

        result = checkout_branch(sandbox, REPO_DIR, BRANCH)

        assert result == ExecResult(exit_code=0, result=f"Already on branch {BRANCH}")
        assert sandbox.commands == ["git branch --show-current"]

    def test_creates_missing_branch(self, sandbox: FakeSandbox) -> None:
        sandbox.on("git branch --show-current", ok("main\n"))
        sandbox.on("git rev-parse", fail(""))
        created = ok(f"Switched to a new branch '{BRANCH}'")
        sandbox.on("git checkout", created)

        result = checkout_branch(sandbox, REPO_DIR, BRANCH)

        assert result is created
        assert sandbox.commands == [
            "git branch --show-current",
            f'git rev-parse --verify --quiet "refs/heads/{BRANCH}"',
            f'git checkout -b "{BRANCH}"',
        ]

    def test_checks_out_existing_branch(self, sandbox: FakeSandbox) -> None:
        sandbox.on("git branch --show-current", ok("main\n"))
        sandbox.on("git rev-parse", ok("4b825dc\n"))

        result = checkout_branch(sandbox, REPO_DIR, BRANCH)

        assert result is not None
        assert sandbox.commands[-1] == f'git checkout "{BRANCH}"'

    def test_ambiguous_ref_creates_branch(self, sandbox: FakeSandbox) -> None:
        sandbox.on("git branch --show-current", ok("main\n"))
        sandbox.on("git rev-parse", fail("warning: refname is ambiguous.", exit_code=128))

        checkout_branch(sandbox, REPO_DIR, BRANCH)

        assert sandbox.commands[-1] == f'git checkout -b "{BRANCH}"'

    def test_idempotent_across_calls(self, sandbox: FakeSandbox) -> None:
        sandbox.on("git branch --show-current", ok("main\n"), ok(f"{BRANCH}\n"))
        sandbox.on("git rev-parse", fail())

        first = checkout_branch(sandbox, REPO_DIR, BRANCH)
        second = checkout_branch(sandbox, REPO_DIR, BRANCH)

        assert first is not None
        assert second is not None
        assert len(sandbox.issued("git checkout")) == 1

    def test_failed_current_branch_probe_continues(self, sandbox: FakeSandbox) -> None:
        sandbox.on("git branch --show-current", fail("fatal: not a git repository"))
        sandbox.on("git rev-parse", fail())

        result = checkout_branch(sandbox, REPO_DIR, BRANCH)

        assert result is not None
        assert sandbox.commands[-1] == f'git checkout -b "{BRANCH}"'

    def test_checkout_failure_returns_none(self, sandbox: FakeSandbox, caplog) -> None:
        sandbox.on("git branch --show-current", ok("main\n"))
        sandbox.on("git rev-parse", fail())
        sandbox.on("git checkout", fail("error: Your local changes would be overwritten"))

        with caplog.at_level(logging.ERROR, logger="swe_workspace.branch"):
            result = checkout_branch(sandbox, REPO_DIR, BRANCH)

        assert result is None
        assert "Failed to checkout branch" in caplog.text

    def test_transport_error_on_probe_returns_none(self, sandbox: FakeSandbox) -> None:
        sandbox.on("git branch --show-current", SandboxError("sandbox unreachable"))

        assert checkout_branch(sandbox, REPO_DIR, BRANCH) is None
        assert sandbox.commands == ["git branch --show-current"]

    def test_transport_error_on_existence_probe(self, sandbox: FakeSandbox) -> None:
        sandbox.on("git branch --show-current", ok("main\n"))
        sandbox.on("git rev-parse", TimeoutError("rpc timed out"))

        assert checkout_branch(sandbox, REPO_DIR, BRANCH) is None
        assert sandbox.issued("git checkout") == []

    def test_transport_error_on_checkout(self, sandbox: FakeSandbox) -> None:
        sandbox.on("git branch --show-current", ok("main\n"))
        sandbox.on("git rev-parse", fail())
        sandbox.on("git checkout", ConnectionError("reset by peer"))

        assert checkout_branch(sandbox, REPO_DIR, BRANCH) is None

    def test_runs_in_repo_dir_with_timeout(self, sandbox: FakeSandbox) -> None:
        sandbox.on("git branch --show-current", ok("main\n"))
        sandbox.on("git rev-parse", fail())

        checkout_branch(sandbox, REPO_DIR, BRANCH, timeout_s=15)

        assert {call.cwd for call in sandbox.calls} == {REPO_DIR}
        assert {call.timeout_s for call in sandbox.calls} == {15}
