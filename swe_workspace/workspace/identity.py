"""Git identity and remote authentication for a sandbox checkout."""

from __future__ import annotations

from dataclasses import dataclass
import logging

from swe_workspace.models.repository import TargetRepository
from swe_workspace.providers.sandbox.base import CommandExecutor
from swe_workspace.providers.scm.base import ScmProvider
from swe_workspace.workspace.errors import MissingAppNameError, WorkspaceError
from swe_workspace.workspace.paths import require_target
from swe_workspace.workspace.redact import redact_secrets

log = logging.getLogger("swe_workspace.identity")

DEFAULT_TIMEOUT_S = 60


@dataclass(frozen=True)
class GitIdentity:
    """Credentials and author details used for one session."""

    token: str
    name: str
    email: str

    def __repr__(self) -> str:
        return f"GitIdentity(name={self.name!r}, email={self.email!r})"

    @classmethod
    def for_app(
        cls, app_name: str | None, token: str, host: str = "github.com"
    ) -> "GitIdentity":
        """Bot identity of a hosting app installation."""
        if not app_name:
            raise MissingAppNameError("GITHUB_APP_NAME environment variable is not set.")
        return cls(
            token=token,
            name=f"{app_name}[bot]",
            email=f"{app_name}@users.noreply.{host}",
        )

    @classmethod
    def from_user(
        cls, scm: ScmProvider, token: str, host: str = "github.com"
    ) -> "GitIdentity":
        """Identity of the user owning a personal access token."""
        user = scm.get_authenticated_user()
        email = user.email
        if not email and user.id:
            email = f"{user.id}+{user.login}@users.noreply.{host}"
        elif not email:
            email = f"{user.login}@users.noreply.{host}"
        return cls(token=token, name=user.name or user.login, email=email)


def authenticated_remote_url(host: str, owner: str, repo: str, token: str) -> str:
    return f"https://x-access-token:{token}@{host}/{owner}/{repo}.git"


def configure_git_user_in_repo(
    sandbox: CommandExecutor,
    repo_dir: str,
    target: TargetRepository,
    identity: GitIdentity,
    host: str = "github.com",
    timeout_s: int = DEFAULT_TIMEOUT_S,
) -> None:
    """Refresh the authenticated ``origin`` URL and make sure an author is set.

    The remote URL is rewritten on every call since tokens expire. The
    author is only written when ``user.name`` or ``user.email`` is missing.
    Failures of individual git commands are logged and do not raise.
    """

    require_target(target)
    if not identity.name or not identity.email:
        raise WorkspaceError("Git identity has no author name or email.")

    needs_git_config = False
    try:
        name_check = sandbox.execute_command(
            "git config user.name", cwd=repo_dir, timeout_s=timeout_s
        )
        email_check = sandbox.execute_command(
            "git config user.email", cwd=repo_dir, timeout_s=timeout_s
        )
        if (
            not name_check.ok
            or not name_check.result.strip()
            or not email_check.ok
            or not email_check.result.strip()
        ):
            needs_git_config = True
    except Exception:
        log.warning(
            "Could not check existing git config, will attempt to set it",
            exc_info=True,
        )
        needs_git_config = True

    log.info("Configuring git remote for %s with a fresh token", target.full_name)
    remote_url = authenticated_remote_url(host, target.owner, target.repo, identity.token)
    set_url_command = f"git remote set-url origin {remote_url}"
    try:
        set_remote = sandbox.execute_command(
            set_url_command, cwd=repo_dir, timeout_s=timeout_s
        )
        if not set_remote.ok:
            log.error(
                "Failed to set remote URL with token (exit %s): %s",
                set_remote.exit_code,
                redact_secrets(set_remote.result, [identity.token]).strip(),
            )
        else:
            log.info("Git remote URL updated with token successfully.")
    except Exception:
        log.error(
            "Error configuring git authentication: %s",
            redact_secrets(set_url_command, [identity.token]),
            exc_info=True,
        )

    if not needs_git_config:
        log.info("Git user.name and user.email are already configured in this repository.")
        return

    for key, value in (("user.name", identity.name), ("user.email", identity.email)):
        try:
            output = sandbox.execute_command(
                f'git config {key} "{value}"', cwd=repo_dir, timeout_s=timeout_s
            )
        except Exception:
            log.error("Error setting git %s", key, exc_info=True)
            continue
        if not output.ok:
            log.error(
                "Failed to set git %s (exit %s): %s",
                key,
                output.exit_code,
                output.result.strip(),
            )
        else:
            log.info("Set git %s to '%s' successfully.", key, value)
