from __future__ import annotations

from functools import lru_cache
from typing import Callable, Optional

from fastapi import Depends, FastAPI, HTTPException
from pydantic import BaseModel

from swe_workspace.config import Settings, load_settings
from swe_workspace.logging_utils import configure_logging
from swe_workspace.models.repository import TargetRepository
from swe_workspace.models.sandbox import SandboxResources
from swe_workspace.providers.sandbox.base import SandboxError, SandboxHandle, SandboxProvider
from swe_workspace.providers.sandbox.local import LocalProvider
from swe_workspace.providers.scm.base import ScmProvider
from swe_workspace.providers.scm.github import GitHubApiError, GitHubProvider
from swe_workspace.workspace.errors import CommandError, WorkspaceError
from swe_workspace.workspace.session import WorkspaceSession, resolve_identity

app = FastAPI(title="swe-workspace")

ScmFactory = Callable[[str, Settings], ScmProvider]


@lru_cache
def get_settings() -> Settings:
    settings = load_settings()
    configure_logging(settings.log_level)
    return settings


@lru_cache
def get_sandbox_provider() -> SandboxProvider:
    return LocalProvider()


def _github_for_token(token: str, settings: Settings) -> ScmProvider:
    return GitHubProvider(token=token, base_url=settings.api_base_url)


def get_scm_factory() -> ScmFactory:
    return _github_for_token


class CreateSandboxRequest(BaseModel):
    name: str = "swe"
    vcpu: int = 2
    memory_gib: int = 4
    disk_gib: int = 5


class WorkspaceRequest(BaseModel):
    owner: str
    repo: str
    branch: Optional[str] = None
    base_commit: Optional[str] = None
    task_id: str
    token: str


class PublishRequest(WorkspaceRequest):
    message: str = "Apply patch"
    title: str
    body: str = ""
    draft: bool = False


def _session(
    sandbox_id: str,
    request: WorkspaceRequest,
    provider: SandboxProvider,
    settings: Settings,
    scm: ScmProvider,
) -> WorkspaceSession:
    target = TargetRepository(
        owner=request.owner,
        repo=request.repo,
        branch=request.branch,
        base_commit=request.base_commit,
    )
    return WorkspaceSession(
        sandbox=SandboxHandle(provider, sandbox_id),
        settings=settings,
        target=target,
        identity=resolve_identity(settings, request.token, scm),
        task_id=request.task_id,
    )


def _raise_http(exc: Exception) -> None:
    if isinstance(exc, (CommandError, GitHubApiError)):
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    if isinstance(exc, SandboxError):
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    if isinstance(exc, (WorkspaceError, ValueError)):
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    raise exc


@app.get("/health")
def health_check() -> dict:
    return {"status": "ok"}


@app.post("/sandboxes", status_code=201)
def create_sandbox(
    request: CreateSandboxRequest,
    provider: SandboxProvider = Depends(get_sandbox_provider),
) -> dict:
    resources = SandboxResources(
        vcpu=request.vcpu, memory_gib=request.memory_gib, disk_gib=request.disk_gib
    )
    return {"sandbox_id": provider.create_sandbox(request.name, resources)}


@app.delete("/sandboxes/{sandbox_id}", status_code=204)
def delete_sandbox(
    sandbox_id: str,
    provider: SandboxProvider = Depends(get_sandbox_provider),
) -> None:
    try:
        provider.delete_sandbox(sandbox_id)
    except SandboxError as exc:
        _raise_http(exc)


@app.post("/sandboxes/{sandbox_id}/workspace")
def prepare_workspace(
    sandbox_id: str,
    request: WorkspaceRequest,
    provider: SandboxProvider = Depends(get_sandbox_provider),
    settings: Settings = Depends(get_settings),
    scm_factory: ScmFactory = Depends(get_scm_factory),
) -> dict:
    try:
        scm = scm_factory(request.token, settings)
        session = _session(sandbox_id, request, provider, settings, scm)
        checkout = session.prepare()
    except (WorkspaceError, SandboxError, GitHubApiError, ValueError) as exc:
        _raise_http(exc)
    return {
        "repo_dir": session.repo_dir,
        "branch": session.branch,
        "on_branch": checkout is not None,
    }


@app.post("/sandboxes/{sandbox_id}/publish")
def publish_changes(
    sandbox_id: str,
    request: PublishRequest,
    provider: SandboxProvider = Depends(get_sandbox_provider),
    settings: Settings = Depends(get_settings),
    scm_factory: ScmFactory = Depends(get_scm_factory),
) -> dict:
    scm = scm_factory(request.token, settings)
    try:
        session = _session(sandbox_id, request, provider, settings, scm)
    except (WorkspaceError, GitHubApiError, ValueError) as exc:
        _raise_http(exc)
    outcome = session.publish(
        scm,
        request.message,
        request.title,
        request.body,
        draft=request.draft,
    )
    pull_request = outcome.pull_request
    return {
        "branch": session.branch,
        "committed": outcome.publish.committed,
        "pushed": outcome.publish.pushed,
        "pull_request": (
            {"number": pull_request.number, "url": pull_request.url}
            if pull_request
            else None
        ),
    }
