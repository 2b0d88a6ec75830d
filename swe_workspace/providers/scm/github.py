"""GitHub REST client used for pull requests and committer lookups."""

from __future__ import annotations

import json
import os
import urllib.error
import urllib.parse
import urllib.request
from typing import Any

from swe_workspace.models.scm import PullRequestInfo, ScmUser
from swe_workspace.providers.scm.base import ScmProvider

DEFAULT_API_BASE_URL = "https://api.github.com"


class GitHubApiError(RuntimeError):
    def __init__(self, status: int, body: str) -> None:
        super().__init__(f"GitHub API error {status}: {body}")
        self.status = status
        self.body = body


class GitHubProvider(ScmProvider):
    def __init__(
        self,
        token: str | None = None,
        base_url: str = DEFAULT_API_BASE_URL,
        timeout_s: int = 30,
    ) -> None:
        self._token = token or os.getenv("GITHUB_PAT") or os.getenv("GITHUB_TOKEN")
        self._base_url = base_url.rstrip("/")
        self._timeout_s = timeout_s

    def _ensure_token(self) -> str:
        if not self._token:
            raise ValueError("GitHub token is required (set GITHUB_PAT or GITHUB_TOKEN).")
        return self._token

    def _request(
        self,
        method: str,
        path: str,
        payload: dict[str, Any] | None = None,
        query: dict[str, str] | None = None,
    ) -> Any:
        token = self._ensure_token()
        url = f"{self._base_url}{path}"
        if query:
            url = f"{url}?{urllib.parse.urlencode(query)}"
        data = None
        if payload is not None:
            data = json.dumps(payload).encode("utf-8")
        request = urllib.request.Request(url, data=data, method=method)
        request.add_header("Accept", "application/vnd.github+json")
        request.add_header("User-Agent", "swe-workspace")
        request.add_header("Authorization", f"Bearer {token}")
        if data is not None:
            request.add_header("Content-Type", "application/json")
        try:
            with urllib.request.urlopen(request, timeout=self._timeout_s) as response:
                raw = response.read()
                return json.loads(raw.decode("utf-8")) if raw else None
        except urllib.error.HTTPError as exc:
            body = exc.read().decode("utf-8")
            raise GitHubApiError(exc.code, body) from exc

    def get_authenticated_user(self) -> ScmUser:
        response = self._request("GET", "/user")
        if not isinstance(response, dict) or "login" not in response:
            raise RuntimeError("Unexpected response from GitHub API.")
        return ScmUser(
            login=response["login"],
            id=response.get("id"),
            name=response.get("name"),
            email=response.get("email"),
        )

    def get_repo_default_branch(self, repo: str) -> str:
        response = self._request("GET", f"/repos/{repo}")
        if not isinstance(response, dict) or "default_branch" not in response:
            raise RuntimeError("Unexpected response from GitHub API.")
        return response["default_branch"]

    def open_pr(
        self,
        repo: str,
        head_branch: str,
        base_branch: str,
        title: str,
        body: str,
        draft: bool = False,
    ) -> PullRequestInfo:
        payload = {
            "title": title,
            "body": body,
            "head": head_branch,
            "base": base_branch,
            "draft": draft,
        }
        response = self._request("POST", f"/repos/{repo}/pulls", payload)
        if not isinstance(response, dict) or "number" not in response:
            raise RuntimeError("Unexpected response from GitHub API.")
        return _pull_request_info(response, head_branch)

    def list_prs(self, repo: str, head: str, state: str = "open") -> list[PullRequestInfo]:
        # The API only filters by head when it is qualified as "owner:branch".
        if ":" not in head:
            head = f"{repo.split('/', 1)[0]}:{head}"
        response = self._request(
            "GET", f"/repos/{repo}/pulls", query={"head": head, "state": state}
        )
        if not isinstance(response, list):
            raise RuntimeError("Unexpected response from GitHub API.")
        branch = head.split(":", 1)[1]
        return [
            _pull_request_info(item, branch)
            for item in response
            if isinstance(item, dict) and "number" in item
        ]

    def add_labels(self, repo: str, pr_number: int, labels: list[str]) -> None:
        if not labels:
            return
        self._request(
            "POST",
            f"/repos/{repo}/issues/{pr_number}/labels",
            {"labels": labels},
        )


def _pull_request_info(data: dict[str, Any], head_branch: str) -> PullRequestInfo:
    head = data.get("head")
    if isinstance(head, dict) and head.get("ref"):
        head_branch = head["ref"]
    return PullRequestInfo(
        url=data.get("html_url", ""),
        number=data["number"],
        head_branch=head_branch,
        draft=bool(data.get("draft", False)),
    )
