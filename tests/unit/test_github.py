"""Tests for the GitHub REST provider."""

import io
import json
import urllib.error
from unittest.mock import MagicMock, patch

import pytest

from swe_workspace.providers.scm.github import GitHubApiError, GitHubProvider


def _response(payload) -> MagicMock:
    response = MagicMock()
    response.read.return_value = json.dumps(payload).encode("utf-8")
    response.__enter__.return_value = response
    return response


def _http_error(code: int, body: str) -> urllib.error.HTTPError:
    return urllib.error.HTTPError(
        "https://api.github.com/x", code, "error", {}, io.BytesIO(body.encode("utf-8"))
    )


@pytest.fixture
def provider() -> GitHubProvider:
    return GitHubProvider(token="ghs_token")


class TestGitHubProvider:
    @patch("urllib.request.urlopen")
    def test_default_branch(self, mock_urlopen: MagicMock, provider: GitHubProvider) -> None:
        mock_urlopen.return_value = _response({"default_branch": "trunk"})

        assert provider.get_repo_default_branch("acme/widgets") == "trunk"
        request = mock_urlopen.call_args[0][0]
        assert request.full_url == "https://api.github.com/repos/acme/widgets"
        assert request.get_header("Authorization") == "Bearer ghs_token"

    @patch("urllib.request.urlopen")
    def test_open_pr(self, mock_urlopen: MagicMock, provider: GitHubProvider) -> None:
        mock_urlopen.return_value = _response(
            {"number": 12, "html_url": "https://github.com/acme/widgets/pull/12", "draft": True}
        )

        pr = provider.open_pr("acme/widgets", "open-swe/1", "main", "Title", "Body", draft=True)

        assert pr.number == 12
        assert pr.url.endswith("/pull/12")
        assert pr.head_branch == "open-swe/1"
        assert pr.draft is True
        request = mock_urlopen.call_args[0][0]
        assert request.get_method() == "POST"
        assert json.loads(request.data) == {
            "title": "Title",
            "body": "Body",
            "head": "open-swe/1",
            "base": "main",
            "draft": True,
        }

    @patch("urllib.request.urlopen")
    def test_open_pr_conflict(self, mock_urlopen: MagicMock, provider: GitHubProvider) -> None:
        mock_urlopen.side_effect = _http_error(422, "A pull request already exists for acme:open-swe/1.")

        with pytest.raises(GitHubApiError) as excinfo:
            provider.open_pr("acme/widgets", "open-swe/1", "main", "Title", "Body")

        assert excinfo.value.status == 422
        assert "already exists" in str(excinfo.value)

    @patch("urllib.request.urlopen")
    def test_list_prs_qualifies_head(self, mock_urlopen: MagicMock, provider: GitHubProvider) -> None:
        mock_urlopen.return_value = _response(
            [{"number": 3, "html_url": "u", "head": {"ref": "open-swe/1"}}]
        )

        prs = provider.list_prs("acme/widgets", "open-swe/1")

        assert [pr.number for pr in prs] == [3]
        assert prs[0].head_branch == "open-swe/1"
        url = mock_urlopen.call_args[0][0].full_url
        assert "head=acme%3Aopen-swe%2F1" in url
        assert "state=open" in url

    @patch("urllib.request.urlopen")
    def test_add_labels(self, mock_urlopen: MagicMock, provider: GitHubProvider) -> None:
        mock_urlopen.return_value = _response([])

        provider.add_labels("acme/widgets", 3, ["open-swe"])

        request = mock_urlopen.call_args[0][0]
        assert request.full_url.endswith("/repos/acme/widgets/issues/3/labels")
        assert json.loads(request.data) == {"labels": ["open-swe"]}

    @patch("urllib.request.urlopen")
    def test_add_no_labels_is_noop(self, mock_urlopen: MagicMock, provider: GitHubProvider) -> None:
        provider.add_labels("acme/widgets", 3, [])

        mock_urlopen.assert_not_called()

    @patch("urllib.request.urlopen")
    def test_authenticated_user(self, mock_urlopen: MagicMock, provider: GitHubProvider) -> None:
        mock_urlopen.return_value = _response({"login": "octo", "id": 7, "name": None, "email": None})

        user = provider.get_authenticated_user()

        assert (user.login, user.id, user.name, user.email) == ("octo", 7, None, None)

    @patch("urllib.request.urlopen")
    def test_enterprise_base_url(self, mock_urlopen: MagicMock) -> None:
        mock_urlopen.return_value = _response({"default_branch": "main"})
        provider = GitHubProvider(token="t", base_url="https://git.example.com/api/v3/")

        provider.get_repo_default_branch("acme/widgets")

        assert mock_urlopen.call_args[0][0].full_url == (
            "https://git.example.com/api/v3/repos/acme/widgets"
        )

    @patch("urllib.request.urlopen")
    def test_unexpected_response(self, mock_urlopen: MagicMock, provider: GitHubProvider) -> None:
        mock_urlopen.return_value = _response({"message": "weird"})

        with pytest.raises(RuntimeError, match="Unexpected response"):
            provider.get_repo_default_branch("acme/widgets")

    def test_requires_token(self, monkeypatch) -> None:
        monkeypatch.delenv("GITHUB_PAT", raising=False)
        monkeypatch.delenv("GITHUB_TOKEN", raising=False)

        with pytest.raises(ValueError, match="GitHub token is required"):
            GitHubProvider().get_repo_default_branch("acme/widgets")

    def test_token_from_environment(self, monkeypatch) -> None:
        monkeypatch.delenv("GITHUB_PAT", raising=False)
        monkeypatch.setenv("GITHUB_TOKEN", "env-token")

        with patch("urllib.request.urlopen") as mock_urlopen:
            mock_urlopen.return_value = _response({"default_branch": "main"})
            GitHubProvider().get_repo_default_branch("acme/widgets")

        assert mock_urlopen.call_args[0][0].get_header("Authorization") == "Bearer env-token"
