"""
GitHub API read operations.

Provides the read-only calls the upload needs:
- Branch refs and the commits they point at
- Repository metadata
- The authenticated user
"""

import logging
from typing import Any
from urllib.parse import quote

import httpx

from treepush.services.github.exceptions import RefNotFoundError, RemoteObjectError
from treepush.services.github.helpers import handle_error_response
from treepush.services.github.http_client import get_github_client
from treepush.services.github.types import BranchState, CommitRef, RepositoryInfo

logger = logging.getLogger(__name__)


class GitHubReadOperations:
    """
    Read-only operations for GitHub API.

    Uses a shared HTTP client singleton for connection pooling; the token is
    sent per request.
    """

    BASE_URL = "https://api.github.com"
    API_VERSION = "2022-11-28"

    def __init__(self, token: str, base_url: str | None = None):
        self.token = token
        self.base_url = (base_url or self.BASE_URL).rstrip("/")
        self._headers = {
            "Authorization": f"Bearer {token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": self.API_VERSION,
        }

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        client = get_github_client()
        try:
            return await client.request(
                method, f"{self.base_url}{path}", headers=self._headers, **kwargs
            )
        except httpx.HTTPError as e:
            raise RemoteObjectError(f"GitHub request failed: {method} {path}: {e}") from e

    def _normalize_repo(self, data: dict[str, Any]) -> RepositoryInfo:
        """Convert GitHub API response to RepositoryInfo dataclass."""
        return RepositoryInfo(
            name=data["name"],
            full_name=data["full_name"],
            default_branch=data.get("default_branch", "main"),
            is_private=data.get("private", False),
            url=data.get("html_url", ""),
        )

    async def get_ref(self, owner: str, repo: str, branch: str) -> str:
        """
        Get the commit SHA a branch points at.

        Raises:
            RefNotFoundError: If the branch does not exist, or the repository
                has no commits yet (GitHub answers 409 for an empty repository)
        """
        response = await self._request(
            "GET", f"/repos/{owner}/{repo}/git/ref/heads/{quote(branch, safe='/')}"
        )

        if response.status_code in (404, 409):
            raise RefNotFoundError(f"{owner}/{repo}", branch)
        handle_error_response(response, f"{owner}/{repo}")

        sha: str = response.json()["object"]["sha"]
        return sha

    async def get_commit(self, owner: str, repo: str, commit_sha: str) -> CommitRef:
        """Get a commit's tree SHA and parents."""
        response = await self._request("GET", f"/repos/{owner}/{repo}/git/commits/{commit_sha}")
        handle_error_response(response, f"{owner}/{repo}")

        data = response.json()
        return CommitRef(
            sha=data["sha"],
            tree_sha=data["tree"]["sha"],
            parent_shas=tuple(p["sha"] for p in data.get("parents", [])),
        )

    async def get_branch_state(self, owner: str, repo: str, branch: str) -> BranchState:
        """
        Resolve the current head of a branch.

        Reads the ref to get the commit SHA, then that commit to get its tree.
        """
        commit_sha = await self.get_ref(owner, repo, branch)
        commit = await self.get_commit(owner, repo, commit_sha)
        logger.debug(f"{owner}/{repo}@{branch} is at {commit_sha} (tree {commit.tree_sha})")
        return BranchState(branch_name=branch, commit_sha=commit_sha, tree_sha=commit.tree_sha)

    async def get_repository(self, owner: str, repo: str) -> RepositoryInfo | None:
        """
        Fetch repository metadata.

        Returns:
            RepositoryInfo, or None if the repository does not exist (or is
            not visible to the token)
        """
        response = await self._request("GET", f"/repos/{owner}/{repo}")

        if response.status_code == 404:
            return None
        handle_error_response(response, f"{owner}/{repo}")

        return self._normalize_repo(response.json())

    async def get_authenticated_user(self) -> str:
        """Get the login of the user the token belongs to."""
        response = await self._request("GET", "/user")
        handle_error_response(response, "user")

        login: str = response.json()["login"]
        return login
