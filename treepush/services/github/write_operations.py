"""
GitHub API write operations.

Provides the Git Data API primitives used to build a commit remotely:
- Creating blobs, trees and commits
- Fast-forwarding a branch reference
- Creating repositories
"""

import base64
import logging
from typing import Any
from urllib.parse import quote

import httpx

from treepush.services.github.exceptions import (
    ConcurrentUpdateError,
    RemoteObjectError,
    RepositoryExistsError,
)
from treepush.services.github.helpers import error_detail, handle_error_response
from treepush.services.github.http_client import get_github_client
from treepush.services.github.types import BlobRef, CommitRef, RepositoryInfo, TreeEntry, TreeRef

logger = logging.getLogger(__name__)


class GitHubWriteOperations:
    """
    Write operations for GitHub API.

    Every object created here is immutable on GitHub; the only mutation is
    update_ref, which is fast-forward only.
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

    async def create_blob(self, owner: str, repo: str, content: bytes) -> BlobRef:
        """
        Create a blob from raw file bytes.

        Content is always sent base64 encoded so binary and text files are
        stored byte for byte.
        """
        response = await self._request(
            "POST",
            f"/repos/{owner}/{repo}/git/blobs",
            json={
                "content": base64.b64encode(content).decode("ascii"),
                "encoding": "base64",
            },
        )
        handle_error_response(response, f"{owner}/{repo}")

        return BlobRef(sha=response.json()["sha"])

    async def create_tree(
        self,
        owner: str,
        repo: str,
        entries: list[TreeEntry],
        base_tree_sha: str | None = None,
    ) -> TreeRef:
        """
        Create a tree from entries, layered on top of base_tree_sha.

        GitHub merges the entries into the base tree: paths that already
        exist are replaced, all other base paths are kept.
        """
        payload: dict[str, Any] = {"tree": [entry.to_api() for entry in entries]}
        if base_tree_sha:
            payload["base_tree"] = base_tree_sha

        response = await self._request("POST", f"/repos/{owner}/{repo}/git/trees", json=payload)
        handle_error_response(response, f"{owner}/{repo}")

        return TreeRef(sha=response.json()["sha"])

    async def create_commit(
        self,
        owner: str,
        repo: str,
        message: str,
        tree_sha: str,
        parent_shas: list[str],
    ) -> CommitRef:
        """Create a commit object pointing at tree_sha."""
        response = await self._request(
            "POST",
            f"/repos/{owner}/{repo}/git/commits",
            json={
                "message": message,
                "tree": tree_sha,
                "parents": parent_shas,
            },
        )
        handle_error_response(response, f"{owner}/{repo}")

        data = response.json()
        return CommitRef(
            sha=data["sha"],
            tree_sha=data.get("tree", {}).get("sha", tree_sha),
            parent_shas=tuple(p["sha"] for p in data.get("parents", [])) or tuple(parent_shas),
        )

    async def update_ref(self, owner: str, repo: str, branch: str, commit_sha: str) -> None:
        """
        Move a branch to commit_sha.

        The update is never forced: GitHub only accepts it when commit_sha
        descends from the branch's current head. This is a fast-forward check,
        not an exact compare-and-swap: if another writer resets the branch to
        an ancestor of commit_sha's parent, the update still succeeds and
        fast-forwards over that reset.

        Raises:
            ConcurrentUpdateError: If the branch moved since the commit's parent was read
        """
        response = await self._request(
            "PATCH",
            f"/repos/{owner}/{repo}/git/refs/heads/{quote(branch, safe='/')}",
            json={"sha": commit_sha, "force": False},
        )

        if response.status_code == 422:
            detail = (error_detail(response) or "").lower()
            if "fast forward" in detail or "fast-forward" in detail:
                raise ConcurrentUpdateError(f"{owner}/{repo}", branch, commit_sha)
        handle_error_response(response, f"{owner}/{repo}")

    async def create_repository(
        self,
        owner: str,
        name: str,
        is_org: bool = False,
        private: bool = False,
        description: str | None = None,
    ) -> RepositoryInfo:
        """
        Create an auto-initialized repository.

        Args:
            owner: Login of the user or organization that will own it
            name: Repository name
            is_org: Create under /orgs/{owner} instead of the authenticated user
            private: Whether the repository is private
            description: Optional repository description

        Raises:
            RepositoryExistsError: If the name is already taken for that owner
        """
        payload: dict[str, Any] = {"name": name, "auto_init": True, "private": private}
        if description:
            payload["description"] = description

        path = f"/orgs/{owner}/repos" if is_org else "/user/repos"
        response = await self._request("POST", path, json=payload)

        full_name = f"{owner}/{name}"
        if response.status_code == 422 and _is_name_collision(response):
            raise RepositoryExistsError(full_name)
        handle_error_response(response, full_name)

        data = response.json()
        logger.info(f"Created repository {data['full_name']}")
        return RepositoryInfo(
            name=data["name"],
            full_name=data["full_name"],
            default_branch=data.get("default_branch", "main"),
            is_private=data.get("private", private),
            url=data.get("html_url", ""),
        )


def _is_name_collision(response: httpx.Response) -> bool:
    try:
        body = response.json()
    except ValueError:
        return False
    errors = body.get("errors", []) if isinstance(body, dict) else []
    return any(
        isinstance(err, dict)
        and (err.get("field") == "name" or "already exists" in str(err.get("message", "")))
        for err in errors
    )
