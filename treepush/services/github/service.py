"""
GitHub API service for Git object operations.

Single entry point over the read and write operation classes. This is the
remote repository client the upload orchestrator talks to.
"""

import logging

from treepush.services.github.read_operations import GitHubReadOperations
from treepush.services.github.types import (
    BlobRef,
    BranchState,
    CommitRef,
    RepositoryInfo,
    TreeEntry,
    TreeRef,
)
from treepush.services.github.write_operations import GitHubWriteOperations

logger = logging.getLogger(__name__)


class GitHubService:
    """Service for interacting with the GitHub Git Data API."""

    def __init__(self, token: str, base_url: str | None = None):
        self.token = token
        self.reads = GitHubReadOperations(token, base_url)
        self.writes = GitHubWriteOperations(token, base_url)
        self._login: str | None = None

    # ─────────────────────────────────────────────────────────────
    # Reads
    # ─────────────────────────────────────────────────────────────

    async def get_ref(self, owner: str, repo: str, branch: str) -> str:
        return await self.reads.get_ref(owner, repo, branch)

    async def get_commit(self, owner: str, repo: str, commit_sha: str) -> CommitRef:
        return await self.reads.get_commit(owner, repo, commit_sha)

    async def get_branch_state(self, owner: str, repo: str, branch: str) -> BranchState:
        return await self.reads.get_branch_state(owner, repo, branch)

    async def get_repository(self, owner: str, repo: str) -> RepositoryInfo | None:
        return await self.reads.get_repository(owner, repo)

    async def get_authenticated_user(self) -> str:
        """Login of the token's user, fetched once per service."""
        if self._login is None:
            self._login = await self.reads.get_authenticated_user()
        return self._login

    # ─────────────────────────────────────────────────────────────
    # Git Data API writes
    # ─────────────────────────────────────────────────────────────

    async def create_blob(self, owner: str, repo: str, content: bytes) -> BlobRef:
        return await self.writes.create_blob(owner, repo, content)

    async def create_tree(
        self,
        owner: str,
        repo: str,
        entries: list[TreeEntry],
        base_tree_sha: str | None = None,
    ) -> TreeRef:
        return await self.writes.create_tree(owner, repo, entries, base_tree_sha)

    async def create_commit(
        self,
        owner: str,
        repo: str,
        message: str,
        tree_sha: str,
        parent_shas: list[str],
    ) -> CommitRef:
        return await self.writes.create_commit(owner, repo, message, tree_sha, parent_shas)

    async def update_ref(self, owner: str, repo: str, branch: str, commit_sha: str) -> None:
        await self.writes.update_ref(owner, repo, branch, commit_sha)

    async def create_repository(
        self,
        owner: str,
        name: str,
        private: bool = False,
        description: str | None = None,
    ) -> RepositoryInfo:
        """
        Create an auto-initialized repository for a user or an organization.

        Repositories for the token's own user go through /user/repos; any
        other owner is treated as an organization.
        """
        login = await self.get_authenticated_user()
        is_org = owner.lower() != login.lower()
        logger.debug(f"Creating repository {owner}/{name} (org={is_org}, private={private})")
        return await self.writes.create_repository(
            owner, name, is_org=is_org, private=private, description=description
        )
