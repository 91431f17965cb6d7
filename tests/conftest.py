"""Root conftest — shared fixtures for all treepush tests.

Provides:
- anyio backend selection (asyncio only)
- FakeGitHub: an in-memory stand-in for GitHubService that models the Git
  Data API semantics the upload relies on (base-tree merge, fast-forward-only
  ref updates, name collisions on repository creation)
"""

from __future__ import annotations

import asyncio
import hashlib

import pytest

from treepush.services.github.exceptions import (
    ConcurrentUpdateError,
    RefNotFoundError,
    RemoteObjectError,
    RepositoryExistsError,
)
from treepush.services.github.types import (
    BlobRef,
    BranchState,
    CommitRef,
    RepositoryInfo,
    TreeEntry,
    TreeRef,
)


@pytest.fixture
def anyio_backend():
    return "asyncio"


def git_blob_sha(content: bytes) -> str:
    """SHA-1 GitHub assigns to a blob with this content."""
    return hashlib.sha1(b"blob %d\0" % len(content) + content).hexdigest()


class FakeGitHub:
    """In-memory GitHub with one repository.

    Trees are stored flattened: {path: blob_sha}. Every call is recorded in
    ``calls`` by method name so tests can assert which steps ran.
    """

    def __init__(self, owner: str = "octo", repo: str = "demo", login: str = "octo"):
        self.owner = owner
        self.repo = repo
        self.login = login
        self.repos: dict[str, RepositoryInfo] = {}
        self.blobs: dict[str, bytes] = {}
        self.trees: dict[str, dict[str, str]] = {}
        self.commits: dict[str, CommitRef] = {}
        self.refs: dict[str, str] = {}
        self.calls: list[str] = []
        # content -> seconds to sleep before the blob is created
        self.blob_delays: dict[bytes, float] = {}
        # content -> exception raised instead of creating the blob
        self.blob_failures: dict[bytes, Exception] = {}
        self.blobs_in_flight = 0
        self.max_blobs_in_flight = 0
        self.cancelled_uploads = 0
        # called right before update_ref checks the fast-forward, to simulate races
        self.before_update_ref = None

    # -- seeding ----------------------------------------------------------

    def seed_branch(self, branch: str, files: dict[str, bytes]) -> BranchState:
        tree: dict[str, str] = {}
        for path, content in files.items():
            sha = git_blob_sha(content)
            self.blobs[sha] = content
            tree[path] = sha
        tree_sha = self._store_tree(tree)
        commit_sha = self._store_commit("seed", tree_sha, [])
        self.refs[branch] = commit_sha
        return BranchState(branch_name=branch, commit_sha=commit_sha, tree_sha=tree_sha)

    def push_commit(self, branch: str, files: dict[str, bytes]) -> str:
        """Move branch to a new commit on top of its head (another writer)."""
        head = self.commits[self.refs[branch]]
        tree = dict(self.trees[head.tree_sha])
        for path, content in files.items():
            sha = git_blob_sha(content)
            self.blobs[sha] = content
            tree[path] = sha
        commit_sha = self._store_commit("other writer", self._store_tree(tree), [head.sha])
        self.refs[branch] = commit_sha
        return commit_sha

    @staticmethod
    def blob_sha(content: bytes) -> str:
        return git_blob_sha(content)

    def tree_of(self, commit_sha: str) -> dict[str, str]:
        return self.trees[self.commits[commit_sha].tree_sha]

    def _store_tree(self, tree: dict[str, str]) -> str:
        sha = hashlib.sha1(repr(sorted(tree.items())).encode()).hexdigest()
        self.trees[sha] = tree
        return sha

    def _store_commit(self, message: str, tree_sha: str, parents: list[str]) -> str:
        sha = hashlib.sha1(f"{message}|{tree_sha}|{parents}|{len(self.commits)}".encode()).hexdigest()
        self.commits[sha] = CommitRef(sha=sha, tree_sha=tree_sha, parent_shas=tuple(parents))
        return sha

    def _is_ancestor(self, ancestor: str, descendant: str) -> bool:
        pending = [descendant]
        while pending:
            sha = pending.pop()
            if sha == ancestor:
                return True
            pending.extend(self.commits[sha].parent_shas)
        return False

    # -- GitHubService surface --------------------------------------------

    async def get_ref(self, owner: str, repo: str, branch: str) -> str:
        self.calls.append("get_ref")
        if branch not in self.refs:
            raise RefNotFoundError(f"{owner}/{repo}", branch)
        return self.refs[branch]

    async def get_commit(self, owner: str, repo: str, commit_sha: str) -> CommitRef:
        self.calls.append("get_commit")
        return self.commits[commit_sha]

    async def get_branch_state(self, owner: str, repo: str, branch: str) -> BranchState:
        commit_sha = await self.get_ref(owner, repo, branch)
        commit = await self.get_commit(owner, repo, commit_sha)
        return BranchState(branch_name=branch, commit_sha=commit_sha, tree_sha=commit.tree_sha)

    async def create_blob(self, owner: str, repo: str, content: bytes) -> BlobRef:
        self.calls.append("create_blob")
        self.blobs_in_flight += 1
        self.max_blobs_in_flight = max(self.max_blobs_in_flight, self.blobs_in_flight)
        try:
            await asyncio.sleep(self.blob_delays.get(content, 0))
            if content in self.blob_failures:
                raise self.blob_failures[content]
        except asyncio.CancelledError:
            self.cancelled_uploads += 1
            raise
        finally:
            self.blobs_in_flight -= 1
        sha = git_blob_sha(content)
        self.blobs[sha] = content
        return BlobRef(sha=sha)

    async def create_tree(
        self,
        owner: str,
        repo: str,
        entries: list[TreeEntry],
        base_tree_sha: str | None = None,
    ) -> TreeRef:
        self.calls.append("create_tree")
        if base_tree_sha is not None and base_tree_sha not in self.trees:
            raise RemoteObjectError("GitHub rejected request: base_tree is invalid", 422)
        tree = dict(self.trees.get(base_tree_sha, {})) if base_tree_sha else {}
        for entry in entries:
            if entry.sha not in self.blobs:
                raise RemoteObjectError(f"Blob {entry.sha} does not exist", 422)
            tree[entry.path] = entry.sha
        return TreeRef(sha=self._store_tree(tree))

    async def create_commit(
        self,
        owner: str,
        repo: str,
        message: str,
        tree_sha: str,
        parent_shas: list[str],
    ) -> CommitRef:
        self.calls.append("create_commit")
        sha = self._store_commit(message, tree_sha, list(parent_shas))
        return self.commits[sha]

    async def update_ref(self, owner: str, repo: str, branch: str, commit_sha: str) -> None:
        self.calls.append("update_ref")
        if self.before_update_ref is not None:
            self.before_update_ref()
        if not self._is_ancestor(self.refs[branch], commit_sha):
            raise ConcurrentUpdateError(f"{owner}/{repo}", branch, commit_sha)
        self.refs[branch] = commit_sha

    async def get_repository(self, owner: str, repo: str) -> RepositoryInfo | None:
        self.calls.append("get_repository")
        return self.repos.get(f"{owner}/{repo}")

    async def get_authenticated_user(self) -> str:
        return self.login

    async def create_repository(
        self,
        owner: str,
        name: str,
        private: bool = False,
        description: str | None = None,
    ) -> RepositoryInfo:
        self.calls.append("create_repository")
        full_name = f"{owner}/{name}"
        if full_name in self.repos:
            raise RepositoryExistsError(full_name)
        info = RepositoryInfo(
            name=name,
            full_name=full_name,
            default_branch="main",
            is_private=private,
            url=f"https://github.com/{full_name}",
        )
        self.repos[full_name] = info
        self.seed_branch("main", {"README.md": f"# {name}\n".encode()})
        return info


@pytest.fixture
def fake_github() -> FakeGitHub:
    return FakeGitHub()
