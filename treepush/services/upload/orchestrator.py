"""
Upload orchestrator.

Coordinates the end-to-end upload of a local directory as one commit:
1. Resolve the branch head (commit + tree)
2. Read local files
3. Upload a blob per file (concurrently)
4. Build a tree on top of the head's tree
5. Build a single-parent commit
6. Fast-forward the branch to the new commit

Steps run strictly in order; nothing is retried. A failure at any step
leaves the branch untouched, at worst with unreferenced blobs or trees on
GitHub.
"""

import asyncio
import logging
import os
from collections.abc import Iterable, Sequence

from treepush.config import settings
from treepush.core.exceptions import LocalIOError
from treepush.services.github.exceptions import RemoteObjectError
from treepush.services.github.service import GitHubService
from treepush.services.github.types import BlobRef, BranchState, RepositoryInfo
from treepush.services.upload.graph_builder import ObjectGraphBuilder
from treepush.services.upload.local_files import LocalFileSource
from treepush.services.upload.types import FileEntry, UploadResult

logger = logging.getLogger(__name__)


class UploadOrchestrator:
    """
    Uploads a directory tree to a GitHub branch as a single commit.

    Args:
        github: Authenticated GitHub client
        max_concurrency: Blob uploads allowed in flight at once; 0 means
            unbounded (defaults to settings.upload_max_concurrency)
    """

    def __init__(self, github: GitHubService, max_concurrency: int | None = None):
        self.github = github
        self.max_concurrency = (
            settings.upload_max_concurrency if max_concurrency is None else max_concurrency
        )
        if self.max_concurrency < 0:
            raise ValueError("max_concurrency must be >= 0")

    async def resolve_branch_head(self, owner: str, repo: str, branch: str) -> BranchState:
        """
        Read the branch's current commit and tree.

        Raises:
            RefNotFoundError: If the branch does not exist
        """
        return await self.github.get_branch_state(owner, repo, branch)

    async def enumerate_files(
        self,
        local_root: str | os.PathLike[str],
        exclude: Iterable[str] = (),
    ) -> list[FileEntry]:
        """Read every file under local_root, ordered by relative path."""
        return await LocalFileSource(local_root, exclude=exclude).enumerate_files()

    async def upload_blobs(
        self,
        owner: str,
        repo: str,
        entries: Sequence[FileEntry],
    ) -> list[BlobRef]:
        """
        Create one blob per entry, concurrently.

        The returned list lines up index for index with entries, whatever
        order the uploads finish in. The first failed upload cancels the
        ones still running and is re-raised.
        """
        semaphore = asyncio.Semaphore(self.max_concurrency) if self.max_concurrency else None

        async def upload(entry: FileEntry) -> BlobRef:
            try:
                if semaphore is None:
                    return await self.github.create_blob(owner, repo, entry.content)
                async with semaphore:
                    return await self.github.create_blob(owner, repo, entry.content)
            except RemoteObjectError as e:
                logger.error(f"Failed to upload {entry.relative_path}: {e}")
                raise

        tasks = [asyncio.create_task(upload(entry)) for entry in entries]
        try:
            blobs = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        return list(blobs)

    async def update_branch(self, owner: str, repo: str, branch: str, commit_sha: str) -> None:
        """
        Fast-forward the branch to commit_sha.

        Raises:
            ConcurrentUpdateError: If someone else moved the branch meanwhile
        """
        await self.github.update_ref(owner, repo, branch, commit_sha)

    async def run(
        self,
        local_root: str | os.PathLike[str],
        owner: str,
        repo: str,
        branch: str = "main",
        commit_message: str = "Upload files",
        exclude: Iterable[str] = (),
    ) -> UploadResult:
        """
        Upload local_root to owner/repo@branch as one commit.

        Returns:
            UploadResult describing the new commit

        Raises:
            ValueError: If commit_message is blank; nothing is written remotely
        """
        if not commit_message or not commit_message.strip():
            raise ValueError("Commit message must not be empty")
        full_name = f"{owner}/{repo}"

        # 1. Resolve the branch head
        head = await self.resolve_branch_head(owner, repo, branch)
        logger.info(f"{full_name}@{branch} is at {head.commit_sha[:7]}")

        # 2. Read local files
        entries = await self.enumerate_files(local_root, exclude)
        if not entries:
            raise LocalIOError(f"No files to upload under {local_root}", os.fspath(local_root))
        logger.info(f"Uploading {len(entries)} files from {local_root}")

        # 3. Upload blobs
        blobs = await self.upload_blobs(owner, repo, entries)

        # 4-5. Tree and commit
        builder = ObjectGraphBuilder(self.github, owner, repo)
        paths = [entry.relative_path for entry in entries]
        tree = await builder.build_tree(blobs, paths, head.tree_sha)
        commit = await builder.build_commit(commit_message, tree, head.commit_sha)

        # 6. Move the branch
        await self.update_branch(owner, repo, branch, commit.sha)
        logger.info(f"Updated {full_name}@{branch}: {head.commit_sha[:7]} → {commit.sha[:7]}")

        return UploadResult(
            owner=owner,
            repo=repo,
            branch=branch,
            previous_commit_sha=head.commit_sha,
            commit_sha=commit.sha,
            tree_sha=tree.sha,
            files_uploaded=len(entries),
            paths=paths,
        )

    async def create_repository(
        self,
        owner: str,
        name: str,
        private: bool = False,
        description: str | None = None,
    ) -> RepositoryInfo:
        """
        Create an auto-initialized repository so it has a branch to upload to.

        Raises:
            RepositoryExistsError: If owner already has a repository called name
        """
        return await self.github.create_repository(
            owner, name, private=private, description=description
        )

    async def ensure_repository(
        self,
        owner: str,
        name: str,
        private: bool = False,
        description: str | None = None,
    ) -> RepositoryInfo:
        """Return the repository, creating it first if it does not exist."""
        existing = await self.github.get_repository(owner, name)
        if existing is not None:
            logger.info(f"Repository {existing.full_name} already exists")
            return existing
        return await self.create_repository(owner, name, private=private, description=description)
