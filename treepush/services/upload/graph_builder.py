"""
Git object graph construction.

Turns uploaded blobs and their paths into a tree layered on a base tree, and
a tree plus its parent into a commit. The merge into the base tree happens on
GitHub; this module only shapes the entries and validates them.
"""

import logging
from collections import Counter
from collections.abc import Sequence

from treepush.services.github.service import GitHubService
from treepush.services.github.types import (
    BlobRef,
    CommitRef,
    FileMode,
    ObjectType,
    TreeEntry,
    TreeRef,
)

logger = logging.getLogger(__name__)


def build_tree_entries(blob_refs: Sequence[BlobRef], relative_paths: Sequence[str]) -> list[TreeEntry]:
    """
    Pair blobs with paths positionally into regular-file tree entries.

    Raises:
        ValueError: If the sequences differ in length or a path repeats
    """
    if len(blob_refs) != len(relative_paths):
        raise ValueError(
            f"Got {len(blob_refs)} blobs for {len(relative_paths)} paths; they must pair up"
        )

    duplicates = sorted(path for path, count in Counter(relative_paths).items() if count > 1)
    if duplicates:
        raise ValueError(f"Duplicate paths in tree: {', '.join(duplicates)}")

    return [
        TreeEntry(path=path, mode=FileMode.REGULAR, type=ObjectType.BLOB, sha=blob.sha)
        for blob, path in zip(blob_refs, relative_paths, strict=True)
    ]


class ObjectGraphBuilder:
    """Creates the tree and commit objects for one upload."""

    def __init__(self, github: GitHubService, owner: str, repo: str):
        self.github = github
        self.owner = owner
        self.repo = repo

    async def build_tree(
        self,
        blob_refs: Sequence[BlobRef],
        relative_paths: Sequence[str],
        base_tree_sha: str,
    ) -> TreeRef:
        """
        Create a tree containing base_tree_sha plus the given blobs.

        Entries at paths that already exist in the base tree replace them;
        every other path of the base tree is kept.
        """
        entries = build_tree_entries(blob_refs, relative_paths)
        tree = await self.github.create_tree(self.owner, self.repo, entries, base_tree_sha)
        logger.debug(f"Created tree {tree.sha} with {len(entries)} entries on {base_tree_sha}")
        return tree

    async def build_commit(
        self,
        message: str,
        tree_ref: TreeRef,
        parent_commit_sha: str,
    ) -> CommitRef:
        """Create a single-parent commit for tree_ref."""
        if not message.strip():
            raise ValueError("Commit message must not be empty")

        commit = await self.github.create_commit(
            self.owner, self.repo, message, tree_ref.sha, [parent_commit_sha]
        )
        logger.debug(f"Created commit {commit.sha} (parent {parent_commit_sha})")
        return commit
