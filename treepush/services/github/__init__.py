"""
GitHub service package.

Usage: `from treepush.services.github import GitHubService, TreeEntry`

Module structure:
- service.py: Main GitHubService facade
- read_operations.py: Ref, commit, repository and user reads
- write_operations.py: Blob/tree/commit creation, ref updates, repository creation
- helpers.py: Rate limit handling and error utilities
- http_client.py: Shared connection-pooled HTTP client
- types.py: Git object types
- exceptions.py: Custom exceptions
"""

from treepush.services.github.exceptions import (
    ConcurrentUpdateError,
    RefNotFoundError,
    RemoteObjectError,
    RepositoryExistsError,
    RepositoryMovedError,
)
from treepush.services.github.helpers import RateLimitInfo, handle_error_response
from treepush.services.github.http_client import close_github_client
from treepush.services.github.read_operations import GitHubReadOperations
from treepush.services.github.service import GitHubService
from treepush.services.github.types import (
    BlobRef,
    BranchState,
    CommitRef,
    FileMode,
    ObjectType,
    RepositoryInfo,
    TreeEntry,
    TreeRef,
)
from treepush.services.github.write_operations import GitHubWriteOperations

__all__ = [
    # Service (main entry point)
    "GitHubService",
    # Operation classes (for direct use if needed)
    "GitHubReadOperations",
    "GitHubWriteOperations",
    # HTTP client lifecycle
    "close_github_client",
    # Utilities
    "handle_error_response",
    "RateLimitInfo",
    # Exceptions
    "ConcurrentUpdateError",
    "RefNotFoundError",
    "RemoteObjectError",
    "RepositoryExistsError",
    "RepositoryMovedError",
    # Types
    "BlobRef",
    "BranchState",
    "CommitRef",
    "FileMode",
    "ObjectType",
    "RepositoryInfo",
    "TreeEntry",
    "TreeRef",
]
