"""Exceptions for GitHub service."""

from treepush.core.exceptions import TreePushError


class RemoteObjectError(TreePushError):
    """Error from the GitHub API while reading or creating Git objects."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        rate_limit_reset: int | None = None,
    ):
        self.message = message
        self.status_code = status_code
        self.rate_limit_reset = rate_limit_reset  # Unix timestamp when rate limit resets
        super().__init__(message)


class RefNotFoundError(RemoteObjectError):
    """The target branch does not exist on the remote repository."""

    def __init__(self, repo_name: str, branch: str):
        self.repo_name = repo_name
        self.branch = branch
        super().__init__(f"Branch '{branch}' not found in {repo_name}", 404)


class ConcurrentUpdateError(RemoteObjectError):
    """The branch moved between reading its head and updating it.

    GitHub rejects the fast-forward-only ref update with a 422 when the new
    commit no longer descends from the current branch head.
    """

    def __init__(self, repo_name: str, branch: str, commit_sha: str):
        self.repo_name = repo_name
        self.branch = branch
        self.commit_sha = commit_sha
        super().__init__(
            f"Branch '{branch}' in {repo_name} was updated concurrently; "
            f"refusing to overwrite it with {commit_sha[:7]}",
            422,
        )


class RepositoryExistsError(RemoteObjectError):
    """A repository with the requested name already exists for the owner."""

    def __init__(self, full_name: str):
        self.full_name = full_name
        super().__init__(f"Repository {full_name} already exists", 422)


class RepositoryMovedError(RemoteObjectError):
    """Repository has been renamed or transferred on GitHub.

    When GitHub returns a 301 redirect, this exception provides the old and new
    repository names so callers can point the upload at the new location.

    In some cases, GitHub redirects to a repository ID-based URL instead of
    providing the new owner/repo directly. When this happens, new_full_name
    will be None and repo_id will contain the GitHub repository ID.
    """

    def __init__(
        self,
        old_full_name: str,
        new_full_name: str | None = None,
        repo_id: int | None = None,
    ):
        self.old_full_name = old_full_name
        self.new_full_name = new_full_name
        self.repo_id = repo_id

        if new_full_name:
            message = f"Repository renamed: {old_full_name} → {new_full_name}"
        elif repo_id:
            message = f"Repository {old_full_name} moved (GitHub ID: {repo_id})"
        else:
            message = f"Repository {old_full_name} was moved"

        super().__init__(message, status_code=301)
