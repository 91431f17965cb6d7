"""
GitHub API helper utilities.

Provides rate limit parsing and error response processing shared by the read
and write operations. Every non-2xx response is turned into a
RemoteObjectError (or one of its subclasses) here.
"""

import logging
import re

import httpx

from treepush.services.github.exceptions import RemoteObjectError, RepositoryMovedError

logger = logging.getLogger(__name__)


class RateLimitInfo:
    """Rate limit information from GitHub API response."""

    def __init__(self, response: httpx.Response) -> None:
        self.remaining = response.headers.get("X-RateLimit-Remaining")
        self.reset = response.headers.get("X-RateLimit-Reset")

    @property
    def reset_timestamp(self) -> int | None:
        """Get reset timestamp as integer, or None if not available."""
        return int(self.reset) if self.reset else None

    @property
    def is_exhausted(self) -> bool:
        """Check if rate limit is exhausted."""
        return self.remaining is not None and int(self.remaining) == 0


def parse_redirect_location(location: str) -> tuple[str, str] | None:
    """
    Extract owner/repo from GitHub redirect Location header.

    When a repository is renamed or transferred, GitHub returns a 301 with a
    Location header pointing to the new URL.

    Args:
        location: The Location header value, which can be:
            - Absolute: "https://api.github.com/repos/owner/newname/..."
            - Relative: "/repos/owner/newname/..."

    Returns:
        Tuple of (owner, repo) if parseable, None otherwise
    """
    if not location:
        return None

    match = re.match(r"https?://[^/]+(?:/api/v3)?/repos/([^/]+)/([^/]+)", location)
    if match:
        return (match.group(1), match.group(2))

    match = re.match(r"/repos/([^/]+)/([^/]+)", location)
    if match:
        return (match.group(1), match.group(2))

    return None


def parse_redirect_repo_id(location: str) -> int | None:
    """
    Extract repository ID from GitHub redirect Location header.

    GitHub sometimes redirects to a repository ID-based URL instead of owner/repo:
    https://api.github.com/repositories/1133274306/git/refs/heads/main
    """
    if not location:
        return None

    match = re.match(r"https?://[^/]+(?:/api/v3)?/repositories/(\d+)", location)
    if match:
        return int(match.group(1))

    match = re.match(r"/repositories/(\d+)", location)
    if match:
        return int(match.group(1))

    return None


def error_detail(response: httpx.Response) -> str | None:
    """Return GitHub's ``message`` field from an error body, if there is one."""
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        message = body.get("message")
        return str(message) if message else None
    return None


def handle_error_response(response: httpx.Response, repo_name: str) -> None:
    """
    Handle common error responses from GitHub API.

    Args:
        response: The HTTP response from GitHub API
        repo_name: Repository name for error context (format: "owner/repo")

    Raises:
        RepositoryMovedError: If repository was renamed/transferred (301)
        RemoteObjectError: For authentication, authorization, validation or
            any other non-2xx response
    """
    if response.is_success:
        return

    rate_info = RateLimitInfo(response)

    if response.status_code == 301:
        location = response.headers.get("Location", "")
        logger.debug(f"Got 301 redirect for {repo_name}, Location header: {location!r}")

        new_repo = parse_redirect_location(location)
        if new_repo:
            new_full_name = f"{new_repo[0]}/{new_repo[1]}"
            logger.info(f"Repository redirect detected: {repo_name} → {new_full_name}")
            raise RepositoryMovedError(repo_name, new_full_name)

        repo_id = parse_redirect_repo_id(location)
        if repo_id:
            logger.info(f"Repository redirect to ID detected: {repo_name} → ID {repo_id}")
            raise RepositoryMovedError(repo_name, new_full_name=None, repo_id=repo_id)

        logger.warning(
            f"Repository {repo_name} returned 301 but Location header couldn't be parsed. "
            f"Location: {location!r}"
        )
        raise RemoteObjectError(
            f"Repository {repo_name} was moved (301), but couldn't parse new location",
            301,
        )
    elif response.status_code == 401:
        raise RemoteObjectError("Invalid or expired GitHub token", 401)
    elif response.status_code == 404:
        raise RemoteObjectError(f"Repository or resource not found: {repo_name}", 404)
    elif response.status_code in (403, 429):
        if rate_info.is_exhausted or response.status_code == 429:
            raise RemoteObjectError(
                "GitHub API rate limit exceeded",
                response.status_code,
                rate_limit_reset=rate_info.reset_timestamp,
            )
        raise RemoteObjectError("GitHub API forbidden", 403)
    elif response.status_code == 422:
        detail = error_detail(response) or "validation failed"
        raise RemoteObjectError(f"GitHub rejected request for {repo_name}: {detail}", 422)
    else:
        raise RemoteObjectError(
            f"GitHub API error: {response.status_code}", response.status_code
        )
