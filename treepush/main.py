"""
Command line entry point.

Usage:
    treepush ./site my-org my-repo -b main -m "Publish site"

The GitHub token is read from GITHUB_ACCESS_TOKEN (or a .env file).
"""

import argparse
import asyncio
import logging
import sys

from treepush.config import settings
from treepush.core.exceptions import TreePushError
from treepush.services.github import GitHubService, close_github_client
from treepush.services.upload import UploadOrchestrator, UploadResult

logger = logging.getLogger(__name__)


def setup_logging(level: str | int = logging.INFO) -> None:
    """Configure application logging."""
    # Format: timestamp - level - logger name - message
    log_format = "%(asctime)s | %(levelname)-7s | %(name)s | %(message)s"
    date_format = "%H:%M:%S"

    logging.basicConfig(
        level=level,
        format=log_format,
        datefmt=date_format,
        stream=sys.stdout,
        force=True,
    )

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("hpack").setLevel(logging.WARNING)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="treepush",
        description="Upload a local directory to a GitHub branch as a single commit.",
    )
    parser.add_argument("local_root", help="directory whose files are uploaded")
    parser.add_argument("owner", help="user or organization that owns the repository")
    parser.add_argument("repo", help="repository name")
    parser.add_argument("-b", "--branch", default=settings.default_branch)
    parser.add_argument("-m", "--message", default=settings.default_commit_message)
    parser.add_argument(
        "--create-repo",
        action="store_true",
        help="create the repository (auto-initialized) if it does not exist",
    )
    parser.add_argument("--private", action="store_true", help="make a created repository private")
    parser.add_argument(
        "--exclude",
        action="append",
        default=[],
        metavar="PATTERN",
        help="skip files whose path or directory names match PATTERN (repeatable)",
    )
    parser.add_argument(
        "--max-concurrency",
        type=int,
        default=settings.upload_max_concurrency,
        help="blob uploads in flight at once, 0 for unbounded",
    )
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)
    if not args.message.strip():
        parser.error("commit message must not be empty")
    return args


async def upload(args: argparse.Namespace, token: str) -> UploadResult:
    github = GitHubService(token, base_url=settings.github_api_url)
    orchestrator = UploadOrchestrator(github, max_concurrency=args.max_concurrency)
    try:
        if args.create_repo:
            await orchestrator.ensure_repository(args.owner, args.repo, private=args.private)
        return await orchestrator.run(
            args.local_root,
            args.owner,
            args.repo,
            branch=args.branch,
            commit_message=args.message,
            exclude=args.exclude,
        )
    finally:
        await close_github_client()


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose or settings.debug else settings.log_level.upper())

    if not settings.github_enabled:
        logger.error("GITHUB_ACCESS_TOKEN is not set")
        return 1
    if args.max_concurrency < 0:
        logger.error("--max-concurrency must be >= 0")
        return 2

    try:
        result = asyncio.run(upload(args, settings.github_access_token))
    except TreePushError as e:
        logger.error(f"Upload failed: {e}")
        return 1

    logger.info(
        f"Committed {result.files_uploaded} files to {result.full_name}@{result.branch} "
        f"({result.commit_sha})"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
