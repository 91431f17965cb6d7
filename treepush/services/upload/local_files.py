"""
Local file enumeration.

Walks a directory tree and produces FileEntry objects with root-relative
POSIX paths, in a deterministic order.
"""

import asyncio
import fnmatch
import logging
import os
from collections.abc import Iterable

from treepush.core.exceptions import LocalIOError
from treepush.services.upload.types import FileEntry

logger = logging.getLogger(__name__)


class LocalFileSource:
    """
    Reads every file under a root directory.

    Paths are computed only from the root and each file's location, sorted,
    and use "/" separators regardless of platform. Symlinked directories are
    not followed.

    Args:
        root: Directory to upload
        exclude: fnmatch patterns; a file is skipped when its relative path
            or any of its directory names matches one of them
    """

    def __init__(self, root: str | os.PathLike[str], exclude: Iterable[str] = ()):
        self.root = os.path.abspath(os.fspath(root))
        self.exclude = tuple(exclude)

    def _is_excluded(self, relative_path: str) -> bool:
        if not self.exclude:
            return False
        parts = relative_path.split("/")
        return any(
            fnmatch.fnmatch(relative_path, pattern)
            or any(fnmatch.fnmatch(part, pattern) for part in parts)
            for pattern in self.exclude
        )

    def list_paths(self) -> list[str]:
        """
        List relative paths of all files under the root.

        Raises:
            LocalIOError: If the root is missing, not a directory, or a
                directory inside it cannot be listed
        """
        if not os.path.isdir(self.root):
            raise LocalIOError(f"Local root is not a readable directory: {self.root}", self.root)

        def _on_error(error: OSError) -> None:
            raise LocalIOError(f"Cannot list {error.filename}: {error.strerror}", error.filename)

        paths = []
        for dirpath, dirnames, filenames in os.walk(self.root, onerror=_on_error):
            dirnames.sort()
            for filename in filenames:
                full_path = os.path.join(dirpath, filename)
                relative_path = os.path.relpath(full_path, self.root).replace(os.sep, "/")
                if self._is_excluded(relative_path):
                    continue
                paths.append(relative_path)

        paths.sort()
        logger.debug(f"Found {len(paths)} files under {self.root}")
        return paths

    def read(self, relative_path: str) -> FileEntry:
        """Read one file as bytes."""
        full_path = os.path.join(self.root, *relative_path.split("/"))
        try:
            with open(full_path, "rb") as f:
                content = f.read()
        except OSError as e:
            raise LocalIOError(f"Cannot read {relative_path}: {e.strerror}", full_path) from e
        return FileEntry(relative_path=relative_path, content=content)

    def read_all(self) -> list[FileEntry]:
        """Read every file under the root, ordered by relative path."""
        return [self.read(path) for path in self.list_paths()]

    async def enumerate_files(self) -> list[FileEntry]:
        """Async wrapper around read_all; file I/O runs in a worker thread."""
        return await asyncio.to_thread(self.read_all)
