"""Data types for Git objects created and read through the GitHub API."""

from dataclasses import dataclass, field
from enum import Enum


class FileMode(str, Enum):
    """Unix-style mode of a tree entry, as GitHub expects it."""

    REGULAR = "100644"
    EXECUTABLE = "100755"
    SUBDIRECTORY = "040000"
    SUBMODULE = "160000"
    SYMLINK = "120000"


class ObjectType(str, Enum):
    """Kind of Git object a tree entry points at."""

    BLOB = "blob"
    TREE = "tree"
    COMMIT = "commit"


@dataclass(frozen=True)
class BlobRef:
    """A blob stored on GitHub."""

    sha: str


@dataclass(frozen=True)
class TreeEntry:
    """Binds a Git object to a path inside a tree.

    mode and type accept the raw API strings as well as the enums; anything
    outside the enumerations is rejected here instead of by GitHub.
    """

    path: str
    mode: FileMode
    type: ObjectType
    sha: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "mode", FileMode(self.mode))
        object.__setattr__(self, "type", ObjectType(self.type))

        if not self.path or self.path.startswith("/") or self.path.endswith("/"):
            raise ValueError(f"Invalid tree entry path: {self.path!r}")
        if any(part in ("", ".", "..") for part in self.path.split("/")):
            raise ValueError(f"Invalid tree entry path: {self.path!r}")
        if not self.sha:
            raise ValueError(f"Tree entry {self.path!r} has no sha")

    def to_api(self) -> dict[str, str]:
        """Request body item for POST /git/trees."""
        return {
            "path": self.path,
            "mode": self.mode.value,
            "type": self.type.value,
            "sha": self.sha,
        }


@dataclass(frozen=True)
class TreeRef:
    """A tree stored on GitHub."""

    sha: str


@dataclass(frozen=True)
class CommitRef:
    """A commit stored on GitHub."""

    sha: str
    tree_sha: str
    parent_shas: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class BranchState:
    """Head of a branch as observed at one point in time."""

    branch_name: str
    commit_sha: str
    tree_sha: str


@dataclass
class RepositoryInfo:
    """Normalized GitHub repository data."""

    name: str
    full_name: str
    default_branch: str
    is_private: bool
    url: str
