"""Data types for the upload workflow."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class FileEntry:
    """A local file ready to be uploaded."""

    relative_path: str  # POSIX separators, relative to the local root
    content: bytes


@dataclass
class UploadResult:
    """Outcome of a successful upload."""

    owner: str
    repo: str
    branch: str
    previous_commit_sha: str
    commit_sha: str
    tree_sha: str
    files_uploaded: int
    paths: list[str] = field(default_factory=list)

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"
