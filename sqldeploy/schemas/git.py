from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class FileStatus(str, Enum):
    """Enum for file change statuses."""

    ADDED = "A"
    MODIFIED = "M"
    DELETED = "D"
    RENAMED = "R"


EXECUTABLE_STATUSES = (FileStatus.ADDED, FileStatus.MODIFIED, FileStatus.RENAMED)


class FileChange(BaseModel):
    """Represents a file change detected by git diff."""

    status: FileStatus
    file_path: str
    old_file_path: Optional[str] = None  # For renamed files


class ChangeSet(BaseModel):
    """Classified changes between two revisions, in diff listing order.

    A path is recorded under one kind only: adding a change for a path
    that is already present is ignored.
    """

    base: str = ""
    head: str = ""
    changes: List[FileChange] = Field(default_factory=list)

    def add(self, change: FileChange) -> bool:
        if any(existing.file_path == change.file_path for existing in self.changes):
            return False
        self.changes.append(change)
        return True

    def paths(self, status: FileStatus) -> List[str]:
        return [c.file_path for c in self.changes if c.status == status]

    @property
    def added(self) -> List[str]:
        return self.paths(FileStatus.ADDED)

    @property
    def modified(self) -> List[str]:
        return self.paths(FileStatus.MODIFIED)

    @property
    def renamed(self) -> List[str]:
        return self.paths(FileStatus.RENAMED)

    @property
    def deleted(self) -> List[str]:
        return self.paths(FileStatus.DELETED)

    def __len__(self) -> int:
        return len(self.changes)


class CandidateFileList(BaseModel):
    """Ordered, duplicate-free paths eligible for execution."""

    paths: List[str] = Field(default_factory=list)

    def __len__(self) -> int:
        return len(self.paths)

    def __bool__(self) -> bool:
        return bool(self.paths)
