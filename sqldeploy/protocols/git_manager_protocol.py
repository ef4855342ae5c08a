"""Git Manager protocol interface."""

from pathlib import Path
from typing import Optional, Protocol, runtime_checkable

from ..schemas import ChangeSet


@runtime_checkable
class GitManagerProtocol(Protocol):
    """Protocol for detecting changed files in a working tree."""

    @property
    def local_path(self) -> Path:
        """Local repository path."""
        ...

    @property
    def sql_glob(self) -> str:
        """Glob restricting which changed paths are reported."""
        ...

    def get_changed_files(
        self, base: Optional[str] = None, head: Optional[str] = None
    ) -> ChangeSet:
        """Get changes between two revisions. Raises HistoryResolutionError."""
        ...

    def get_file_content(self, file_path: str) -> str:
        """Get content of a specific file. Raises OSError if unreadable."""
        ...
