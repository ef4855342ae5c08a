import sys
from pathlib import Path
from typing import Optional, Union

from git import Repo
from git.exc import (
    BadName,
    BadObject,
    GitCommandError,
    InvalidGitRepositoryError,
    NoSuchPathError,
)
from git.objects import Commit, Tree

from ..errors import HistoryResolutionError
from ..schemas import NULL_SHA, ChangeSet, FileChange, FileStatus
from .path_filter import matches_glob

# Well-known id of the empty tree; git resolves it without it being stored
EMPTY_TREE_SHA = "4b825dc642cb6eb9a060e54bf8d69288fbee4904"

_STATUS_BY_CHANGE_TYPE = {
    "A": FileStatus.ADDED,
    "M": FileStatus.MODIFIED,
    "T": FileStatus.MODIFIED,
    "D": FileStatus.DELETED,
    "R": FileStatus.RENAMED,
}


class GitManager:
    """Detects SQL file changes between two revisions of a working tree."""

    def __init__(self, local_path: str, sql_glob: str):
        self.local_path = Path(local_path)
        self.sql_glob = sql_glob
        self.repo: Optional[Repo] = None

    def setup_repository(self) -> Repo:
        """Open the repository checked out at local_path."""
        if self.repo is None:
            try:
                self.repo = Repo(self.local_path, search_parent_directories=True)
            except (InvalidGitRepositoryError, NoSuchPathError) as e:
                raise HistoryResolutionError(
                    f"No git repository found at {self.local_path}"
                ) from e
        return self.repo

    def resolve_commit(self, rev: str) -> Commit:
        repo = self.setup_repository()
        try:
            return repo.commit(rev)
        except (BadName, BadObject, GitCommandError, ValueError) as e:
            raise HistoryResolutionError(
                f"Cannot resolve revision '{rev}'. "
                "Check out the repository with full history (fetch-depth: 0)."
            ) from e

    def resolve_base(
        self, base: Optional[str], head_commit: Commit
    ) -> Union[Commit, Tree]:
        """Resolve the base revision, falling back to the head's first parent.

        A root commit has no parent, so it is compared against the empty tree.
        """
        if base and base != NULL_SHA:
            return self.resolve_commit(base)
        if head_commit.parents:
            return head_commit.parents[0]
        return Tree(self.setup_repository(), bytes.fromhex(EMPTY_TREE_SHA))

    def get_changed_files(
        self, base: Optional[str] = None, head: Optional[str] = None
    ) -> ChangeSet:
        """Get the changes matching sql_glob between base and head."""
        head_commit = self.resolve_commit(head or "HEAD")
        base_object = self.resolve_base(base, head_commit)

        try:
            diff_items = base_object.diff(head_commit)
        except GitCommandError as e:
            raise HistoryResolutionError(
                f"Failed to diff {base_object.hexsha}..{head_commit.hexsha}: {e}"
            ) from e

        change_set = ChangeSet(base=base_object.hexsha, head=head_commit.hexsha)
        for item in diff_items:
            status = _STATUS_BY_CHANGE_TYPE.get(item.change_type)
            if status is None:
                print(
                    f"Ignoring {item.change_type} change: {item.b_path or item.a_path}",
                    file=sys.stderr,
                )
                continue

            if status == FileStatus.DELETED:
                file_path = item.a_path
            else:
                file_path = item.b_path or item.a_path
            old_file_path = item.a_path if status == FileStatus.RENAMED else None

            if file_path and matches_glob(file_path, self.sql_glob):
                change_set.add(
                    FileChange(
                        status=status,
                        file_path=file_path,
                        old_file_path=old_file_path,
                    )
                )

        if not change_set.changes:
            print("No changes detected", file=sys.stderr)
        return change_set

    def get_file_content(self, file_path: str) -> str:
        """Get content of a file in the working tree."""
        full_path = self.local_path / file_path
        if self.repo is not None and self.repo.working_tree_dir:
            full_path = Path(self.repo.working_tree_dir) / file_path
        return full_path.read_text(encoding="utf-8")
