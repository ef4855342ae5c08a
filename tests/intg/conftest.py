import shlex
import sys
from pathlib import Path

import pytest
from git import Actor, Repo

AUTHOR = Actor("CI Bot", "ci@example.com")

FAKE_BQ = """\
import sys

project_id = sys.argv[2]
sql = sys.stdin.read()
with open(sys.argv[1], "a", encoding="utf-8") as log:
    log.write(project_id + " " + sql.splitlines()[0] + "\\n")
sys.exit(7 if "FAIL" in sql else 0)
"""


class SqlRepo:
    """Small wrapper committing SQL files into a throwaway repository."""

    def __init__(self, path: Path):
        self.path = path
        self.repo = Repo.init(path)

    def write(self, file_path: str, content: str) -> None:
        full_path = self.path / file_path
        full_path.parent.mkdir(parents=True, exist_ok=True)
        full_path.write_text(content, encoding="utf-8")

    def remove(self, file_path: str) -> None:
        (self.path / file_path).unlink()

    def move(self, old_path: str, new_path: str) -> None:
        target = self.path / new_path
        target.parent.mkdir(parents=True, exist_ok=True)
        (self.path / old_path).rename(target)

    def commit(self, message: str = "update") -> str:
        self.repo.git.add("-A")
        commit = self.repo.index.commit(message, author=AUTHOR, committer=AUTHOR)
        return commit.hexsha


@pytest.fixture
def sql_repo(tmp_path):
    return SqlRepo(tmp_path / "repo")


@pytest.fixture
def fake_bq(tmp_path):
    """Query command that logs each call and fails on SQL containing FAIL."""
    script = tmp_path / "fake_bq.py"
    script.write_text(FAKE_BQ, encoding="utf-8")
    log_path = tmp_path / "calls.log"
    command = " ".join(
        [
            shlex.quote(sys.executable),
            shlex.quote(str(script)),
            shlex.quote(str(log_path)),
            "{project_id}",
        ]
    )
    return command, log_path
