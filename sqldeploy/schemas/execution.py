from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from ..errors import normalize_exit_code


class ExecutionContext(BaseModel):
    """Target warehouse identity handed to every query invocation."""

    project_id: str
    credentials_file: Optional[str] = None


class ExecutionOutcome(BaseModel):
    """Result of running the query command for a single file."""

    file_path: str
    exit_code: int

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0


class RunStatus(str, Enum):
    SKIPPED = "skipped"
    ALL_SUCCEEDED = "all_succeeded"
    HALTED_ON_FAILURE = "halted_on_failure"


class RunResult(BaseModel):
    """Terminal state of a deployment run."""

    status: RunStatus
    executed: List[str] = Field(default_factory=list)
    failed_path: Optional[str] = None
    exit_code: int = 0

    @property
    def process_exit_code(self) -> int:
        """Exit status the hosting CI job should see."""
        if self.status == RunStatus.HALTED_ON_FAILURE:
            return normalize_exit_code(self.exit_code)
        return 0

    @classmethod
    def skipped(cls) -> "RunResult":
        return cls(status=RunStatus.SKIPPED)

    @classmethod
    def all_succeeded(cls, executed: List[str]) -> "RunResult":
        return cls(status=RunStatus.ALL_SUCCEEDED, executed=executed)

    @classmethod
    def halted(cls, executed: List[str], path: str, exit_code: int) -> "RunResult":
        return cls(
            status=RunStatus.HALTED_ON_FAILURE,
            executed=executed,
            failed_path=path,
            exit_code=exit_code,
        )
