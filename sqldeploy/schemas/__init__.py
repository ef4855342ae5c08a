"""Schemas for the application."""

from .execution import (
    ExecutionContext,
    ExecutionOutcome,
    RunResult,
    RunStatus,
)
from .git import (
    EXECUTABLE_STATUSES,
    CandidateFileList,
    ChangeSet,
    FileChange,
    FileStatus,
)
from .push_event import NULL_SHA, PushEvent

__all__ = [
    "EXECUTABLE_STATUSES",
    "NULL_SHA",
    "CandidateFileList",
    "ChangeSet",
    "ExecutionContext",
    "ExecutionOutcome",
    "FileChange",
    "FileStatus",
    "PushEvent",
    "RunResult",
    "RunStatus",
]
