"""Query runner protocol interface."""

from typing import Protocol, runtime_checkable

from ..schemas import ExecutionContext, ExecutionOutcome


@runtime_checkable
class QueryRunnerProtocol(Protocol):
    """Protocol for executing one SQL file against the target warehouse."""

    def run(
        self, file_path: str, content: str, context: ExecutionContext
    ) -> ExecutionOutcome:
        """Execute content synchronously and report its exit status."""
        ...
