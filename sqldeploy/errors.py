"""sqldeploy exception hierarchy.

Every error carries the process exit code the CLI terminates with,
so a failed run always surfaces as a non-zero job status.
"""

from typing import Optional

# Used when the failing command produced no usable process status.
SENTINEL_EXIT_CODE = 1
COMMAND_NOT_EXECUTABLE_EXIT_CODE = 126
COMMAND_NOT_FOUND_EXIT_CODE = 127


class SqlDeployError(Exception):
    """Base exception for all sqldeploy errors."""

    exit_code: int = SENTINEL_EXIT_CODE


class ConfigurationError(SqlDeployError):
    """Missing or invalid project, glob or command configuration."""

    exit_code = 2


class HistoryResolutionError(SqlDeployError):
    """The revision range for change detection cannot be resolved."""

    exit_code = 3


class ExecutionError(SqlDeployError):
    """A candidate file's query command failed."""

    def __init__(self, path: str, exit_code: Optional[int], message: str = ""):
        self.path = path
        self.command_exit_code = exit_code
        self.exit_code = normalize_exit_code(exit_code)
        super().__init__(
            message or f"Error executing query from {path} (exit code {exit_code})"
        )


def normalize_exit_code(exit_code: Optional[int]) -> int:
    """Map a command status onto a non-zero process exit code."""
    if exit_code is not None and 0 < exit_code < 256:
        return exit_code
    return SENTINEL_EXIT_CODE
