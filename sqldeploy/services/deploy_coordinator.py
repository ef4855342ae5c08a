"""Coordinates change detection and sequential query execution."""

from typing import Any, Dict, Generator, List, Optional

from ..errors import SENTINEL_EXIT_CODE
from ..models import build_candidates
from ..protocols.git_manager_protocol import GitManagerProtocol
from ..protocols.query_runner_protocol import QueryRunnerProtocol
from ..schemas import CandidateFileList, ExecutionContext, RunResult


class DeployCoordinator:
    """Runs every changed SQL file in order, halting on the first failure."""

    def __init__(
        self,
        git_manager: GitManagerProtocol,
        query_runner: QueryRunnerProtocol,
        sort_candidates: bool = False,
    ):
        self.git_manager = git_manager
        self.query_runner = query_runner
        self.sort_candidates = sort_candidates

    def collect_candidates(
        self, base: Optional[str] = None, head: Optional[str] = None
    ) -> CandidateFileList:
        """Detect changes and flatten them into the execution order."""
        change_set = self.git_manager.get_changed_files(base, head)
        return build_candidates(
            change_set, self.git_manager.sql_glob, sort=self.sort_candidates
        )

    def deploy_stream(
        self,
        context: ExecutionContext,
        base: Optional[str] = None,
        head: Optional[str] = None,
    ) -> Generator[Dict[str, Any], None, None]:
        """Execute candidate files with streaming progress updates.

        The last event is always of type "complete" and carries the RunResult.
        Configuration and history errors are raised, not streamed.
        """
        yield {
            "type": "status",
            "message": f"Detecting changed files matching {self.git_manager.sql_glob}...",
        }
        candidates = self.collect_candidates(base, head)

        if not candidates:
            yield {
                "type": "complete",
                "message": (
                    "No SQL files (added, modified, or renamed) matching "
                    f"'{self.git_manager.sql_glob}' were changed. "
                    "Skipping query execution."
                ),
                "result": RunResult.skipped(),
            }
            return

        total_files = len(candidates)
        yield {
            "type": "candidates",
            "message": "Processing the following changed SQL files:",
            "files": list(candidates.paths),
            "total_files": total_files,
        }

        executed: List[str] = []
        for i, file_path in enumerate(candidates.paths):
            yield {
                "type": "progress",
                "message": (
                    f"Executing query from: {file_path} in {context.project_id}..."
                ),
                "current_file": i + 1,
                "total_files": total_files,
                "file_path": file_path,
            }

            try:
                content = self.git_manager.get_file_content(file_path)
            except (OSError, UnicodeDecodeError) as e:
                yield {
                    "type": "error",
                    "message": f"Cannot read {file_path}: {e}",
                    "file_path": file_path,
                    "exit_code": SENTINEL_EXIT_CODE,
                }
                yield self._halted(executed, file_path, SENTINEL_EXIT_CODE)
                return

            outcome = self.query_runner.run(file_path, content, context)
            executed.append(file_path)

            if not outcome.succeeded:
                yield {
                    "type": "error",
                    "message": (
                        f"Error executing query from {file_path} "
                        f"(exit code {outcome.exit_code}). Check BigQuery logs."
                    ),
                    "file_path": file_path,
                    "exit_code": outcome.exit_code,
                }
                yield self._halted(executed, file_path, outcome.exit_code)
                return

            yield {
                "type": "file_complete",
                "message": f"Query from {file_path} executed successfully.",
                "file_path": file_path,
            }

        yield {
            "type": "complete",
            "message": f"Deployment complete! Executed {len(executed)} SQL files",
            "result": RunResult.all_succeeded(executed),
        }

    def _halted(self, executed: List[str], file_path: str, exit_code: int) -> Dict:
        return {
            "type": "complete",
            "message": f"Deployment halted at {file_path}",
            "result": RunResult.halted(executed, file_path, exit_code),
        }

    def deploy(
        self,
        context: ExecutionContext,
        base: Optional[str] = None,
        head: Optional[str] = None,
    ) -> RunResult:
        """Run to completion, discarding progress events."""
        result = RunResult.skipped()
        for event in self.deploy_stream(context, base, head):
            if event["type"] == "complete":
                result = event["result"]
        return result
