import os
import shlex
import subprocess
from typing import Dict, List

from ..errors import (
    COMMAND_NOT_EXECUTABLE_EXIT_CODE,
    COMMAND_NOT_FOUND_EXIT_CODE,
    SENTINEL_EXIT_CODE,
)
from ..schemas import ExecutionContext, ExecutionOutcome

CREDENTIAL_ENV_VARS = (
    "CLOUDSDK_AUTH_CREDENTIAL_FILE_OVERRIDE",
    "GOOGLE_APPLICATION_CREDENTIALS",
)


def render_command(command_template: str, context: ExecutionContext) -> List[str]:
    """Split the command template and fill in the target project."""
    return [
        arg.format(project_id=context.project_id)
        for arg in shlex.split(command_template)
    ]


class BqQueryRunner:
    """Runs one SQL file through the warehouse CLI in batch mode."""

    def __init__(self, command_template: str):
        self.command_template = command_template

    def _build_env(self, context: ExecutionContext) -> Dict[str, str]:
        env = dict(os.environ)
        if context.credentials_file:
            for name in CREDENTIAL_ENV_VARS:
                env[name] = context.credentials_file
        return env

    def run(
        self, file_path: str, content: str, context: ExecutionContext
    ) -> ExecutionOutcome:
        """Feed content to the command on stdin and wait for it to exit."""
        argv = render_command(self.command_template, context)
        try:
            completed = subprocess.run(
                argv,
                input=content,
                text=True,
                env=self._build_env(context),
                check=False,
            )
        except FileNotFoundError:
            print(f"Command not found: {argv[0]}")
            return ExecutionOutcome(
                file_path=file_path, exit_code=COMMAND_NOT_FOUND_EXIT_CODE
            )
        except PermissionError:
            print(f"Command not executable: {argv[0]}")
            return ExecutionOutcome(
                file_path=file_path, exit_code=COMMAND_NOT_EXECUTABLE_EXIT_CODE
            )
        except OSError as e:
            print(f"Failed to start {argv[0]}: {e}")
            return ExecutionOutcome(file_path=file_path, exit_code=SENTINEL_EXIT_CODE)
        return ExecutionOutcome(file_path=file_path, exit_code=completed.returncode)


class DryRunQueryRunner:
    """Prints the command that would run; never touches the warehouse."""

    def __init__(self, command_template: str):
        self.command_template = command_template

    def run(
        self, file_path: str, content: str, context: ExecutionContext
    ) -> ExecutionOutcome:
        argv = render_command(self.command_template, context)
        print(f"[dry-run] {shlex.join(argv)} < {file_path}")
        return ExecutionOutcome(file_path=file_path, exit_code=0)
