"""Factories wiring settings into git, runner and execution context."""

from typing import Optional, Tuple

from ..config.settings import Settings
from ..errors import ConfigurationError
from ..models import BqQueryRunner, DryRunQueryRunner, GitManager, load_push_event
from ..protocols.git_manager_protocol import GitManagerProtocol
from ..protocols.query_runner_protocol import QueryRunnerProtocol
from ..schemas import ExecutionContext


def create_query_runner(
    command_template: str, dry_run: bool = False
) -> QueryRunnerProtocol:
    """
    Create a query runner based on dry-run mode.

    Args:
        command_template: Command line with an optional {project_id} placeholder
        dry_run: If True, returns DryRunQueryRunner; if False, BqQueryRunner

    Returns:
        QueryRunnerProtocol implementation
    """
    if dry_run:
        print("🔧 DRY_RUN mode: queries will not be executed")
        return DryRunQueryRunner(command_template)
    return BqQueryRunner(command_template)


def create_query_runner_from_settings(settings: Settings) -> QueryRunnerProtocol:
    return create_query_runner(settings.QUERY_COMMAND, dry_run=settings.DRY_RUN)


def create_git_manager_from_settings(settings: Settings) -> GitManagerProtocol:
    return GitManager(local_path=settings.REPO_PATH, sql_glob=settings.SQL_GLOB)


def build_execution_context(settings: Settings) -> ExecutionContext:
    """Build the target identity; PROJECT_ID is mandatory for execution."""
    project_id = settings.PROJECT_ID.strip()
    if not project_id:
        raise ConfigurationError(
            "PROJECT_ID is not set; cannot execute queries without a target project"
        )
    return ExecutionContext(
        project_id=project_id,
        credentials_file=settings.CLOUDSDK_AUTH_CREDENTIAL_FILE_OVERRIDE or None,
    )


def resolve_revision_range(settings: Settings) -> Tuple[Optional[str], Optional[str]]:
    """
    Pick the (base, head) pair to diff.

    Explicit BASE_SHA/HEAD_SHA take precedence over the push event payload.
    None means "let the git manager derive it".
    """
    base = settings.BASE_SHA or None
    head = settings.HEAD_SHA or None
    if settings.GITHUB_EVENT_PATH and (base is None or head is None):
        event = load_push_event(settings.GITHUB_EVENT_PATH)
        if base is None:
            base = event.base
        if head is None:
            head = event.after or None
    return base, head
