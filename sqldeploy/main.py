"""Click CLI: run and changed commands."""

import sys
from typing import Optional

import click

from .config.settings import Settings, load_settings
from .errors import ExecutionError, SqlDeployError
from .models import build_candidates
from .schemas import RunStatus
from .services import (
    DeployCoordinator,
    build_execution_context,
    create_git_manager_from_settings,
    create_query_runner_from_settings,
    resolve_revision_range,
)


def _common_options(func):
    options = [
        click.option("--repo-path", default=None, help="Working tree to diff (REPO_PATH)."),
        click.option("--base", default=None, help="Base revision (BASE_SHA)."),
        click.option("--head", default=None, help="Head revision (HEAD_SHA)."),
        click.option("--glob", "sql_glob", default=None, help="Candidate glob (SQL_GLOB)."),
        click.option(
            "--sort/--no-sort",
            default=None,
            help="Sort candidates lexically instead of diff order (SORT_CANDIDATES).",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _settings_from_options(**overrides) -> Settings:
    return load_settings(
        REPO_PATH=overrides.get("repo_path"),
        BASE_SHA=overrides.get("base"),
        HEAD_SHA=overrides.get("head"),
        SQL_GLOB=overrides.get("sql_glob"),
        SORT_CANDIDATES=overrides.get("sort"),
        PROJECT_ID=overrides.get("project_id"),
        DRY_RUN=overrides.get("dry_run"),
    )


def _fail(error: SqlDeployError) -> None:
    click.echo(f"Error: {error}", err=True)
    sys.exit(error.exit_code)


@click.group()
@click.version_option(package_name="sqldeploy")
def cli() -> None:
    """Execute SQL files changed by a push against the data warehouse."""


@cli.command()
@_common_options
@click.option("--project-id", default=None, help="Target project (PROJECT_ID).")
@click.option(
    "--dry-run/--no-dry-run", default=None, help="Print commands without running them."
)
def run(
    repo_path: Optional[str],
    base: Optional[str],
    head: Optional[str],
    sql_glob: Optional[str],
    sort: Optional[bool],
    project_id: Optional[str],
    dry_run: Optional[bool],
) -> None:
    """Execute changed SQL files in order, stopping at the first failure."""
    try:
        settings = _settings_from_options(
            repo_path=repo_path,
            base=base,
            head=head,
            sql_glob=sql_glob,
            sort=sort,
            project_id=project_id,
            dry_run=dry_run,
        )
        context = build_execution_context(settings)
        base_rev, head_rev = resolve_revision_range(settings)
        coordinator = DeployCoordinator(
            git_manager=create_git_manager_from_settings(settings),
            query_runner=create_query_runner_from_settings(settings),
            sort_candidates=settings.SORT_CANDIDATES,
        )

        if settings.SERVICE_ACCT:
            click.echo(f"Service account: {settings.SERVICE_ACCT}")

        result = None
        error_message = ""
        for event in coordinator.deploy_stream(context, base_rev, head_rev):
            if event["type"] == "error":
                # Reported once, by _fail, when the run halts
                error_message = event["message"]
            elif event["type"] == "candidates":
                click.echo(event["message"])
                for file_path in event["files"]:
                    click.echo(f"  {file_path}")
            elif event["type"] == "complete":
                result = event["result"]
                if result.status != RunStatus.HALTED_ON_FAILURE:
                    click.echo(event["message"])
            else:
                click.echo(event["message"])

        if result is not None and result.status == RunStatus.HALTED_ON_FAILURE:
            raise ExecutionError(
                result.failed_path, result.exit_code, message=error_message
            )
    except SqlDeployError as e:
        _fail(e)


@cli.command()
@_common_options
def changed(
    repo_path: Optional[str],
    base: Optional[str],
    head: Optional[str],
    sql_glob: Optional[str],
    sort: Optional[bool],
) -> None:
    """List the SQL files a run would execute, one per line."""
    try:
        settings = _settings_from_options(
            repo_path=repo_path, base=base, head=head, sql_glob=sql_glob, sort=sort
        )
        base_rev, head_rev = resolve_revision_range(settings)
        git_manager = create_git_manager_from_settings(settings)
        change_set = git_manager.get_changed_files(base_rev, head_rev)
        candidates = build_candidates(
            change_set, settings.SQL_GLOB, sort=settings.SORT_CANDIDATES
        )
    except SqlDeployError as e:
        _fail(e)
        return

    for file_path in candidates.paths:
        click.echo(file_path)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
