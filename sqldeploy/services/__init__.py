"""Services for the application."""

from .deploy_coordinator import DeployCoordinator
from .factory import (
    build_execution_context,
    create_git_manager_from_settings,
    create_query_runner,
    create_query_runner_from_settings,
    resolve_revision_range,
)

__all__ = [
    "DeployCoordinator",
    "build_execution_context",
    "create_git_manager_from_settings",
    "create_query_runner",
    "create_query_runner_from_settings",
    "resolve_revision_range",
]
