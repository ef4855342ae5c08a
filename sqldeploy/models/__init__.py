"""Models for the application."""

from .candidates import build_candidates
from .git_manager import GitManager
from .path_filter import matches_glob
from .push_event import load_push_event
from .query_runner import BqQueryRunner, DryRunQueryRunner

__all__ = [
    "BqQueryRunner",
    "DryRunQueryRunner",
    "GitManager",
    "build_candidates",
    "load_push_event",
    "matches_glob",
]
