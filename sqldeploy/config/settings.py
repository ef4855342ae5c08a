import re
import shlex
import string
from functools import lru_cache

from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..errors import ConfigurationError
from ..models.path_filter import compile_glob, normalize_glob

QUERY_COMMAND_PLACEHOLDERS = {"project_id"}


class Settings(BaseSettings):
    """
    Deployment settings loaded from environment variables.

    In CI the values come from the workflow's `env:` block (repository
    variables and secrets). Locally a `.env` file in the working directory
    is read as well.
    """

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Warehouse identity, supplied by the invoking environment
    PROJECT_ID: str = ""
    SERVICE_ACCT: str = ""
    WIP_ID: str = ""  # Workload identity provider resource name
    CLOUDSDK_AUTH_CREDENTIAL_FILE_OVERRIDE: str = ""  # Written by the auth step

    # Change detection
    SQL_GLOB: str = "views/ddls/**/*.sql"
    REPO_PATH: str = "."
    BASE_SHA: str = ""
    HEAD_SHA: str = ""
    GITHUB_EVENT_PATH: str = ""
    SORT_CANDIDATES: bool = False

    # Execution
    QUERY_COMMAND: str = (
        "bq query --batch --project_id={project_id} --nouse_legacy_sql"
    )
    DRY_RUN: bool = False

    @field_validator("SQL_GLOB")
    @classmethod
    def _check_glob(cls, value: str) -> str:
        value = normalize_glob(value)
        if not value:
            raise ValueError("SQL_GLOB must not be empty")
        try:
            compile_glob(value)
        except re.error as e:
            raise ValueError(f"SQL_GLOB '{value}' is not a valid glob: {e}") from e
        return value

    @field_validator("QUERY_COMMAND")
    @classmethod
    def _check_query_command(cls, value: str) -> str:
        try:
            argv = shlex.split(value)
        except ValueError as e:
            raise ValueError(f"QUERY_COMMAND cannot be parsed: {e}") from e
        if not argv:
            raise ValueError("QUERY_COMMAND must not be empty")

        for arg in argv:
            for _, field_name, _, _ in string.Formatter().parse(arg):
                if field_name is not None and field_name not in QUERY_COMMAND_PLACEHOLDERS:
                    raise ValueError(
                        f"QUERY_COMMAND uses unknown placeholder '{{{field_name}}}'"
                    )
        return value


def load_settings(**overrides) -> Settings:
    """Build settings, applying non-None overrides on top of the environment."""
    values = {key: value for key, value in overrides.items() if value is not None}
    try:
        return Settings(**values)
    except ValidationError as e:
        messages = "; ".join(error["msg"] for error in e.errors())
        raise ConfigurationError(f"Invalid configuration: {messages}") from e


@lru_cache
def get_settings() -> Settings:
    return load_settings()
