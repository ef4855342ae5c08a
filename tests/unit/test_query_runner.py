"""Unit tests for query runners."""

from unittest.mock import Mock, patch

from sqldeploy.errors import (
    COMMAND_NOT_EXECUTABLE_EXIT_CODE,
    COMMAND_NOT_FOUND_EXIT_CODE,
    SENTINEL_EXIT_CODE,
)
from sqldeploy.models import BqQueryRunner, DryRunQueryRunner
from sqldeploy.models.query_runner import render_command
from sqldeploy.schemas import ExecutionContext

TEMPLATE = "bq query --batch --project_id={project_id} --nouse_legacy_sql"


def test_render_command_fills_project():
    context = ExecutionContext(project_id="analytics-prod")

    assert render_command(TEMPLATE, context) == [
        "bq",
        "query",
        "--batch",
        "--project_id=analytics-prod",
        "--nouse_legacy_sql",
    ]


def test_render_command_keeps_quoted_arguments():
    context = ExecutionContext(project_id="p")

    argv = render_command("bq query --label='team:data eng' --project_id={project_id}", context)

    assert argv == ["bq", "query", "--label=team:data eng", "--project_id=p"]


class TestBqQueryRunner:
    """Test cases for BqQueryRunner."""

    def setup_method(self):
        self.runner = BqQueryRunner(TEMPLATE)
        self.context = ExecutionContext(project_id="analytics-prod")

    @patch("sqldeploy.models.query_runner.subprocess.run")
    def test_run_feeds_sql_on_stdin(self, mock_run):
        mock_run.return_value = Mock(returncode=0)

        outcome = self.runner.run("views/ddls/a.sql", "SELECT 1;", self.context)

        assert outcome.succeeded
        assert outcome.file_path == "views/ddls/a.sql"
        args, kwargs = mock_run.call_args
        assert args[0] == render_command(TEMPLATE, self.context)
        assert kwargs["input"] == "SELECT 1;"
        assert kwargs["text"] is True
        assert kwargs["check"] is False

    @patch("sqldeploy.models.query_runner.subprocess.run")
    def test_run_reports_failure_status(self, mock_run):
        mock_run.return_value = Mock(returncode=2)

        outcome = self.runner.run("views/ddls/a.sql", "SELEC 1;", self.context)

        assert not outcome.succeeded
        assert outcome.exit_code == 2

    @patch("sqldeploy.models.query_runner.subprocess.run")
    def test_run_forwards_credentials_file(self, mock_run):
        mock_run.return_value = Mock(returncode=0)
        context = ExecutionContext(
            project_id="analytics-prod", credentials_file="/tmp/gha-creds.json"
        )

        self.runner.run("views/ddls/a.sql", "SELECT 1;", context)

        env = mock_run.call_args.kwargs["env"]
        assert env["CLOUDSDK_AUTH_CREDENTIAL_FILE_OVERRIDE"] == "/tmp/gha-creds.json"
        assert env["GOOGLE_APPLICATION_CREDENTIALS"] == "/tmp/gha-creds.json"

    @patch("sqldeploy.models.query_runner.subprocess.run")
    def test_run_without_credentials_keeps_environment(self, mock_run, monkeypatch):
        monkeypatch.delenv("CLOUDSDK_AUTH_CREDENTIAL_FILE_OVERRIDE", raising=False)
        monkeypatch.setenv("CLOUDSDK_CORE_PROJECT", "ambient")
        mock_run.return_value = Mock(returncode=0)

        self.runner.run("views/ddls/a.sql", "SELECT 1;", self.context)

        env = mock_run.call_args.kwargs["env"]
        assert env["CLOUDSDK_CORE_PROJECT"] == "ambient"
        assert "CLOUDSDK_AUTH_CREDENTIAL_FILE_OVERRIDE" not in env

    @patch("builtins.print")
    @patch("sqldeploy.models.query_runner.subprocess.run")
    def test_run_command_not_found(self, mock_run, mock_print):
        mock_run.side_effect = FileNotFoundError("bq")

        outcome = self.runner.run("views/ddls/a.sql", "SELECT 1;", self.context)

        assert outcome.exit_code == COMMAND_NOT_FOUND_EXIT_CODE
        mock_print.assert_called_with("Command not found: bq")


class TestDryRunQueryRunner:
    """Test cases for DryRunQueryRunner."""

    @patch("sqldeploy.models.query_runner.subprocess.run")
    @patch("builtins.print")
    def test_run_prints_and_succeeds(self, mock_print, mock_run):
        runner = DryRunQueryRunner(TEMPLATE)

        outcome = runner.run(
            "views/ddls/a.sql", "SELECT 1;", ExecutionContext(project_id="p")
        )

        assert outcome.succeeded
        mock_run.assert_not_called()
        mock_print.assert_called_once_with(
            "[dry-run] bq query --batch --project_id=p --nouse_legacy_sql"
            " < views/ddls/a.sql"
        )


class TestBqQueryRunnerStartFailures:
    """Commands that cannot be started still produce an outcome."""

    def setup_method(self):
        self.runner = BqQueryRunner(TEMPLATE)
        self.context = ExecutionContext(project_id="analytics-prod")

    @patch("builtins.print")
    @patch("sqldeploy.models.query_runner.subprocess.run")
    def test_run_command_not_executable(self, mock_run, mock_print):
        mock_run.side_effect = PermissionError("bq")

        outcome = self.runner.run("views/ddls/a.sql", "SELECT 1;", self.context)

        assert outcome.file_path == "views/ddls/a.sql"
        assert outcome.exit_code == COMMAND_NOT_EXECUTABLE_EXIT_CODE
        mock_print.assert_called_with("Command not executable: bq")

    @patch("builtins.print")
    @patch("sqldeploy.models.query_runner.subprocess.run")
    def test_run_other_os_error(self, mock_run, mock_print):
        mock_run.side_effect = OSError("Exec format error")

        outcome = self.runner.run("views/ddls/a.sql", "SELECT 1;", self.context)

        assert outcome.exit_code == SENTINEL_EXIT_CODE
        assert not outcome.succeeded
        mock_print.assert_called_with("Failed to start bq: Exec format error")
