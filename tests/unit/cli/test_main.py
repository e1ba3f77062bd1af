"""Unit tests for main CLI entry point (main.py).

Tests the Typer CLI application using CliRunner.
"""

import logging
from unittest.mock import MagicMock, Mock, patch

import pytest
from typer.testing import CliRunner

from src.cli.main import USAGE_MESSAGE, VERSION, _configure_logging, app
from src.cli.models import ExitCode, Settings

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path, monkeypatch):
    """Run every CLI test in an empty directory with no settings overrides."""
    monkeypatch.chdir(tmp_path)
    for suffix in ("MAX_WORKERS", "TIMEOUT", "USER_AGENT"):
        monkeypatch.delenv(f"VISIO_LINK_CHECKER_{suffix}", raising=False)
    with patch('src.cli.config.load_dotenv'):
        yield tmp_path


@pytest.fixture
def package_file(tmp_path):
    path = tmp_path / "a.vsdx"
    path.write_bytes(b"")
    return str(path)


def _mock_command(exit_code=ExitCode.SUCCESS):
    instance = Mock()
    instance.run.return_value = exit_code
    return instance


class TestConfigureLogging:
    """Test cases for _configure_logging function."""

    def test_verbosity_0_sets_warning_level(self):
        """Verbosity 0 sets logging to WARNING level."""
        with patch('logging.getLogger') as mock_get_logger:
            mock_logger = MagicMock()
            mock_get_logger.return_value = mock_logger

            _configure_logging(0)

            mock_logger.setLevel.assert_called_with(logging.WARNING)

    def test_verbosity_1_sets_info_level(self):
        """Verbosity 1 sets logging to INFO level."""
        with patch('logging.getLogger') as mock_get_logger:
            mock_logger = MagicMock()
            mock_get_logger.return_value = mock_logger

            _configure_logging(1)

            mock_logger.setLevel.assert_called_with(logging.INFO)

    def test_verbosity_2_sets_debug_level(self):
        """Verbosity 2+ sets logging to DEBUG level."""
        with patch('logging.getLogger') as mock_get_logger:
            mock_logger = MagicMock()
            mock_get_logger.return_value = mock_logger

            _configure_logging(2)

            mock_logger.setLevel.assert_called_with(logging.DEBUG)

    def test_configures_src_logger_only(self):
        """Handlers go on the 'src' logger and are replaced, not stacked."""
        _configure_logging(1)
        _configure_logging(1)

        app_logger = logging.getLogger("src")
        assert len(app_logger.handlers) == 1
        assert app_logger.level == logging.INFO

    def test_logdir_creates_timestamped_file(self, tmp_path):
        logdir = tmp_path / "logs"

        _configure_logging(1, str(logdir))

        log_files = list(logdir.glob("visio-link-checker_*.log"))
        assert len(log_files) == 1
        for handler in list(logging.getLogger("src").handlers):
            handler.close()


class TestTopLevel:
    """Test cases for options outside the subcommands."""

    def test_version(self):
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert VERSION in result.output

    def test_no_command_shows_usage(self):
        result = runner.invoke(app, [])

        assert result.exit_code == ExitCode.GENERAL_ERROR
        assert USAGE_MESSAGE.splitlines()[0] in result.output


class TestCheckCli:
    """Test cases for the check command."""

    @patch('src.cli.main.CheckCommand')
    def test_check_runs_with_resolved_files(self, mock_check_cmd, package_file):
        instance = _mock_command(ExitCode.BROKEN_LINKS)
        mock_check_cmd.return_value = instance

        result = runner.invoke(app, ["check", package_file, "--no-color"])

        assert result.exit_code == ExitCode.BROKEN_LINKS
        instance.run.assert_called_once_with([package_file])

    @patch('src.cli.main.CheckCommand')
    def test_c_alias(self, mock_check_cmd, package_file):
        instance = _mock_command()
        mock_check_cmd.return_value = instance

        result = runner.invoke(app, ["c", package_file])

        assert result.exit_code == ExitCode.SUCCESS
        instance.run.assert_called_once_with([package_file])

    @patch('src.cli.main.CheckCommand')
    def test_options_override_settings(self, mock_check_cmd, package_file):
        mock_check_cmd.return_value = _mock_command()

        runner.invoke(app, ["check", package_file, "--workers", "3", "--timeout", "2.5"])

        settings = mock_check_cmd.call_args.kwargs["settings"]
        assert isinstance(settings, Settings)
        assert settings.max_workers == 3
        assert settings.timeout == 2.5

    @patch('src.cli.main.CheckCommand')
    def test_settings_file_is_used(self, mock_check_cmd, package_file, tmp_path):
        mock_check_cmd.return_value = _mock_command()
        settings_file = tmp_path / "custom.yaml"
        settings_file.write_text("max_workers: 5\n")

        runner.invoke(app, ["check", package_file, "--config", str(settings_file)])

        assert mock_check_cmd.call_args.kwargs["settings"].max_workers == 5

    @patch('src.cli.main.CheckCommand')
    def test_invalid_workers_is_general_error(self, mock_check_cmd, package_file):
        result = runner.invoke(app, ["check", package_file, "--workers", "0", "--no-color"])

        assert result.exit_code == ExitCode.GENERAL_ERROR
        assert "max_workers" in result.output
        mock_check_cmd.assert_not_called()

    @patch('src.cli.main.CheckCommand')
    def test_bad_settings_file_is_general_error(self, mock_check_cmd, package_file, tmp_path):
        settings_file = tmp_path / "bad.yaml"
        settings_file.write_text("max_workers: [oops")

        result = runner.invoke(app, ["check", package_file, "--config", str(settings_file)])

        assert result.exit_code == ExitCode.GENERAL_ERROR
        mock_check_cmd.assert_not_called()

    @patch('src.cli.main.CheckCommand')
    def test_missing_path_warned_and_skipped(self, mock_check_cmd, package_file, tmp_path):
        instance = _mock_command()
        mock_check_cmd.return_value = instance
        missing = str(tmp_path / "gone.vsdx")

        result = runner.invoke(app, ["check", missing, package_file, "--no-color"])

        assert result.exit_code == ExitCode.SUCCESS
        assert "File or folder not found" in result.output
        instance.run.assert_called_once_with([package_file])

    @patch('src.cli.main.CheckCommand')
    def test_missing_path_with_brackets_does_not_stop_run(self, mock_check_cmd, package_file):
        """A missing path that looks like Rich markup is warned about verbatim."""
        instance = _mock_command()
        mock_check_cmd.return_value = instance

        result = runner.invoke(app, ["check", "drafts[/old].vsdx", package_file, "--no-color"])

        assert result.exit_code == ExitCode.SUCCESS
        assert "File or folder not found: drafts[/old].vsdx" in result.output
        instance.run.assert_called_once_with([package_file])

    @patch('src.cli.main.CheckCommand')
    def test_no_files_is_general_error(self, mock_check_cmd, tmp_path):
        result = runner.invoke(app, ["check", str(tmp_path), "--no-color"])

        assert result.exit_code == ExitCode.GENERAL_ERROR
        assert "No .vsdx files found" in result.output
        mock_check_cmd.assert_not_called()


class TestUpdateCli:
    """Test cases for the update command."""

    @patch('src.cli.main.UpdateCommand')
    def test_update_with_rules_option(self, mock_update_cmd, package_file):
        instance = _mock_command()
        mock_update_cmd.return_value = instance

        result = runner.invoke(app, ["update", package_file, "--rules", "fixes.csv"])

        assert result.exit_code == ExitCode.SUCCESS
        assert mock_update_cmd.call_args.kwargs["settings"].rules_file == "fixes.csv"
        instance.run.assert_called_once_with([package_file])

    @patch('src.cli.main.UpdateCommand')
    def test_u_alias_uses_default_rules(self, mock_update_cmd, package_file):
        mock_update_cmd.return_value = _mock_command(ExitCode.FILE_ERRORS)

        result = runner.invoke(app, ["u", package_file])

        assert result.exit_code == ExitCode.FILE_ERRORS
        assert mock_update_cmd.call_args.kwargs["settings"].rules_file == "LinkUpdates.csv"

    @patch('src.cli.main.UpdateCommand')
    def test_update_rejects_url_check_options(self, mock_update_cmd, package_file):
        """--workers and --timeout only apply to check."""
        result = runner.invoke(app, ["update", package_file, "--workers", "3"])

        assert result.exit_code != ExitCode.SUCCESS
        mock_update_cmd.assert_not_called()
