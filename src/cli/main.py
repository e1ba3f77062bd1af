"""Main CLI entry point for visio-link-checker command.

This module provides the Typer application that serves as the entry point
for the visio-link-checker command-line tool. The two modes are subcommands,
each with a one-letter alias:

    visio-link-checker check PATH...    (c)
    visio-link-checker update PATH...   (u)
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional

import typer

from src.cli.check_command import CheckCommand
from src.cli.config import SettingsLoader
from src.cli.errors import ConfigError, ConfigFilesystemError
from src.cli.models import ExitCode, Mode, Settings
from src.cli.output import OutputHandler
from src.cli.path_resolver import resolve_paths
from src.cli.update_command import UpdateCommand

VERSION = "0.1.0"

app = typer.Typer(
    name="visio-link-checker",
    help="""Check and update hyperlinks in Visio (.vsdx) drawings.

QUICK START:
  visio-link-checker check ./diagrams            # Report broken links
  visio-link-checker update ./diagrams           # Apply LinkUpdates.csv
  visio-link-checker u a.vsdx --rules fixes.csv  # Use another rule file

RULE FILE (kind,find,replace per line):
  LinkUrl,http://old.example/page,https://new.example/page
  LinkText,Old label,New label
  ObjectText,Old shape text,New shape text""",
    add_completion=False,
    rich_markup_mode=None,
    no_args_is_help=False,
)

logger = logging.getLogger(__name__)

USAGE_MESSAGE = """Usage:
  visio-link-checker {check|update} <file_or_folder_paths>...

check (c)    Probe every hyperlink and list the broken ones
update (u)   Apply the rule file (LinkUpdates.csv) to every page
--help       Show all options"""


def _configure_logging(verbosity: int, logdir: Optional[str] = None) -> None:
    """Configure logging based on verbosity level.

    Configures only the 'src' namespace logger to avoid affecting third-party
    libraries. The root logger is left unchanged.

    Args:
        verbosity: Verbosity level (0=WARNING, 1=INFO, 2=DEBUG)
        logdir: Optional directory for log files (creates timestamped log file)
    """
    if verbosity == 0:
        level = logging.WARNING
    elif verbosity == 1:
        level = logging.INFO
    else:  # verbosity >= 2
        level = logging.DEBUG

    app_logger = logging.getLogger("src")
    app_logger.setLevel(level)

    # Handlers from an earlier invocation in the same process
    for handler in list(app_logger.handlers):
        app_logger.removeHandler(handler)
        handler.close()

    log_format = "%(asctime)s [%(levelname)8s] %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"
    formatter = logging.Formatter(log_format, datefmt=date_format)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    app_logger.addHandler(console_handler)

    if logdir:
        log_path = Path(logdir)
        log_path.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = log_path / f"visio-link-checker_{timestamp}.log"

        file_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        file_formatter = logging.Formatter(file_format, datefmt=date_format)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(file_formatter)
        app_logger.addHandler(file_handler)

        logger.info(f"Logging to file: {log_file}")


def _load_settings(
    config: Optional[str],
    rules: Optional[str],
    workers: Optional[int],
    timeout: Optional[float],
) -> Settings:
    """Load settings and apply command-line overrides.

    Raises:
        ConfigError: If the settings file or an override is invalid
        ConfigFilesystemError: If the settings file cannot be read
    """
    settings = SettingsLoader.load(config)

    if rules is not None:
        settings.rules_file = rules
    if workers is not None:
        settings.max_workers = workers
    if timeout is not None:
        settings.timeout = timeout

    SettingsLoader.validate(settings)
    return settings


def _run(
    mode: Mode,
    paths: List[str],
    rules: Optional[str],
    config: Optional[str],
    workers: Optional[int],
    timeout: Optional[float],
    logdir: Optional[str],
    verbosity: int,
    no_color: bool,
) -> None:
    """Resolve paths and settings, then run the selected command.

    Args:
        mode: Command to run
        paths: Files and folders from the command line
        rules: Rule file override (update mode)
        config: Settings file path
        workers: Parallel probe override
        timeout: Probe timeout override
        logdir: Directory for log files
        verbosity: Verbosity level
        no_color: Whether to disable colored output
    """
    _configure_logging(verbosity, logdir)

    output = OutputHandler(verbosity=verbosity, no_color=no_color)

    try:
        settings = _load_settings(config, rules, workers, timeout)
    except (ConfigError, ConfigFilesystemError) as e:
        logger.error(f"Configuration error: {e}")
        output.error(str(e))
        raise typer.Exit(ExitCode.GENERAL_ERROR)

    resolved = resolve_paths(paths, settings.extension)
    for missing in resolved.missing:
        output.warning(f"File or folder not found: {missing}")

    if not resolved.files:
        output.error(f"No {settings.extension} files found")
        raise typer.Exit(ExitCode.GENERAL_ERROR)

    if mode is Mode.CHECK:
        command = CheckCommand(settings=settings, output_handler=output)
    else:
        command = UpdateCommand(settings=settings, output_handler=output)

    exit_code = command.run(resolved.files)
    raise typer.Exit(exit_code)


PATHS_ARGUMENT = typer.Argument(
    ...,
    help="Package files and/or folders (folders are not searched recursively)",
    metavar="PATH...",
)
CONFIG_OPTION = typer.Option(
    None,
    "--config",
    help="Settings file (default: .visio-link-checker.yaml if present)",
    metavar="FILE",
)
WORKERS_OPTION = typer.Option(
    None,
    "--workers",
    help="Maximum parallel URL checks (default: 8)",
    metavar="N",
)
TIMEOUT_OPTION = typer.Option(
    None,
    "--timeout",
    help="Timeout for each URL check in seconds (default: 15)",
    metavar="SECONDS",
)
LOGDIR_OPTION = typer.Option(
    None,
    "--logdir",
    help="Directory for log files (creates timestamped log file)",
)
VERBOSITY_OPTION = typer.Option(
    0,
    "--verbosity",
    "-v",
    help="Verbosity level: 0=summary, 1=info, 2=debug",
)
NO_COLOR_OPTION = typer.Option(
    False,
    "--no-color",
    help="Disable colored output",
)


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show version and exit",
    ),
) -> None:
    """Check and update hyperlinks in Visio (.vsdx) drawings."""
    if version:
        typer.echo(f"visio-link-checker version {VERSION}")
        raise typer.Exit()

    if ctx.invoked_subcommand is None:
        typer.echo(USAGE_MESSAGE)
        raise typer.Exit(ExitCode.GENERAL_ERROR)


@app.command("check")
def check(
    paths: List[str] = PATHS_ARGUMENT,
    config: Optional[str] = CONFIG_OPTION,
    workers: Optional[int] = WORKERS_OPTION,
    timeout: Optional[float] = TIMEOUT_OPTION,
    logdir: Optional[str] = LOGDIR_OPTION,
    verbosity: int = VERBOSITY_OPTION,
    no_color: bool = NO_COLOR_OPTION,
) -> None:
    """Report broken hyperlinks, grouped by file and page.

    Exit code 2 when broken links are found, 3 when a file could not be read.
    """
    _run(Mode.CHECK, paths, None, config, workers, timeout, logdir, verbosity, no_color)


@app.command("update")
def update(
    paths: List[str] = PATHS_ARGUMENT,
    rules: Optional[str] = typer.Option(
        None,
        "--rules",
        help="Rule file with kind,find,replace rows (default: LinkUpdates.csv)",
        metavar="FILE",
    ),
    config: Optional[str] = CONFIG_OPTION,
    logdir: Optional[str] = LOGDIR_OPTION,
    verbosity: int = VERBOSITY_OPTION,
    no_color: bool = NO_COLOR_OPTION,
) -> None:
    """Apply the rule file to every page and normalize hyperlinks.

    Hyperlinks are always set to open in a new window and legacy alt-text
    sections are removed, even when no rule matches.
    """
    _run(Mode.UPDATE, paths, rules, config, None, None, logdir, verbosity, no_color)


# One-letter aliases
app.command("c", hidden=True)(check)
app.command("u", hidden=True)(update)


def main() -> None:
    """Main entry point for the CLI application.

    This function is called when the module is executed directly or
    when the console script is invoked.
    """
    app()


# Allow running as: python -m src.cli.main
if __name__ == "__main__":
    main()
