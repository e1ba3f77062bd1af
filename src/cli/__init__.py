"""Command-line interface for the Visio hyperlink checker.

This package provides the `visio-link-checker` CLI tool. It resolves files
and folders from the command line, loads settings, and runs either the check
workflow (extract, probe, report) or the update workflow (load rules, rewrite
packages) with progress indication and exit codes.
"""

from .check_command import CheckCommand
from .update_command import UpdateCommand
from .config import SettingsLoader
from .models import ExitCode, Mode, ResolvedPaths, RunSummary, Settings
from .path_resolver import resolve_paths
from .errors import (
    CLIError,
    ConfigError,
    ConfigFilesystemError,
    PathNotFoundError,
)

__all__ = [
    'CheckCommand',
    'UpdateCommand',
    'SettingsLoader',
    'ExitCode',
    'Mode',
    'ResolvedPaths',
    'RunSummary',
    'Settings',
    'resolve_paths',
    'CLIError',
    'ConfigError',
    'ConfigFilesystemError',
    'PathNotFoundError',
]
