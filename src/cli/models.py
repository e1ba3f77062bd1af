"""Data models for CLI operations.

This module defines all data models used by the CLI module.
All models use dataclasses for clean, type-safe data structures,
following the patterns established in src/vsdx_package/models.py.
"""

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import List

from src.link_checker.url_checker import DEFAULT_TIMEOUT, DEFAULT_USER_AGENT, MAX_WORKERS
from src.update_rules.rule_loader import DEFAULT_RULES_FILE
from src.vsdx_package.models import FileResult


class ExitCode(IntEnum):
    """Exit codes for CLI operations.

    - SUCCESS (0): Operation completed, nothing broken
    - GENERAL_ERROR (1): No files, no valid rules, bad settings
    - BROKEN_LINKS (2): Check mode found broken links
    - FILE_ERRORS (3): One or more files could not be processed

    Example:
        >>> exit_code = ExitCode.SUCCESS
        >>> sys.exit(exit_code)
    """
    SUCCESS = 0
    GENERAL_ERROR = 1
    BROKEN_LINKS = 2
    FILE_ERRORS = 3


class Mode(Enum):
    """Command selected on the command line."""
    CHECK = "check"
    UPDATE = "update"


@dataclass
class Settings:
    """Run settings, from defaults, the settings file, environment and options.

    Attributes:
        max_workers: Maximum parallel URL probes
        timeout: Per-probe timeout in seconds
        user_agent: Browser User-Agent sent with probes
        rules_file: Rule table used by update mode
        extension: File extension picked up when a directory is given
        follow_redirects: Treat a redirect to a live page as live

    Example:
        >>> settings = Settings(max_workers=4)
    """
    max_workers: int = MAX_WORKERS
    timeout: float = DEFAULT_TIMEOUT
    user_agent: str = DEFAULT_USER_AGENT
    rules_file: str = DEFAULT_RULES_FILE
    extension: str = ".vsdx"
    follow_redirects: bool = False


@dataclass
class ResolvedPaths:
    """Package files found from command-line paths.

    Attributes:
        files: Package files in command-line order
        missing: Paths that were neither files nor directories
    """
    files: List[str] = field(default_factory=list)
    missing: List[str] = field(default_factory=list)


@dataclass
class RunSummary:
    """Structured result of a check or update run.

    Attributes:
        mode: Command that produced the summary
        file_results: One FileResult per processed file
        urls_checked: Distinct URLs probed (check mode)
        broken_links: Broken link occurrences (check mode)
        parts_updated: Page parts rewritten across all files (update mode)
    """
    mode: Mode
    file_results: List[FileResult] = field(default_factory=list)
    urls_checked: int = 0
    broken_links: int = 0
    parts_updated: int = 0

    @property
    def failed_files(self) -> List[FileResult]:
        return [result for result in self.file_results if result.failed]

    @property
    def exit_code(self) -> ExitCode:
        if self.failed_files:
            return ExitCode.FILE_ERRORS
        if self.broken_links:
            return ExitCode.BROKEN_LINKS
        return ExitCode.SUCCESS
