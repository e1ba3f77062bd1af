"""Check command orchestration for CLI.

This module provides the CheckCommand class that runs the read-only check
workflow: extract hyperlinks from every package, probe each distinct URL
once, then print broken links grouped by file and page.
"""

import logging
from typing import List, Optional

from src.link_checker.report_builder import build_report
from src.link_checker.url_checker import UrlChecker, build_url_index
from src.vsdx_package.link_extractor import LinkExtractor

from .errors import CLIError
from .models import ExitCode, Mode, RunSummary, Settings
from .output import OutputHandler

logger = logging.getLogger(__name__)


class CheckCommand:
    """Orchestrates the check workflow for the CLI.

    The check workflow:
        1. Extract pages and links from every file (LinkExtractor)
        2. Probe distinct URLs in parallel (UrlChecker) with a progress bar
        3. Group broken links by file and page display name (build_report)
        4. Print the report and a summary, return the exit code

    Example:
        >>> output = OutputHandler(verbosity=1)
        >>> check_cmd = CheckCommand(settings=Settings(), output_handler=output)
        >>> exit_code = check_cmd.run(["./diagrams"])
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        output_handler: Optional[OutputHandler] = None,
        link_extractor: Optional[LinkExtractor] = None,
        url_checker: Optional[UrlChecker] = None,
    ):
        """Initialize check command with dependencies.

        Args:
            settings: Run settings (defaults if None)
            output_handler: OutputHandler for terminal output (optional)
            link_extractor: LinkExtractor for reading packages (optional)
            url_checker: UrlChecker for probing URLs (optional)
        """
        self.settings = settings or Settings()
        self.output_handler = output_handler or OutputHandler()
        self.link_extractor = link_extractor or LinkExtractor()
        self.url_checker = url_checker or UrlChecker(
            max_workers=self.settings.max_workers,
            timeout=self.settings.timeout,
            user_agent=self.settings.user_agent,
            follow_redirects=self.settings.follow_redirects,
        )
        self.summary: Optional[RunSummary] = None

    def run(self, files: List[str]) -> ExitCode:
        """Check the hyperlinks of the given package files.

        Args:
            files: Package file paths, already resolved from the command line

        Returns:
            ExitCode: SUCCESS, BROKEN_LINKS, FILE_ERRORS or GENERAL_ERROR
        """
        try:
            if not files:
                self.output_handler.error("No files to check")
                return ExitCode.GENERAL_ERROR

            summary = self.execute(files)
            self.summary = summary
            return summary.exit_code

        except CLIError as e:
            logger.error(f"CLI error: {e}")
            self.output_handler.error(f"Error: {e}")
            return ExitCode.GENERAL_ERROR

        except Exception as e:
            logger.exception("Unexpected error during check")
            self.output_handler.error(f"Unexpected error: {e}")
            return ExitCode.GENERAL_ERROR

    def execute(self, files: List[str]) -> RunSummary:
        """Run the check workflow and return its summary without exit-code mapping."""
        summary = RunSummary(mode=Mode.CHECK)

        self.output_handler.info(f"Reading {len(files)} file(s)...")
        extraction = self.link_extractor.extract(files)
        summary.file_results = extraction.file_results

        for result in extraction.failed_files:
            self.output_handler.warning(f"Skipped {result.file}: {result.error}")

        distinct = len(build_url_index(extraction.links))
        self.output_handler.info(
            f"Found {len(extraction.links)} hyperlink(s), {distinct} unique URL(s)"
        )

        with self.output_handler.progress_bar(distinct, "Checking URLs") as progress:
            task = progress.add_task("Checking URLs", total=distinct)
            probe_results = self.url_checker.check(
                extraction.links,
                on_result=lambda _result: progress.update(task, advance=1),
            )

        summary.urls_checked = len(probe_results)

        report = build_report(files, extraction.links, extraction.pages)
        summary.broken_links = report.total

        self.output_handler.print_report(report)
        self.output_handler.print_check_summary(summary)

        logger.info(
            f"Check finished: {summary.urls_checked} URL(s), "
            f"{summary.broken_links} broken link(s), "
            f"{len(summary.failed_files)} failed file(s)"
        )
        return summary
