"""Terminal output handling using Rich library.

This module provides the OutputHandler class for all CLI terminal output:
messages, the URL-check progress bar, the broken-link report and run
summaries. Supports verbosity levels and the --no-color flag.

Message text passed to success/error/warning/info/debug is printed literally:
file paths and error text may contain square brackets, which are escaped so
Rich does not read them as markup.
"""

from contextlib import contextmanager
from typing import Iterator

from rich.console import Console
from rich.markup import escape
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskProgressColumn,
    TextColumn,
    TimeRemainingColumn,
)

from src.link_checker.models import BrokenLinkReport
from src.update_rules.models import RuleSet

from .models import RunSummary


class OutputHandler:
    """Handles all terminal output using Rich library.

    Attributes:
        verbosity: Output verbosity level (0=summary, 1=info, 2=debug)
        console: Rich Console instance for output

    Example:
        >>> handler = OutputHandler(verbosity=1, no_color=False)
        >>> handler.success("No broken links found")
        >>> handler.warning("File or folder not found: drafts[old].vsdx")
    """

    def __init__(self, verbosity: int = 0, no_color: bool = False):
        """Initialize output handler.

        Args:
            verbosity: Verbosity level (0=summary, 1=info, 2=debug)
            no_color: Disable color output if True
        """
        self.verbosity = verbosity
        self.console = Console(
            force_terminal=not no_color,
            no_color=no_color,
            highlight=False,
        )

    def success(self, message: str) -> None:
        """Display success message in green."""
        self.console.print(f"[green]✓[/green] {escape(message)}")

    def error(self, message: str) -> None:
        """Display error message in red."""
        self.console.print(f"[red]✗[/red] {escape(message)}", style="red")

    def warning(self, message: str) -> None:
        """Display warning message in yellow."""
        self.console.print(f"[yellow]⚠[/yellow] {escape(message)}", style="yellow")

    def info(self, message: str) -> None:
        """Display info message (only if verbosity >= 1)."""
        if self.verbosity >= 1:
            self.console.print(escape(message))

    def debug(self, message: str) -> None:
        """Display debug message (only if verbosity >= 2)."""
        if self.verbosity >= 2:
            self.console.print(f"[dim]{escape(message)}[/dim]")

    def print(self, message: str) -> None:
        """Display message without Rich markup processing."""
        self.console.print(message, markup=False, soft_wrap=True)

    @contextmanager
    def progress_bar(self, total: int, description: str = "Processing") -> Iterator[Progress]:
        """Display progress bar for multi-item operations.

        Args:
            total: Total number of items to process
            description: Description text for progress bar

        Yields:
            Progress instance for updating progress

        Example:
            >>> with handler.progress_bar(10, "Checking URLs") as progress:
            ...     task = progress.add_task("Checking URLs", total=10)
            ...     progress.update(task, advance=1)
        """
        progress = Progress(
            SpinnerColumn(),
            TextColumn("[bold blue]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            TimeRemainingColumn(),
            console=self.console,
            disable=total == 0,
        )
        with progress:
            yield progress

    def print_report(self, report: BrokenLinkReport) -> None:
        """Display broken links grouped by file and page.

        Each link is printed as "file, page, description, url" so the output
        can be pasted into a spreadsheet.
        """
        if report.is_empty:
            return

        self.console.print("\n[bold]Broken Links:[/bold]")
        for line in report.lines():
            self.print(line)

    def print_rules(self, rule_set: RuleSet) -> None:
        """Display loaded rule counts (verbosity >= 1) and rule warnings."""
        for warning in rule_set.warnings:
            self.warning(warning)

        self.info(
            f"Loaded {rule_set.rule_count} rule(s): "
            f"{len(rule_set.object_text)} ObjectText, "
            f"{len(rule_set.link_text)} LinkText, "
            f"{len(rule_set.link_url)} LinkUrl"
        )

    def print_check_summary(self, summary: RunSummary) -> None:
        """Display check summary with color coding."""
        self.console.print("\n[bold]Check Summary:[/bold]")

        checked = len(summary.file_results) - len(summary.failed_files)
        self.console.print(f"  [blue]•[/blue] Files checked: {checked}")
        self.console.print(f"  [blue]•[/blue] Unique URLs: {summary.urls_checked}")

        if summary.broken_links > 0:
            self.console.print(f"  [red]✗[/red] Broken links: {summary.broken_links}")

        self._print_failures(summary)

        if summary.failed_files:
            self.console.print("\n[red]Check completed with file errors[/red]")
        elif summary.broken_links > 0:
            self.console.print("\n[red]Broken links found[/red]")
        elif summary.urls_checked == 0:
            self.console.print("\n[yellow]No hyperlinks found[/yellow]")
        else:
            self.console.print("\n[green]All links are live[/green]")

    def print_update_summary(self, summary: RunSummary) -> None:
        """Display update summary with per-file change counts."""
        self.console.print("\n[bold]Update Summary:[/bold]")

        for result in summary.file_results:
            if result.failed:
                continue
            if not result.parts_updated:
                self.console.print(f"  [dim]─[/dim] {escape(result.file)}: unchanged")
                continue
            self.console.print(
                f"  [green]✓[/green] {escape(result.file)}: "
                f"{len(result.parts_updated)} page(s) saved"
            )
            self.debug(
                f"    text={result.text_replacements} url={result.url_replacements} "
                f"description={result.description_replacements} "
                f"new_window={result.new_window_fixes} alt_text={result.alt_text_removed}"
            )

        self._print_failures(summary)

        if summary.failed_files:
            self.console.print("\n[red]Update completed with file errors[/red]")
        elif summary.parts_updated == 0:
            self.console.print("\n[green]Nothing to update. No changes made.[/green]")
        else:
            self.console.print(
                f"\n[green]Update completed: {summary.parts_updated} page(s) saved[/green]"
            )

    def _print_failures(self, summary: RunSummary) -> None:
        for result in summary.failed_files:
            self.console.print(f"  [red]✗[/red] {escape(result.file)}: {escape(result.error or '')}")
