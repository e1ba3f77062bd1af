"""Update command orchestration for CLI.

This module provides the UpdateCommand class that loads the rule table and
rewrites every package in place: rule-driven text, description and URL
replacements plus the structural clean-ups that always run.
"""

import logging
from typing import List, Optional

from src.update_rules.errors import RuleFileError
from src.update_rules.models import RuleSet
from src.update_rules.rule_loader import RuleLoader
from src.vsdx_package.package_mutator import PackageMutator

from .errors import CLIError
from .models import ExitCode, Mode, RunSummary, Settings
from .output import OutputHandler

logger = logging.getLogger(__name__)


class UpdateCommand:
    """Orchestrates the update workflow for the CLI.

    The update workflow:
        1. Load the rule table (RuleLoader); stop if it holds no valid rules
        2. Update every file (PackageMutator), one exclusive lock at a time
        3. Print per-file results and return the exit code

    Example:
        >>> update_cmd = UpdateCommand(settings=Settings(rules_file="LinkUpdates.csv"))
        >>> exit_code = update_cmd.run(["a.vsdx", "b.vsdx"])
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        output_handler: Optional[OutputHandler] = None,
        package_mutator: Optional[PackageMutator] = None,
    ):
        self.settings = settings or Settings()
        self.output_handler = output_handler or OutputHandler()
        self.package_mutator = package_mutator or PackageMutator()
        self.summary: Optional[RunSummary] = None

    def run(self, files: List[str]) -> ExitCode:
        """Apply the rule table to the given package files.

        Args:
            files: Package file paths, already resolved from the command line

        Returns:
            ExitCode: SUCCESS, FILE_ERRORS or GENERAL_ERROR
        """
        try:
            if not files:
                self.output_handler.error("No files to update")
                return ExitCode.GENERAL_ERROR

            rule_set = self.load_rules()
            if rule_set.is_empty:
                self.output_handler.error("No updates in rule file")
                return ExitCode.GENERAL_ERROR

            summary = self.execute(files, rule_set)
            self.summary = summary
            return summary.exit_code

        except RuleFileError as e:
            logger.error(f"Rule file error: {e}")
            self.output_handler.error(str(e))
            return ExitCode.GENERAL_ERROR

        except CLIError as e:
            logger.error(f"CLI error: {e}")
            self.output_handler.error(f"Error: {e}")
            return ExitCode.GENERAL_ERROR

        except Exception as e:
            logger.exception("Unexpected error during update")
            self.output_handler.error(f"Unexpected error: {e}")
            return ExitCode.GENERAL_ERROR

    def load_rules(self) -> RuleSet:
        """Load and report the rule table named in settings.

        Raises:
            RuleFileError: If the rule file is missing or unreadable
        """
        self.output_handler.info(f"Loading rules from {self.settings.rules_file}")
        rule_set = RuleLoader.load(self.settings.rules_file)
        self.output_handler.print_rules(rule_set)
        return rule_set

    def execute(self, files: List[str], rule_set: RuleSet) -> RunSummary:
        summary = RunSummary(mode=Mode.UPDATE)

        self.output_handler.info(f"Updating {len(files)} file(s)...")
        summary.file_results = self.package_mutator.update(files, rule_set)
        summary.parts_updated = sum(len(result.parts_updated) for result in summary.file_results)

        self.output_handler.print_update_summary(summary)

        logger.info(
            f"Update finished: {summary.parts_updated} page(s) saved, "
            f"{len(summary.failed_files)} failed file(s)"
        )
        return summary
