"""Typed exception hierarchy for update rule errors.

Rule file problems are split in two: a missing or unreadable rule file
(RuleFileError) stops update mode, while a bad row (RuleParseError) is
reported as a warning and skipped.
"""

from typing import Optional

from src.vsdx_package.errors import LinkCheckerError


class RuleError(LinkCheckerError):
    """Base exception for all rule table errors."""
    pass


class RuleFileError(RuleError):
    """Raised when the rule file cannot be read."""

    def __init__(self, file_path: str, reason: Optional[str] = None):
        message = f"Cannot read rule file {file_path}"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.file_path = file_path
        self.reason = reason


class RuleParseError(RuleError):
    """Raised for a rule row that cannot be turned into an UpdateRule."""

    def __init__(self, line_number: int, line: str, reason: str):
        super().__init__(f"Line {line_number}: {reason} ({line!r})")
        self.line_number = line_number
        self.line = line
        self.reason = reason
