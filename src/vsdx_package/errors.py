"""Typed exception hierarchy for Visio package errors.

This module defines all custom exceptions raised while reading or mutating
.vsdx packages. All exceptions inherit from LinkCheckerError so callers can
catch any application-level error with a single clause, and include the
file (and part, where known) to help with debugging.
"""

from typing import Optional


class LinkCheckerError(Exception):
    """Base exception for all visio-link-checker errors.

    Use this to catch any application-level error from the tool.
    """
    pass


class PackageError(LinkCheckerError):
    """Base exception for all package-related errors."""
    pass


class PackageNotFoundError(PackageError):
    """Raised when a package file does not exist."""

    def __init__(self, file_path: str):
        super().__init__(f"Package not found: {file_path}")
        self.file_path = file_path


class MalformedPackageError(PackageError):
    """Raised when a package or one of its parts violates schema assumptions."""

    def __init__(self, file_path: str, reason: str, part_name: Optional[str] = None):
        if part_name:
            message = f"Malformed package {file_path} ({part_name}): {reason}"
        else:
            message = f"Malformed package {file_path}: {reason}"
        super().__init__(message)
        self.file_path = file_path
        self.part_name = part_name
        self.reason = reason


class LockConflictError(PackageError):
    """Raised when a package is locked by another process."""

    def __init__(self, file_path: str):
        super().__init__(
            f"Package {file_path} is in use by another process"
        )
        self.file_path = file_path
