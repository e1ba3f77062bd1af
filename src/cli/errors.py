"""Typed exception hierarchy for CLI-related errors.

This module defines all custom exceptions used by the CLI.
All exceptions inherit from CLIError base class for easy catching and
include descriptive messages with context to help with debugging.
"""

from typing import Optional

from src.vsdx_package.errors import LinkCheckerError


class CLIError(LinkCheckerError):
    """Base exception for all CLI-related errors."""
    pass


class PathNotFoundError(CLIError):
    """Raised when a command-line path is neither a file nor a directory."""

    def __init__(self, path: str):
        super().__init__(f"File or folder not found: {path}")
        self.path = path


class ConfigError(CLIError):
    """Raised when settings validation fails."""

    def __init__(self, message: str, config_field: Optional[str] = None):
        if config_field:
            full_message = f"Configuration error in field '{config_field}': {message}"
        else:
            full_message = f"Configuration error: {message}"
        super().__init__(full_message)
        self.config_field = config_field
        self.original_message = message


class ConfigFilesystemError(CLIError):
    """Raised when the settings file cannot be read."""

    def __init__(self, file_path: str, operation: str, reason: Optional[str] = None):
        message = f"Settings file operation '{operation}' failed for {file_path}"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.file_path = file_path
        self.operation = operation
        self.reason = reason
