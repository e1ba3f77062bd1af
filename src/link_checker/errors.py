"""Typed exceptions for hyperlink probing.

A NetworkFailure never escapes the URL checker: it is how a failed probe is
described before being recorded as a broken link.
"""

from typing import Optional

from src.vsdx_package.errors import LinkCheckerError


class LinkCheckError(LinkCheckerError):
    """Base exception for all link checking errors."""
    pass


class NetworkFailure(LinkCheckError):
    """Raised when a probe does not end in HTTP 200."""

    def __init__(self, url: str, reason: str, status_code: Optional[int] = None):
        super().__init__(f"{reason} - {url}")
        self.url = url
        self.reason = reason
        self.status_code = status_code
