"""Hyperlink liveness checking and broken link reporting.

This package probes the URLs extracted from Visio packages with bounded
parallelism and groups the broken ones by file and page for output.
"""

from .errors import LinkCheckError, NetworkFailure
from .models import ProbeResult, ReportGroup, BrokenLinkReport
from .url_checker import UrlChecker, build_url_index, MAX_WORKERS, DEFAULT_TIMEOUT, DEFAULT_USER_AGENT
from .report_builder import build_report

__all__ = [
    'LinkCheckError',
    'NetworkFailure',
    'ProbeResult',
    'ReportGroup',
    'BrokenLinkReport',
    'UrlChecker',
    'build_url_index',
    'build_report',
    'MAX_WORKERS',
    'DEFAULT_TIMEOUT',
    'DEFAULT_USER_AGENT',
]
