"""Test fixtures for visio-link-checker.

This module provides builders for small .vsdx packages written on the fly
into a test's temporary directory (see vsdx_fixtures).
"""

from .vsdx_fixtures import (
    build_vsdx,
    hyperlink_row,
    page_xml,
    read_all_entries,
    read_entry,
    sample_page,
    shape_xml,
)

__all__ = [
    "build_vsdx",
    "hyperlink_row",
    "page_xml",
    "read_all_entries",
    "read_entry",
    "sample_page",
    "shape_xml",
]
