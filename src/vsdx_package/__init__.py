"""Visio package (.vsdx) access for hyperlink checking and rewriting.

This package reads the zip-contained XML parts of a Visio drawing, resolves
page display names through the page relationship graph, extracts hyperlink
rows from page shapes, and rewrites page parts in place.
"""

from .errors import (
    LinkCheckerError,
    PackageError,
    PackageNotFoundError,
    MalformedPackageError,
    LockConflictError,
)
from .models import Page, Link, EntryRef, FileResult
from .package_reader import PackageHandle, open_for_read, open_for_update
from .page_graph import PageIndex
from .link_extractor import LinkExtractor, ExtractionResult
from .package_mutator import PackageMutator

__all__ = [
    'LinkCheckerError',
    'PackageError',
    'PackageNotFoundError',
    'MalformedPackageError',
    'LockConflictError',
    'Page',
    'Link',
    'EntryRef',
    'FileResult',
    'PackageHandle',
    'open_for_read',
    'open_for_update',
    'PageIndex',
    'LinkExtractor',
    'ExtractionResult',
    'PackageMutator',
]
