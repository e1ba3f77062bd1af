"""Hyperlink extraction from Visio packages.

This module provides the LinkExtractor class which walks every package file,
feeds the page index and relationship parts into a shared PageIndex, and
emits one Link per hyperlink row found on any shape of any page.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from lxml import etree

from .errors import PackageError
from .models import PAGE_INDEX_PART, PAGE_RELS_PART, EntryRef, FileResult, Link
from .package_reader import PackageHandle, open_for_read
from .page_graph import PageIndex
from .xml_parts import (
    build_url,
    default_namespace,
    iter_sections,
    parse_part,
    qname,
    require_cell,
)

logger = logging.getLogger(__name__)


@dataclass
class ExtractionResult:
    """Pages, links and per-file outcomes from one extraction run.

    Attributes:
        pages: PageIndex populated from every successfully read file
        links: Link records in file, part and document order
        file_results: One FileResult per input file, in input order
    """
    pages: PageIndex = field(default_factory=PageIndex)
    links: List[Link] = field(default_factory=list)
    file_results: List[FileResult] = field(default_factory=list)

    @property
    def failed_files(self) -> List[FileResult]:
        return [result for result in self.file_results if result.failed]


def extract_links_from_part(file_path: str, part_name: str, tree: etree._ElementTree) -> List[Link]:
    """Build Link records for every hyperlink row of one page part.

    Rows with an empty Address (links to a location inside the drawing) are
    skipped, so the result can hold fewer Links than there are hyperlink rows.
    Such a row has no URL to probe; emitting it would put an empty URL into
    the check and report it as broken. The rows are still validated, and the
    update workflow still normalizes them.

    Raises:
        MalformedPackageError: If a hyperlink row lacks an expected cell
    """
    root = tree.getroot()
    ns = default_namespace(root)
    links = []

    for section in iter_sections(root, ns, "Hyperlink"):
        for row in section.iterchildren(qname(ns, "Row")):
            address = require_cell(row, ns, "Address", file_path, part_name).get("V")
            description = require_cell(row, ns, "Description", file_path, part_name).get("V")
            extra_info = require_cell(row, ns, "ExtraInfo", file_path, part_name).get("V")

            if not address.strip():
                logger.debug(f"{file_path} {part_name}: skipping hyperlink row without Address")
                continue

            links.append(Link(
                file=file_path,
                page=part_name,
                description=description,
                url=build_url(address, extra_info),
            ))

    return links


class LinkExtractor:
    """Collects pages and hyperlinks from a set of package files.

    A file that turns out to be malformed, locked or unreadable is recorded as
    failed and contributes nothing; the remaining files are still processed.

    Example:
        >>> result = LinkExtractor().extract(["a.vsdx", "b.vsdx"])
        >>> len(result.links)
        12
    """

    def __init__(self, pages: Optional[PageIndex] = None):
        self.pages = pages if pages is not None else PageIndex()

    def extract(self, files: List[str]) -> ExtractionResult:
        result = ExtractionResult(pages=self.pages)

        for file_path in files:
            file_result = FileResult(file=file_path)
            result.file_results.append(file_result)
            logger.info(f"Processing file: {file_path}")

            try:
                links = self.extract_file(file_path)
            except PackageError as e:
                logger.error(f"Failed to extract links from {file_path}: {e}")
                file_result.mark_failed(e)
                continue

            file_result.links_found = len(links)
            result.links.extend(links)

        logger.info(
            f"Extracted {len(result.links)} link(s) from "
            f"{len(files) - len(result.failed_files)} file(s)"
        )
        return result

    def extract_file(self, file_path: str) -> List[Link]:
        """Extract links from one file, updating the shared page index.

        Everything is parsed before anything is recorded, so a malformed part
        leaves neither pages nor links behind for that file.
        """
        with open_for_read(file_path) as package:
            staged_pages = PageIndex()
            links: List[Link] = []

            for entry in package.entries():
                if entry.name == PAGE_INDEX_PART:
                    staged_pages.apply_page_index(file_path, package.read_entry(entry.name))
                elif entry.name == PAGE_RELS_PART:
                    staged_pages.apply_relationships(file_path, package.read_entry(entry.name))
                elif entry.is_page_part:
                    links.extend(self._extract_part(package, entry))

        for page in staged_pages:
            target = self.pages.upsert(page.file, page.rel_id)
            if page.display_name is not None:
                target.display_name = page.display_name
            if page.part_name is not None:
                target.part_name = page.part_name

        logger.debug(f"{file_path}: {len(links)} link(s) on {len(staged_pages)} page(s)")
        return links

    def _extract_part(self, package: PackageHandle, entry: EntryRef) -> List[Link]:
        with package.open_entry(entry) as stream:
            tree = parse_part(package.path, entry.name, stream.read())
        return extract_links_from_part(package.path, entry.basename, tree)
