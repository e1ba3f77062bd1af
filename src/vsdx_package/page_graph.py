"""Resolution of page display names from the page relationship graph.

A Visio page is described by two parts that only meet through a
relationship ID:

    visio/pages/pages.xml             <Page Name="Overview"><Rel r:id="rId1"/></Page>
    visio/pages/_rels/pages.xml.rels  <Relationship Id="rId1" Target="page1.xml"/>

PageIndex keeps one table keyed by (file, relationship id). Each part upserts
into it independently, so the parts may be read in any order and the final
records are the same.
"""

import logging
from typing import Dict, List, Optional, Tuple

from .errors import MalformedPackageError
from .models import PAGE_INDEX_PART, PAGE_RELS_PART, Page
from .xml_parts import RELATIONSHIPS_NS, default_namespace, parse_part, qname

logger = logging.getLogger(__name__)


class PageIndex:
    """Table of pages across all processed files.

    Example:
        >>> index = PageIndex()
        >>> index.apply_page_index("a.vsdx", pages_xml)
        >>> index.apply_relationships("a.vsdx", rels_xml)
        >>> index.resolve_display_name("a.vsdx", "page1.xml")
        'Overview'
    """

    def __init__(self):
        self._pages: Dict[Tuple[str, str], Page] = {}

    def __len__(self) -> int:
        return len(self._pages)

    def __iter__(self):
        return iter(self._pages.values())

    def pages_for(self, file_path: str) -> List[Page]:
        return [page for page in self._pages.values() if page.file == file_path]

    def get(self, file_path: str, rel_id: str) -> Optional[Page]:
        return self._pages.get((file_path, rel_id))

    def upsert(self, file_path: str, rel_id: str) -> Page:
        """Return the Page for (file, rel_id), creating it on first reference."""
        key = (file_path, rel_id)
        page = self._pages.get(key)
        if page is None:
            page = Page(file=file_path, rel_id=rel_id)
            self._pages[key] = page
        return page

    def apply_page_index(self, file_path: str, data: bytes) -> int:
        """Read display names from pages.xml.

        Returns:
            Number of Page elements read

        Raises:
            MalformedPackageError: If a Page lacks its Name or Rel r:id
        """
        root = parse_part(file_path, PAGE_INDEX_PART, data).getroot()
        ns = default_namespace(root)
        r_ns = root.nsmap.get("r") or RELATIONSHIPS_NS

        count = 0
        for page_element in root.iterchildren(qname(ns, "Page")):
            display_name = page_element.get("Name")
            if display_name is None:
                raise MalformedPackageError(file_path, "Page element has no Name", PAGE_INDEX_PART)

            rel_element = page_element.find(qname(ns, "Rel"))
            rel_id = rel_element.get(qname(r_ns, "id")) if rel_element is not None else None
            if not rel_id:
                raise MalformedPackageError(
                    file_path,
                    f"Page '{display_name}' has no Rel r:id",
                    PAGE_INDEX_PART,
                )

            self.upsert(file_path, rel_id).display_name = display_name
            count += 1

        logger.debug(f"{file_path}: read {count} page name(s) from {PAGE_INDEX_PART}")
        return count

    def apply_relationships(self, file_path: str, data: bytes) -> int:
        """Read part names from pages.xml.rels.

        Returns:
            Number of Relationship elements read

        Raises:
            MalformedPackageError: If a Relationship lacks Id or Target
        """
        root = parse_part(file_path, PAGE_RELS_PART, data).getroot()
        ns = default_namespace(root)

        count = 0
        for relationship in root.iterchildren(qname(ns, "Relationship")):
            rel_id = relationship.get("Id")
            target = relationship.get("Target")
            if not rel_id or not target:
                raise MalformedPackageError(
                    file_path,
                    "Relationship element needs both Id and Target",
                    PAGE_RELS_PART,
                )

            self.upsert(file_path, rel_id).part_name = target
            count += 1

        logger.debug(f"{file_path}: read {count} relationship(s) from {PAGE_RELS_PART}")
        return count

    def find_by_part(self, file_path: str, part_name: str) -> Optional[Page]:
        for page in self._pages.values():
            if page.file == file_path and page.part_name == part_name:
                return page
        return None

    def resolve_display_name(self, file_path: str, part_name: str) -> str:
        """Display name for a page part, falling back to the part name."""
        page = self.find_by_part(file_path, part_name)
        if page is None or page.display_name is None:
            return part_name
        return page.display_name
