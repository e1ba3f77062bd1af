"""Data models for Visio packages.

This module defines the records produced while walking a .vsdx package:
pages resolved from the page index, hyperlink occurrences, and the per-file
outcome reported back to the CLI. All models use dataclasses.
"""

from dataclasses import dataclass, field
from typing import List, Optional


# Part names inside the package (zip entry names always use forward slashes)
PAGES_DIR = "visio/pages"
PAGE_INDEX_PART = "visio/pages/pages.xml"
PAGE_RELS_PART = "visio/pages/_rels/pages.xml.rels"


@dataclass
class Page:
    """One diagram page within one package file.

    A Page is created on first reference from either pages.xml or
    pages.xml.rels and filled in place as the other part is read.

    Attributes:
        file: Path of the owning package file
        rel_id: Relationship ID linking pages.xml to pages.xml.rels
        part_name: Physical part name (e.g. "page1.xml"), None until rels read
        display_name: Page name shown in Visio, None until pages.xml read
    """
    file: str
    rel_id: str
    part_name: Optional[str] = None
    display_name: Optional[str] = None

    @property
    def is_resolved(self) -> bool:
        return self.part_name is not None and self.display_name is not None


@dataclass
class Link:
    """One hyperlink occurrence on a shape.

    Attributes:
        file: Path of the owning package file
        page: Part name of the owning page (e.g. "page1.xml")
        description: Hyperlink display label
        url: "address" or "address?extraInfo"
        broken: Set by the URL checker when the probe fails

    Example:
        >>> link = Link(file="a.vsdx", page="page1.xml",
        ...             description="Docs", url="https://example.com/?q=1")
    """
    file: str
    page: str
    description: str
    url: str
    broken: bool = False


@dataclass
class EntryRef:
    """A named entry inside a package archive.

    Attributes:
        name: Full entry path (e.g. "visio/pages/page1.xml")
        size: Uncompressed size in bytes
    """
    name: str
    size: int = 0

    @property
    def basename(self) -> str:
        return self.name.rsplit("/", 1)[-1]

    @property
    def directory(self) -> str:
        return self.name.rsplit("/", 1)[0] if "/" in self.name else ""

    @property
    def is_page_part(self) -> bool:
        """True for page-shape parts (visio/pages/pageN.xml)."""
        return self.directory == PAGES_DIR and self.name != PAGE_INDEX_PART


@dataclass
class FileResult:
    """Structured outcome of processing one package file.

    Attributes:
        file: Package file path
        status: "ok" or "failed"
        error: Error message when status is "failed"
        links_found: Hyperlinks extracted (check mode)
        parts_updated: Part names rewritten (update mode)
        text_replacements: Text elements rewritten by ObjectText rules
        url_replacements: Hyperlink rows rewritten by LinkUrl rules
        description_replacements: Hyperlink rows rewritten by LinkText rules
        new_window_fixes: NewWindow cells switched from "0" to "1"
        alt_text_removed: visAltText User sections removed
    """
    file: str
    status: str = "ok"
    error: Optional[str] = None
    links_found: int = 0
    parts_updated: List[str] = field(default_factory=list)
    text_replacements: int = 0
    url_replacements: int = 0
    description_replacements: int = 0
    new_window_fixes: int = 0
    alt_text_removed: int = 0

    @property
    def failed(self) -> bool:
        return self.status == "failed"

    def mark_failed(self, error: Exception) -> None:
        self.status = "failed"
        self.error = str(error)
