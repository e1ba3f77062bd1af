"""Data models for link checking results."""

from dataclasses import dataclass, field
from typing import List, Optional

from src.vsdx_package.models import Link


@dataclass
class ProbeResult:
    """Outcome of probing one distinct URL.

    Attributes:
        url: URL as probed (first spelling seen among the links sharing it)
        live: True only for an HTTP 200 response
        status_code: HTTP status, None when no response was received
        reason: Failure description for broken URLs
        link_count: Number of links sharing this URL
    """
    url: str
    live: bool
    status_code: Optional[int] = None
    reason: Optional[str] = None
    link_count: int = 0


@dataclass
class ReportGroup:
    """Broken links of one page in one file.

    Attributes:
        file: Package file path
        display_name: Resolved page name (part name when unresolved)
        links: Broken links on that page, in extraction order
    """
    file: str
    display_name: str
    links: List[Link] = field(default_factory=list)


@dataclass
class BrokenLinkReport:
    """Broken links grouped by file, then by page display name."""
    groups: List[ReportGroup] = field(default_factory=list)

    @property
    def total(self) -> int:
        return sum(len(group.links) for group in self.groups)

    @property
    def is_empty(self) -> bool:
        return self.total == 0

    def lines(self) -> List[str]:
        """One "file, page, description, url" line per broken link."""
        return [
            f"{group.file}, {group.display_name}, {link.description}, {link.url}"
            for group in self.groups
            for link in group.links
        ]
