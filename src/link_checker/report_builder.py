"""Grouping of broken links for display."""

import logging
from typing import Dict, List

from src.vsdx_package.models import Link
from src.vsdx_package.page_graph import PageIndex

from .models import BrokenLinkReport, ReportGroup

logger = logging.getLogger(__name__)


def build_report(files: List[str], links: List[Link], pages: PageIndex) -> BrokenLinkReport:
    """Group broken links by file (input order) and page display name.

    Pages appear in the order their first broken link was extracted.
    Unresolved pages are listed under their part name.
    """
    report = BrokenLinkReport()

    for file_path in files:
        groups: Dict[str, ReportGroup] = {}
        for link in links:
            if link.file != file_path or not link.broken:
                continue
            display_name = pages.resolve_display_name(link.file, link.page)
            group = groups.get(display_name)
            if group is None:
                group = ReportGroup(file=file_path, display_name=display_name)
                groups[display_name] = group
            group.links.append(link)
        report.groups.extend(groups.values())

    logger.debug(f"Report: {report.total} broken link(s) in {len(report.groups)} page group(s)")
    return report
