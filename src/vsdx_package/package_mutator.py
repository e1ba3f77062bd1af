"""Rule-driven and structural rewriting of Visio page parts.

This module provides the PackageMutator class which opens each package for
update and, for every page part, applies:

1. ObjectText rules to shape Text elements (stored text ends with a newline,
   so a rule matches when the element value is exactly ``find + "\\n"``)
2. LinkUrl and LinkText rules to hyperlink rows (exact match only)
3. Structural normalization: NewWindow "0" becomes "1" and User sections
   holding only the legacy visAltText row are removed

Only parts that actually changed are serialized back; everything else in the
archive keeps its original bytes. A malformed part aborts the whole file
without committing anything.
"""

import logging
from dataclasses import dataclass
from typing import List

from lxml import etree

from src.update_rules.models import RuleSet

from .errors import PackageError
from .models import EntryRef, FileResult
from .package_reader import PackageHandle, open_for_update
from .xml_parts import (
    build_url,
    default_namespace,
    element_value,
    iter_sections,
    parse_part,
    qname,
    require_cell,
    serialize_part,
    set_element_value,
    split_url,
)

logger = logging.getLogger(__name__)

ALT_TEXT_ROW = "visAltText"


@dataclass
class PartChanges:
    """Counts of edits applied to one page part."""
    text_replacements: int = 0
    url_replacements: int = 0
    description_replacements: int = 0
    new_window_fixes: int = 0
    alt_text_removed: int = 0

    @property
    def changed(self) -> bool:
        return any((
            self.text_replacements,
            self.url_replacements,
            self.description_replacements,
            self.new_window_fixes,
            self.alt_text_removed,
        ))


def _remove_keeping_tail(element: etree._Element) -> None:
    # lxml drops an element's tail text with it; keep the surrounding layout
    parent = element.getparent()
    previous = element.getprevious()
    tail = element.tail
    parent.remove(element)
    if tail:
        if previous is not None:
            previous.tail = (previous.tail or "") + tail
        else:
            parent.text = (parent.text or "") + tail


def _apply_object_text_rules(root: etree._Element, ns: str, rule_set: RuleSet, changes: PartChanges) -> None:
    if not rule_set.object_text:
        return

    for text_element in list(root.iter(qname(ns, "Text"))):
        value = element_value(text_element)
        if not value.endswith("\n"):
            continue
        replacement = rule_set.object_text.get(value[:-1])
        if replacement is None or replacement == value:
            continue
        set_element_value(text_element, replacement)
        changes.text_replacements += 1


def _apply_hyperlink_rules(
    root: etree._Element,
    ns: str,
    rule_set: RuleSet,
    changes: PartChanges,
    file_path: str,
    part_name: str,
) -> None:
    for section in iter_sections(root, ns, "Hyperlink"):
        for row in section.iterchildren(qname(ns, "Row")):
            description_cell = require_cell(row, ns, "Description", file_path, part_name)
            address_cell = require_cell(row, ns, "Address", file_path, part_name)
            extra_info_cell = require_cell(row, ns, "ExtraInfo", file_path, part_name)
            new_window_cell = require_cell(row, ns, "NewWindow", file_path, part_name)

            description = description_cell.get("V")
            address = address_cell.get("V")
            extra_info = extra_info_cell.get("V")

            new_url = rule_set.link_url.get(build_url(address, extra_info))
            if new_url is not None:
                new_address, new_extra_info = split_url(new_url)
                if (new_address, new_extra_info) != (address, extra_info):
                    address_cell.set("V", new_address)
                    extra_info_cell.set("V", new_extra_info)
                    changes.url_replacements += 1

            new_description = rule_set.link_text.get(description)
            if new_description is not None and new_description != description:
                description_cell.set("V", new_description)
                changes.description_replacements += 1

            if new_window_cell.get("V") == "0":
                new_window_cell.set("V", "1")
                changes.new_window_fixes += 1


def _remove_alt_text_sections(root: etree._Element, ns: str, changes: PartChanges) -> None:
    row_tag = qname(ns, "Row")
    for section in list(iter_sections(root, ns, "User")):
        children = [child for child in section if isinstance(child.tag, str)]
        if len(children) != 1:
            continue
        only_child = children[0]
        if only_child.tag == row_tag and only_child.get("N") == ALT_TEXT_ROW:
            _remove_keeping_tail(section)
            changes.alt_text_removed += 1


def apply_to_part(
    tree: etree._ElementTree,
    rule_set: RuleSet,
    file_path: str,
    part_name: str,
) -> PartChanges:
    """Apply rules and structural normalization to one parsed page part.

    The tree is modified in place.

    Raises:
        MalformedPackageError: If a hyperlink row lacks an expected cell
    """
    root = tree.getroot()
    ns = default_namespace(root)
    changes = PartChanges()

    _apply_object_text_rules(root, ns, rule_set, changes)
    _apply_hyperlink_rules(root, ns, rule_set, changes, file_path, part_name)
    _remove_alt_text_sections(root, ns, changes)

    return changes


class PackageMutator:
    """Rewrites page parts of package files in place.

    Files are processed one at a time, each under an exclusive lock. A file
    that is locked or malformed is reported as failed and left untouched;
    the other files are still updated.

    Example:
        >>> rule_set = RuleLoader.load("LinkUpdates.csv")
        >>> results = PackageMutator().update(["a.vsdx"], rule_set)
        >>> results[0].parts_updated
        ['visio/pages/page1.xml']
    """

    def update(self, files: List[str], rule_set: RuleSet) -> List[FileResult]:
        results = []
        for file_path in files:
            logger.info(f"Processing file: {file_path}")
            try:
                result = self.update_file(file_path, rule_set)
            except PackageError as e:
                logger.error(f"Failed to update {file_path}: {e}")
                result = FileResult(file=file_path)
                result.mark_failed(e)
            results.append(result)
        return results

    def update_file(self, file_path: str, rule_set: RuleSet) -> FileResult:
        """Update every page part of one file and commit the changed ones.

        Raises:
            LockConflictError: If the file is in use
            MalformedPackageError: If the archive or a page part is malformed
        """
        result = FileResult(file=file_path)

        with open_for_update(file_path) as package:
            for entry in package.entries():
                if not entry.is_page_part:
                    continue
                changes = self._update_part(package, entry, rule_set)
                if changes.changed:
                    result.parts_updated.append(entry.name)
                result.text_replacements += changes.text_replacements
                result.url_replacements += changes.url_replacements
                result.description_replacements += changes.description_replacements
                result.new_window_fixes += changes.new_window_fixes
                result.alt_text_removed += changes.alt_text_removed

        if not result.parts_updated:
            logger.debug(f"{file_path}: no changes")
        return result

    def _update_part(self, package: PackageHandle, entry: EntryRef, rule_set: RuleSet) -> PartChanges:
        with package.open_entry(entry) as stream:
            tree = parse_part(package.path, entry.name, stream.read())
            changes = apply_to_part(tree, rule_set, package.path, entry.name)

            if changes.changed:
                logger.info(f"Saving file page: {entry.name}")
                stream.seek(0)
                stream.write(serialize_part(tree))
                stream.truncate()

        return changes
