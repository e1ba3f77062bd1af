"""XML helpers shared by the package parsers and the mutator.

Parts are parsed with lxml using a hardened parser: no DTD loading, no entity
resolution and no network access, so a crafted package cannot trigger XXE or
entity-expansion attacks. Element names are always compared in the
namespace declared on the part's root rather than by raw local name.
"""

import io
from typing import Iterator, Optional, Tuple

from lxml import etree

from .errors import MalformedPackageError

# Namespace of r:id attributes in pages.xml when the part does not declare "r"
RELATIONSHIPS_NS = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"


def _make_parser() -> etree.XMLParser:
    return etree.XMLParser(
        resolve_entities=False,
        load_dtd=False,
        no_network=True,
        remove_blank_text=False,
        huge_tree=False,
    )


def parse_part(file_path: str, part_name: str, data: bytes) -> etree._ElementTree:
    """Parse part bytes into an element tree.

    Raises:
        MalformedPackageError: If the part is not well-formed XML
    """
    try:
        return etree.parse(io.BytesIO(data), _make_parser())
    except etree.XMLSyntaxError as e:
        raise MalformedPackageError(file_path, f"invalid XML ({e})", part_name) from e


def serialize_part(tree: etree._ElementTree) -> bytes:
    """Serialize a tree without pretty-printing, keeping the XML declaration."""
    docinfo = tree.docinfo
    return etree.tostring(
        tree,
        xml_declaration=True,
        encoding=docinfo.encoding or "UTF-8",
        standalone=docinfo.standalone,
    )


def default_namespace(root: etree._Element) -> str:
    return root.nsmap.get(None) or ""


def qname(namespace: str, local_name: str) -> str:
    if namespace:
        return f"{{{namespace}}}{local_name}"
    return local_name


def iter_sections(root: etree._Element, namespace: str, section_name: str) -> Iterator[etree._Element]:
    """Yield every Section element with the given N attribute, document order."""
    for section in root.iter(qname(namespace, "Section")):
        if section.get("N") == section_name:
            yield section


def find_cell(row: etree._Element, namespace: str, cell_name: str) -> Optional[etree._Element]:
    for cell in row.iterchildren(qname(namespace, "Cell")):
        if cell.get("N") == cell_name:
            return cell
    return None


def require_cell(
    row: etree._Element,
    namespace: str,
    cell_name: str,
    file_path: str,
    part_name: str,
) -> etree._Element:
    """Return the named cell of a row, which must carry a V attribute.

    Raises:
        MalformedPackageError: If the cell or its V attribute is missing
    """
    cell = find_cell(row, namespace, cell_name)
    if cell is None:
        raise MalformedPackageError(
            file_path,
            f"hyperlink row (line {row.sourceline}) has no '{cell_name}' cell",
            part_name,
        )
    if cell.get("V") is None:
        raise MalformedPackageError(
            file_path,
            f"'{cell_name}' cell (line {cell.sourceline}) has no V attribute",
            part_name,
        )
    return cell


def build_url(address: str, extra_info: str) -> str:
    """Join Address and ExtraInfo into the canonical link URL.

    Example:
        >>> build_url("https://example.com/", "q=1")
        'https://example.com/?q=1'
        >>> build_url("https://example.com/", "")
        'https://example.com/'
    """
    if extra_info and extra_info.strip():
        return f"{address}?{extra_info}"
    return address


def split_url(url: str) -> Tuple[str, str]:
    """Split a URL into (Address, ExtraInfo) at the first '?'."""
    address, _, extra_info = url.partition("?")
    return address, extra_info


def element_value(element: etree._Element) -> str:
    """Concatenated text content of an element and its descendants."""
    return "".join(element.itertext())


def set_element_value(element: etree._Element, value: str) -> None:
    """Replace all content of an element with a single text node.

    Attributes are kept; child elements (and the text they carry) are dropped.
    """
    for child in list(element):
        element.remove(child)
    element.text = value
