"""Test fixtures for building .vsdx packages.

Provides helpers that write small but structurally faithful Visio packages:
- pages.xml / pages.xml.rels page graph parts
- page parts with shapes carrying Hyperlink sections, Text and User sections
- a package writer with control over entry order

These fixtures are used by unit and integration tests across packages.
"""

import html
import zipfile
from typing import Dict, List, Optional, Sequence, Tuple

VISIO_NS = "http://schemas.microsoft.com/office/visio/2012/main"
OFFICE_REL_NS = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"
PACKAGE_REL_NS = "http://schemas.openxmlformats.org/package/2006/relationships"
PAGE_REL_TYPE = "http://schemas.microsoft.com/visio/2010/relationships/page"

XML_DECLARATION = "<?xml version='1.0' encoding='utf-8' ?>\n"

CONTENT_TYPES_XML = (
    XML_DECLARATION
    + '<Types xmlns="http://schemas.openxmlformats.org/package/2006/content-types">'
    '<Default Extension="rels" ContentType="application/vnd.openxmlformats-package.relationships+xml"/>'
    '<Default Extension="xml" ContentType="application/xml"/>'
    "</Types>"
)

DOCUMENT_XML = (
    XML_DECLARATION
    + f'<VisioDocument xmlns="{VISIO_NS}" xmlns:r="{OFFICE_REL_NS}" xml:space="preserve">'
    "<DocumentSettings/></VisioDocument>"
)


def _attr(value: str) -> str:
    return html.escape(value, quote=True)


# ==============================================================================
# Page graph parts
# ==============================================================================

def pages_xml(pages: Sequence[Tuple[str, str]]) -> str:
    """Build visio/pages/pages.xml.

    Args:
        pages: (display name, relationship id) per page

    Example:
        >>> pages_xml([("Overview", "rId1")])
    """
    body = "".join(
        f'<Page ID="{index}" NameU="{_attr(name)}" Name="{_attr(name)}">'
        f'<PageSheet/><Rel r:id="{rel_id}"/></Page>'
        for index, (name, rel_id) in enumerate(pages)
    )
    return (
        XML_DECLARATION
        + f'<Pages xmlns="{VISIO_NS}" xmlns:r="{OFFICE_REL_NS}" xml:space="preserve">'
        + body
        + "</Pages>"
    )


def pages_rels_xml(relationships: Sequence[Tuple[str, str]]) -> str:
    """Build visio/pages/_rels/pages.xml.rels.

    Args:
        relationships: (relationship id, target part name) per page
    """
    body = "".join(
        f'<Relationship Id="{rel_id}" Type="{PAGE_REL_TYPE}" Target="{target}"/>'
        for rel_id, target in relationships
    )
    return XML_DECLARATION + f'<Relationships xmlns="{PACKAGE_REL_NS}">' + body + "</Relationships>"


# ==============================================================================
# Page parts
# ==============================================================================

def hyperlink_row(
    address: str,
    description: str = "",
    extra_info: str = "",
    new_window: Optional[str] = "0",
    row_name: str = "Row_1",
    omit: Sequence[str] = (),
) -> str:
    """Build one hyperlink Row.

    Args:
        address: Address cell value
        description: Description cell value
        extra_info: ExtraInfo cell value
        new_window: NewWindow cell value (None leaves the cell out)
        row_name: Row N attribute
        omit: Cell names to leave out, for malformed-row tests
    """
    cells = [
        ("Description", description),
        ("Address", address),
        ("SubAddress", ""),
        ("ExtraInfo", extra_info),
        ("Frame", ""),
        ("SortKey", ""),
    ]
    if new_window is not None:
        cells.append(("NewWindow", new_window))
    cells.append(("Default", "0"))

    body = "".join(
        f'<Cell N="{name}" V="{_attr(value)}"/>'
        for name, value in cells
        if name not in omit
    )
    return f'<Row N="{row_name}">{body}</Row>'


def alt_text_section(value: str = "Alternative text") -> str:
    """User section holding only the legacy visAltText row."""
    return (
        '<Section N="User">'
        f'<Row N="visAltText"><Cell N="Value" V="{_attr(value)}" U="STR"/>'
        '<Cell N="Prompt" V="" F="No Formula"/></Row>'
        "</Section>"
    )


def user_section(row_names: Sequence[str]) -> str:
    """User section with arbitrary rows."""
    rows = "".join(f'<Row N="{name}"><Cell N="Value" V="1"/></Row>' for name in row_names)
    return f'<Section N="User">{rows}</Section>'


def shape_xml(
    shape_id: int,
    rows: Sequence[str] = (),
    text: Optional[str] = None,
    extra_sections: Sequence[str] = (),
    children: Sequence[str] = (),
) -> str:
    """Build a Shape element.

    Args:
        shape_id: Shape ID attribute
        rows: Hyperlink rows (a Hyperlink section is added when non-empty)
        text: Text element content, written as-is
        extra_sections: Additional Section elements (e.g. alt_text_section())
        children: Nested Shape elements (group shape)
    """
    parts = [f'<Shape ID="{shape_id}" Type="Shape">', '<Cell N="PinX" V="1"/>']
    parts.extend(extra_sections)
    if rows:
        parts.append('<Section N="Hyperlink">' + "".join(rows) + "</Section>")
    if text is not None:
        parts.append(f"<Text>{html.escape(text, quote=False)}</Text>")
    if children:
        parts.append("<Shapes>" + "".join(children) + "</Shapes>")
    parts.append("</Shape>")
    return "".join(parts)


def page_xml(shapes: Sequence[str]) -> str:
    """Build a page part (PageContents) around the given shapes."""
    return (
        XML_DECLARATION
        + f'<PageContents xmlns="{VISIO_NS}" xmlns:r="{OFFICE_REL_NS}" xml:space="preserve">'
        + "<Shapes>" + "".join(shapes) + "</Shapes>"
        + "</PageContents>"
    )


# ==============================================================================
# Package writer
# ==============================================================================

def build_vsdx(
    path,
    pages: Dict[str, str],
    page_names: Optional[Dict[str, str]] = None,
    rels_first: bool = False,
    include_page_graph: bool = True,
    extra_entries: Optional[Dict[str, str]] = None,
) -> str:
    """Write a .vsdx package and return its path.

    Args:
        path: Destination file path
        pages: Part name (e.g. "page1.xml") -> page XML
        page_names: Part name -> display name (defaults to "Page-N")
        rels_first: Write pages.xml.rels before pages.xml
        include_page_graph: Write pages.xml and its relationships part
        extra_entries: Additional entries written at the end of the archive

    Example:
        >>> build_vsdx(tmp_path / "a.vsdx", {"page1.xml": page_xml([...])})
    """
    page_names = page_names or {}
    graph: List[Tuple[str, str, str]] = []
    for index, part_name in enumerate(pages, start=1):
        display_name = page_names.get(part_name, f"Page-{index}")
        graph.append((display_name, f"rId{index}", part_name))

    index_part = ("visio/pages/pages.xml", pages_xml([(name, rel_id) for name, rel_id, _ in graph]))
    rels_part = (
        "visio/pages/_rels/pages.xml.rels",
        pages_rels_xml([(rel_id, target) for _, rel_id, target in graph]),
    )

    entries: List[Tuple[str, str]] = [
        ("[Content_Types].xml", CONTENT_TYPES_XML),
        ("visio/document.xml", DOCUMENT_XML),
    ]
    if include_page_graph:
        entries.extend([rels_part, index_part] if rels_first else [index_part, rels_part])
    for part_name, content in pages.items():
        entries.append((f"visio/pages/{part_name}", content))
    for name, content in (extra_entries or {}).items():
        entries.append((name, content))

    with zipfile.ZipFile(str(path), "w", compression=zipfile.ZIP_DEFLATED) as archive:
        for name, content in entries:
            archive.writestr(name, content.encode("utf-8"))

    return str(path)


def read_entry(path, name: str) -> bytes:
    """Read one entry of a package."""
    with zipfile.ZipFile(str(path)) as archive:
        return archive.read(name)


def read_all_entries(path) -> Dict[str, bytes]:
    """Read every entry of a package, in archive order."""
    with zipfile.ZipFile(str(path)) as archive:
        return {info.filename: archive.read(info.filename) for info in archive.infolist()}


def sample_page() -> str:
    """Page with three linked shapes, one nested, plus text and alt text.

    Links (in document order):
        1. http://a.example/docs?id=7  "Docs"
        2. https://b.example/          "Home"
        3. http://a.example/docs?id=7  "Docs again" (nested shape)
    """
    return page_xml([
        shape_xml(
            1,
            rows=[hyperlink_row("http://a.example/docs", "Docs", extra_info="id=7")],
            text="Old shape text\n",
            extra_sections=[alt_text_section()],
        ),
        shape_xml(
            2,
            rows=[hyperlink_row("https://b.example/", "Home", new_window="1")],
            children=[
                shape_xml(3, rows=[hyperlink_row("http://a.example/docs", "Docs again", extra_info="id=7")]),
            ],
        ),
    ])
