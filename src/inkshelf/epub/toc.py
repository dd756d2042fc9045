# ABOUTME: Locates and parses an EPUB's table of contents (NCX or EPUB 3 nav).
# ABOUTME: TOC problems are never fatal; a book without one just has an empty TOC.

import logging

from lxml import etree

from inkshelf.epub.archive import ArchiveReader
from inkshelf.epub.paths import join_archive_path
from inkshelf.epub.types import PackageDocument, TocEntry
from inkshelf.epub.xmlparse import (
    LxmlParser,
    XmlParser,
    find_child,
    find_descendants,
    get_attribute,
    iter_children,
    local_name,
)

logger = logging.getLogger(__name__)

NCX_MEDIA_TYPES = frozenset({"application/x-dtbncx+xml", "application/dtbncx+xml"})

_WELL_KNOWN_TOC_NAMES: tuple[str, ...] = (
    "toc.ncx",
    "TOC.ncx",
    "nav.xhtml",
    "toc.xhtml",
    "navigation.ncx",
    "ncx/toc.ncx",
)
_WELL_KNOWN_ROOT_PATHS: tuple[str, ...] = (
    "toc.ncx",
    "TOC.ncx",
    "nav.xhtml",
    "toc.xhtml",
    "OEBPS/toc.ncx",
    "OEBPS/nav.xhtml",
)

UNTITLED = "Untitled"


def find_toc_path(reader: ArchiveReader, package: PackageDocument) -> str | None:
    """Find the archive path of the table of contents document.

    Tries, in order: the spine's toc attribute, an NCX manifest item, an
    EPUB 3 nav item, and finally well-known file names. Only paths that exist
    in the archive are returned.
    """
    manifest = list(package.manifest.values())
    candidates: list[str] = []

    if package.spine_toc_id and package.spine_toc_id in package.manifest:
        candidates.append(package.manifest[package.spine_toc_id].href)

    candidates.extend(
        item.href
        for item in manifest
        if item.media_type in NCX_MEDIA_TYPES or item.href.lower().endswith(".ncx")
    )
    candidates.extend(
        item.href
        for item in manifest
        if "nav" in item.properties.split() or "nav" in item.href or "toc.xhtml" in item.href
    )

    for href in candidates:
        path = join_archive_path(package.base_path, href)
        if reader.get(path) is not None:
            return path

    fallbacks = [join_archive_path(package.base_path, name) for name in _WELL_KNOWN_TOC_NAMES]
    fallbacks.extend(_WELL_KNOWN_ROOT_PATHS)
    for path in fallbacks:
        if reader.get(path) is not None:
            return path

    logger.info("No table of contents found in %s", package.path)
    return None


def _node_text(node: etree._Element | None) -> str:
    if node is None:
        return ""
    return " ".join("".join(node.itertext()).split())


def _ncx_entries(parent: etree._Element, level: int) -> list[TocEntry]:
    entries: list[TocEntry] = []
    for index, point in enumerate(iter_children(parent, "navPoint")):
        label = find_child(point, "navLabel")
        title = _node_text(find_child(label, "text")) if label is not None else ""
        content = find_child(point, "content")
        href = (get_attribute(content, "src") or "") if content is not None else ""

        play_order_attr = get_attribute(point, "playOrder") or ""
        play_order = int(play_order_attr) if play_order_attr.strip().isdigit() else index

        entries.append(
            TocEntry(
                title=title or UNTITLED,
                href=href.strip(),
                level=level,
                play_order=play_order,
                children=_ncx_entries(point, level + 1),
            )
        )
    return entries


def parse_ncx(root: etree._Element) -> list[TocEntry]:
    """Entries from an NCX document's navMap, nested by navPoint."""
    nav_maps = find_descendants(root, "navMap")
    if not nav_maps:
        logger.warning("NCX document has no navMap")
        return []
    return _ncx_entries(nav_maps[0], 0)


def _list_link(item: etree._Element) -> etree._Element | None:
    """The <a> labelling a list item, ignoring links inside nested lists."""
    for child in item:
        if local_name(child.tag) == "a":
            return child
    for child in item:
        if local_name(child.tag) in ("ol", "ul"):
            continue
        links = find_descendants(child, "a")
        if links:
            return links[0]
    return None


def _nav_entries(element: etree._Element, level: int) -> list[TocEntry]:
    entries: list[TocEntry] = []
    for index, child in enumerate(element):
        tag = local_name(child.tag)
        if tag in ("ol", "ul"):
            entries.extend(_nav_entries(child, level))
            continue
        if tag != "li":
            continue

        link = _list_link(child)
        if link is None:
            continue
        nested = next(
            (node for node in child if local_name(node.tag) in ("ol", "ul")), None
        )
        entries.append(
            TocEntry(
                title=_node_text(link) or UNTITLED,
                href=(link.get("href") or "").strip(),
                level=level,
                play_order=index,
                children=_nav_entries(nested, level + 1) if nested is not None else [],
            )
        )
    return entries


def parse_nav(root: etree._Element) -> list[TocEntry]:
    """Entries from an EPUB 3 navigation document.

    Prefers <nav epub:type="toc">, then any <nav>, then the first list.
    """
    navs = find_descendants(root, "nav")
    toc_navs = [nav for nav in navs if get_attribute(nav, "type") == "toc"]
    lists = [el for el in root.iter() if local_name(el.tag) in ("ol", "ul")]

    container = next(iter(toc_navs or navs or lists), None)
    if container is None:
        logger.warning("Navigation document has no nav element or list")
        return []
    return _nav_entries(container, 0)


def extract_toc(
    reader: ArchiveReader, toc_path: str, parser: XmlParser | None = None
) -> list[TocEntry]:
    """Parse the TOC document at toc_path.

    XHTML/HTML documents are read as EPUB 3 navigation, anything else as NCX.
    Failures are logged and yield an empty list.
    """
    parser = parser or LxmlParser()
    try:
        root = parser.parse(reader.read_bytes(toc_path))
    except Exception as exc:
        logger.warning("Failed to read table of contents %s: %s", toc_path, exc)
        return []

    if toc_path.lower().endswith((".xhtml", ".html", ".htm")):
        return parse_nav(root)
    return parse_ncx(root)
