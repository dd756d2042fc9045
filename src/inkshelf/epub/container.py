# ABOUTME: Reads META-INF/container.xml to find the package document's path.
# ABOUTME: Any failure here means the file is not a usable EPUB.

from lxml import etree

from inkshelf.epub.archive import ArchiveReader
from inkshelf.epub.errors import InvalidArchive
from inkshelf.epub.paths import normalize_entry_path
from inkshelf.epub.xmlparse import (
    LxmlParser,
    MalformedXml,
    XmlParser,
    find_child,
    find_descendants,
    get_attribute,
    iter_children,
    local_name,
)

CONTAINER_PATH = "META-INF/container.xml"
PACKAGE_MEDIA_TYPE = "application/oebps-package+xml"


def _rootfiles(root: etree._Element) -> list[etree._Element]:
    """Collect <rootfile> elements from the recognized container layouts.

    The canonical layout is container/rootfiles/rootfile; some producers
    omit the <rootfiles> wrapper or the namespace, so fall back to any
    <rootfile> in the document.
    """
    if local_name(root.tag) == "container":
        wrapper = find_child(root, "rootfiles")
        if wrapper is not None:
            found = list(iter_children(wrapper, "rootfile"))
            if found:
                return found
    return find_descendants(root, "rootfile")


def resolve_package_path(reader: ArchiveReader, parser: XmlParser | None = None) -> str:
    """Find the archive path of the package (OPF) document.

    When the container lists several rootfiles, the first one declaring the
    OEBPS package media type wins; otherwise the first rootfile is used.

    Args:
        reader: The open archive.
        parser: XML parser to use; defaults to LxmlParser.

    Returns:
        The package document's archive path, e.g. ``OEBPS/content.opf``.

    Raises:
        InvalidArchive: If the container is missing, malformed, or names no
            package document.
    """
    if reader.get(CONTAINER_PATH) is None:
        raise InvalidArchive(f"Invalid EPUB: {CONTAINER_PATH} not found")

    parser = parser or LxmlParser()
    try:
        root = parser.parse(reader.read_bytes(CONTAINER_PATH))
    except MalformedXml as exc:
        raise InvalidArchive(f"Invalid EPUB: unparsable {CONTAINER_PATH}: {exc}") from exc

    rootfiles = _rootfiles(root)
    preferred = [
        rf for rf in rootfiles
        if (get_attribute(rf, "media-type") or "").strip().lower() == PACKAGE_MEDIA_TYPE
    ]
    for rootfile in preferred + rootfiles:
        full_path = (get_attribute(rootfile, "full-path") or "").strip()
        if full_path:
            return normalize_entry_path(full_path)

    raise InvalidArchive(f"Invalid EPUB: no package path in {CONTAINER_PATH}")
