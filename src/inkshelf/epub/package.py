# ABOUTME: Parses the EPUB package (OPF) document: metadata, manifest, and spine.
# ABOUTME: Metadata parse failures degrade to a default record instead of raising.

import logging
from urllib.parse import unquote

from lxml import etree

from inkshelf.epub.archive import ArchiveReader
from inkshelf.epub.errors import InvalidArchive
from inkshelf.epub.paths import dirname
from inkshelf.epub.types import EpubMetadata, ManifestItem, PackageDocument
from inkshelf.epub.xmlparse import (
    LxmlParser,
    MalformedXml,
    XmlParser,
    find_child,
    find_descendants,
    get_attribute,
    iter_children,
)

logger = logging.getLogger(__name__)

# EpubMetadata attribute -> Dublin Core element local name
_DC_FIELDS: dict[str, str] = {
    "title": "title",
    "creator": "creator",
    "publisher": "publisher",
    "language": "language",
    "identifier": "identifier",
    "description": "description",
}


def _field_text(element: etree._Element) -> str | None:
    """Text of a metadata element, looking one level deeper for mixed content."""
    text = (element.text or "").strip()
    if text:
        return text
    for child in element:
        nested = (child.text or "").strip()
        if nested:
            return nested
    return None


def _metadata_from_root(root: etree._Element) -> EpubMetadata:
    """Build EpubMetadata from the first <metadata> block of a package root.

    Raises:
        ValueError: If the document has no metadata block.
    """
    blocks = find_descendants(root, "metadata")
    if not blocks:
        raise ValueError("package document has no <metadata> block")
    block = blocks[0]

    values: dict[str, str | None] = {}
    for attr, name in _DC_FIELDS.items():
        found = find_descendants(block, name)
        values[attr] = _field_text(found[0]) if found else None

    return EpubMetadata(
        title=values["title"] or "",
        creator=values["creator"],
        publisher=values["publisher"],
        language=values["language"],
        identifier=values["identifier"],
        description=values["description"],
    )


def _read_package_root(
    reader: ArchiveReader, package_path: str, parser: XmlParser
) -> etree._Element:
    if reader.get(package_path) is None:
        raise InvalidArchive(f"Invalid EPUB: package document not found: {package_path}")
    return parser.parse(reader.read_bytes(package_path))


def extract_metadata(
    reader: ArchiveReader, package_path: str, parser: XmlParser | None = None
) -> EpubMetadata:
    """Extract bibliographic metadata from the package document.

    A package document that cannot be read or parsed does not fail
    ingestion: the error is logged and a record carrying only the default
    title is returned.

    Args:
        reader: The open archive.
        package_path: Archive path of the OPF file.
        parser: XML parser to use; defaults to LxmlParser.

    Returns:
        The extracted EpubMetadata.

    Raises:
        InvalidArchive: If the package document does not exist in the archive.
    """
    if reader.get(package_path) is None:
        raise InvalidArchive(f"Invalid EPUB: package document not found: {package_path}")

    parser = parser or LxmlParser()
    try:
        root = parser.parse(reader.read_bytes(package_path))
        return _metadata_from_root(root)
    except Exception as exc:
        logger.warning("Failed to extract metadata from %s: %s", package_path, exc)
        return EpubMetadata()


def _manifest_items(root: etree._Element) -> dict[str, ManifestItem]:
    manifest = find_child(root, "manifest")
    if manifest is None:
        return {}
    items: dict[str, ManifestItem] = {}
    for node in iter_children(manifest, "item"):
        item_id = get_attribute(node, "id")
        href = get_attribute(node, "href")
        if not item_id or not href:
            continue
        items[item_id] = ManifestItem(
            id=item_id,
            href=unquote(href.strip()),
            media_type=(get_attribute(node, "media-type") or "").strip(),
            properties=(get_attribute(node, "properties") or "").strip(),
        )
    return items


def parse_package(
    reader: ArchiveReader, package_path: str, parser: XmlParser | None = None
) -> PackageDocument:
    """Parse the whole package document for rendering.

    Unlike extract_metadata, a package document that cannot be parsed is
    fatal here: without a manifest and spine there is nothing to render.

    Raises:
        InvalidArchive: If the package document is missing or unparsable.
    """
    parser = parser or LxmlParser()
    try:
        root = _read_package_root(reader, package_path, parser)
    except MalformedXml as exc:
        raise InvalidArchive(f"Invalid EPUB: unparsable package document: {exc}") from exc

    try:
        metadata = _metadata_from_root(root)
    except ValueError as exc:
        logger.warning("Failed to extract metadata from %s: %s", package_path, exc)
        metadata = EpubMetadata()

    spine_node = find_child(root, "spine")
    spine: list[str] = []
    spine_toc_id = None
    if spine_node is not None:
        spine_toc_id = get_attribute(spine_node, "toc")
        for itemref in iter_children(spine_node, "itemref"):
            idref = get_attribute(itemref, "idref")
            if idref:
                spine.append(idref)

    return PackageDocument(
        path=package_path,
        base_path=dirname(package_path),
        metadata=metadata,
        manifest=_manifest_items(root),
        spine=spine,
        spine_toc_id=spine_toc_id,
    )
