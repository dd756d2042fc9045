# ABOUTME: Prepares what chapter rendering needs: image lookup table and chapter text.
# ABOUTME: Also answers spine navigation questions (next/previous chapter).

import base64
import logging

from inkshelf.epub.archive import ArchiveReader
from inkshelf.epub.paths import basename, join_archive_path
from inkshelf.epub.types import Chapter, ManifestItem, PackageDocument

logger = logging.getLogger(__name__)

_DEFAULT_IMAGE_MEDIA_TYPE = "image/jpeg"


def image_lookup_keys(item: ManifestItem, base_path: str) -> list[str]:
    """Every archive path (and fallback key) an image may be referenced by.

    The first key that names an existing entry is where the bytes are read
    from; the table then answers for all of them.
    """
    href = item.href
    base_prefix = f"{base_path}/" if base_path else ""
    file_name = basename(href)
    keys = [
        join_archive_path(base_path, href),
        f"{base_prefix}{href}".lstrip("/"),
        href,
        f"OEBPS/{href}",
        file_name,
        f"images/{file_name}",
        f"Images/{file_name}",
        f"OEBPS/images/{file_name}",
        f"OEBPS/Images/{file_name}",
        f"OEBPS/{file_name}",
        f"{base_prefix}images/{file_name}",
        f"{base_prefix}Images/{file_name}",
    ]
    return list(dict.fromkeys(keys))


def to_data_url(data: bytes, media_type: str) -> str:
    """Encode bytes as a base64 data URL."""
    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{media_type};base64,{encoded}"


def build_resource_table(reader: ArchiveReader, package: PackageDocument) -> dict[str, str]:
    """Decode every manifest image once into a data-URL lookup table.

    The image's own archive path always maps to its data URL. Fallback keys
    such as the bare filename go to the first image that claims them. Images
    that cannot be found or read are logged and left out.

    Returns:
        A new dict; callers may cache it per book.
    """
    table: dict[str, str] = {}
    for item in package.manifest.values():
        if not item.is_image:
            continue

        keys = image_lookup_keys(item, package.base_path)
        found = next((key for key in keys if reader.get(key) is not None), None)
        if found is None:
            logger.warning("Image not in archive: %s (tried %d paths)", item.href, len(keys))
            continue

        try:
            data = reader.read_bytes(found)
        except Exception as exc:
            logger.warning("Failed to read image %s: %s", found, exc)
            continue

        data_url = to_data_url(data, item.media_type or _DEFAULT_IMAGE_MEDIA_TYPE)
        table[found] = data_url
        for key in keys:
            table.setdefault(key, data_url)

    return table


def load_chapter(
    reader: ArchiveReader, package: PackageDocument, chapter_id: str
) -> Chapter | None:
    """Load one manifest document as a Chapter, or None if missing or empty."""
    item = package.manifest.get(chapter_id)
    if item is None or not item.href:
        return None

    path = join_archive_path(package.base_path, item.href.split("#", 1)[0])
    if reader.get(path) is None:
        logger.warning("Chapter %s not in archive at %s", chapter_id, path)
        return None

    content = reader.read_text(path)
    if not content:
        return None
    return Chapter(id=item.id, href=item.href, raw_content=content)


def load_chapters(reader: ArchiveReader, package: PackageDocument) -> list[Chapter]:
    """Load every spine document in reading order, skipping missing ones."""
    chapters: list[Chapter] = []
    for chapter_id in package.spine:
        chapter = load_chapter(reader, package, chapter_id)
        if chapter is not None:
            chapters.append(chapter)
    return chapters


def next_chapter_id(current_id: str, spine: list[str]) -> str | None:
    """The spine id after current_id, or None at the end or if unknown."""
    if current_id not in spine:
        return None
    index = spine.index(current_id)
    return spine[index + 1] if index + 1 < len(spine) else None


def previous_chapter_id(current_id: str, spine: list[str]) -> str | None:
    """The spine id before current_id, or None at the start or if unknown."""
    if current_id not in spine:
        return None
    index = spine.index(current_id)
    return spine[index - 1] if index > 0 else None
