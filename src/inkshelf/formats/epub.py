# ABOUTME: High-level EPUB operations: ingest a volume, open a book, render a chapter.
# ABOUTME: Each call owns its archive handle and releases it on every exit path.

import asyncio
import html
import json
from dataclasses import asdict, dataclass, field
from pathlib import Path

from inkshelf.epub.archive import ArchiveReader, open_archive
from inkshelf.epub.chunked import CancelSignal, process_content_in_chunks
from inkshelf.epub.container import resolve_package_path
from inkshelf.epub.cover import locate_cover
from inkshelf.epub.errors import InvalidArchive
from inkshelf.epub.package import extract_metadata, parse_package
from inkshelf.epub.resources import build_resource_table, load_chapter
from inkshelf.epub.rewriter import (
    extract_body_content,
    process_chapter_content,
    strip_layout_overrides,
)
from inkshelf.epub.toc import extract_toc, find_toc_path
from inkshelf.epub.types import Chapter, CoverResult, EpubMetadata, PackageDocument, TocEntry
from inkshelf.epub.xmlparse import XmlParser


class ChapterNotFound(LookupError):
    """Raised when a chapter id is not in the manifest or its document is missing."""


@dataclass
class IngestResult:
    """What importing one volume produces: metadata and, maybe, a cover on disk."""

    metadata: EpubMetadata
    cover: CoverResult | None = None

    @property
    def cover_path(self) -> Path | None:
        return self.cover.saved_file_path if self.cover else None


@dataclass
class Book:
    """An opened book: its package document and table of contents."""

    package: PackageDocument
    toc: list[TocEntry] = field(default_factory=list)

    @property
    def metadata(self) -> EpubMetadata:
        return self.package.metadata

    @property
    def spine(self) -> list[str]:
        return self.package.spine


def _check_source(source: Path | bytes) -> None:
    if isinstance(source, Path) and not source.exists():
        raise InvalidArchive(f"File not found: {source}")


def ingest_epub(
    source: Path | bytes, cover_dir: Path, *, parser: XmlParser | None = None
) -> IngestResult:
    """Extract metadata and a cover image from an EPUB.

    The container is resolved before anything else, so an unusable archive
    fails before a cover file is written. Degraded metadata and a missing
    cover are normal results.

    Args:
        source: Path to the EPUB, or its raw bytes.
        cover_dir: Directory for the cover image; created if needed.
        parser: XML parser override.

    Returns:
        IngestResult with metadata and an optional cover.

    Raises:
        InvalidArchive: If the file is missing or is not a usable EPUB.
    """
    _check_source(source)
    with open_archive(source) as reader:
        package_path = resolve_package_path(reader, parser)
        metadata = extract_metadata(reader, package_path, parser)
        cover = locate_cover(reader, cover_dir, package_path=package_path)
    return IngestResult(metadata=metadata, cover=cover)


async def aingest_epub(
    source: Path | bytes, cover_dir: Path, *, parser: XmlParser | None = None
) -> IngestResult:
    """ingest_epub with the blocking archive work moved off the event loop."""
    return await asyncio.to_thread(ingest_epub, source, cover_dir, parser=parser)


def read_book(reader: ArchiveReader, parser: XmlParser | None = None) -> Book:
    """Parse the package document and TOC from an already-open archive."""
    package = parse_package(reader, resolve_package_path(reader, parser), parser)
    toc_path = find_toc_path(reader, package)
    toc = extract_toc(reader, toc_path, parser) if toc_path else []
    return Book(package=package, toc=toc)


def open_book(source: Path | bytes, *, parser: XmlParser | None = None) -> Book:
    """Open an EPUB for reading and return its structure.

    Raises:
        InvalidArchive: If the file is missing or is not a usable EPUB.
    """
    _check_source(source)
    with open_archive(source) as reader:
        return read_book(reader, parser)


async def render_chapter(
    source: Path | bytes,
    chapter_id: str,
    *,
    cancel: CancelSignal | None = None,
    parser: XmlParser | None = None,
) -> str:
    """Render one chapter to self-contained markup.

    Images are inlined as data URLs, links are made safe, stylesheet links
    and viewport overrides are dropped, and the result is passed through the
    chunked processor so long chapters yield to the event loop.

    Raises:
        InvalidArchive: If the file is not a usable EPUB.
        ChapterNotFound: If chapter_id names no loadable document.
        Aborted: If cancel is set while the chapter is being processed.
    """
    _check_source(source)
    with open_archive(source) as reader:
        package = parse_package(reader, resolve_package_path(reader, parser), parser)
        chapter = load_chapter(reader, package, chapter_id)
        if chapter is None:
            raise ChapterNotFound(f"Chapter not found: {chapter_id}")
        resources = build_resource_table(reader, package)

    body = strip_layout_overrides(extract_body_content(chapter.raw_content))
    processed = process_chapter_content(
        Chapter(id=chapter.id, href=chapter.href, raw_content=body),
        resources,
        package.base_path,
    )
    return await process_content_in_chunks(processed, cancel)


def wrap_document(title: str, body: str, toc: list[TocEntry] | None = None) -> str:
    """Wrap rendered chapter markup in a standalone HTML document.

    The TOC, when given, is embedded as JSON in a ``toc-data`` meta tag for
    the reading UI to pick up.
    """
    toc_meta = ""
    if toc:
        toc_json = json.dumps([asdict(entry) for entry in toc], ensure_ascii=False)
        toc_meta = f'\n<meta name="toc-data" content="{html.escape(toc_json, quote=True)}">'
    return (
        "<!DOCTYPE html>\n"
        '<html lang="en">\n<head>\n<meta charset="UTF-8">\n'
        '<meta name="viewport" content="width=device-width, initial-scale=1.0">'
        f"{toc_meta}\n<title>{html.escape(title)}</title>\n</head>\n"
        f"<body>\n{body}\n</body>\n</html>\n"
    )
