# ABOUTME: EPUB ingestion and resource-resolution pipeline.
# ABOUTME: Exports the archive adapter, extractors, cover locator, and chapter rewriter.

from inkshelf.epub.archive import (
    ArchiveEntry,
    ArchiveReader,
    MemoryArchiveReader,
    ZipArchiveReader,
    open_archive,
)
from inkshelf.epub.chunked import CHUNK_SIZE, process_content_in_chunks
from inkshelf.epub.container import resolve_package_path
from inkshelf.epub.cover import cover_score, locate_cover
from inkshelf.epub.errors import Aborted, InvalidArchive
from inkshelf.epub.package import extract_metadata, parse_package
from inkshelf.epub.paths import resolve_relative_path
from inkshelf.epub.rewriter import find_resource, process_chapter_content
from inkshelf.epub.signature import is_valid_image
from inkshelf.epub.types import (
    UNKNOWN_TITLE,
    Chapter,
    CoverResult,
    EpubMetadata,
    ManifestItem,
    PackageDocument,
    TocEntry,
)

__all__ = [
    "CHUNK_SIZE",
    "UNKNOWN_TITLE",
    "Aborted",
    "ArchiveEntry",
    "ArchiveReader",
    "Chapter",
    "CoverResult",
    "EpubMetadata",
    "InvalidArchive",
    "ManifestItem",
    "MemoryArchiveReader",
    "PackageDocument",
    "TocEntry",
    "ZipArchiveReader",
    "cover_score",
    "extract_metadata",
    "find_resource",
    "is_valid_image",
    "locate_cover",
    "open_archive",
    "parse_package",
    "process_chapter_content",
    "process_content_in_chunks",
    "resolve_package_path",
    "resolve_relative_path",
]
