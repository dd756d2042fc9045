# ABOUTME: Data structures shared by the EPUB pipeline: metadata, covers, chapters.
# ABOUTME: EpubMetadata is what ingestion hands to the library catalog.

from dataclasses import dataclass, field
from pathlib import Path

UNKNOWN_TITLE = "Unknown Title"


@dataclass
class EpubMetadata:
    """Bibliographic metadata read from an EPUB package document.

    Only the title is required, and it is never empty: a missing or blank
    title is replaced with UNKNOWN_TITLE so the catalog always has something
    to display.
    """

    title: str = UNKNOWN_TITLE
    creator: str | None = None
    publisher: str | None = None
    language: str | None = None
    identifier: str | None = None
    description: str | None = None

    def __post_init__(self) -> None:
        if not self.title or not self.title.strip():
            self.title = UNKNOWN_TITLE

    @property
    def is_degraded(self) -> bool:
        """Whether this record carries nothing beyond the default title."""
        return self.title == UNKNOWN_TITLE and not any(
            (self.creator, self.publisher, self.language, self.identifier, self.description)
        )


@dataclass(frozen=True)
class CoverResult:
    """A cover image copied out of an archive onto disk."""

    source_entry_path: str
    saved_file_path: Path


@dataclass
class Chapter:
    """One spine document, already decoded, ready for rewriting.

    href is relative to the package document's directory, as written in the
    manifest.
    """

    id: str
    href: str
    raw_content: str


@dataclass(frozen=True)
class ManifestItem:
    """A single <item> from the package manifest."""

    id: str
    href: str
    media_type: str
    properties: str = ""

    @property
    def is_image(self) -> bool:
        return self.media_type.lower().startswith("image/")


@dataclass
class PackageDocument:
    """The parsed package document: where it lives and what it lists."""

    path: str
    base_path: str
    metadata: EpubMetadata
    manifest: dict[str, ManifestItem] = field(default_factory=dict)
    spine: list[str] = field(default_factory=list)
    spine_toc_id: str | None = None


@dataclass
class TocEntry:
    """A table of contents entry, possibly with nested entries."""

    title: str
    href: str
    level: int = 0
    play_order: int = 0
    children: list["TocEntry"] = field(default_factory=list)
