# ABOUTME: Converts between EpubMetadata plus catalog fields and SQLite rows.
# ABOUTME: VolumeRecord is what catalog queries hand back to callers.

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from inkshelf.epub.types import EpubMetadata


@dataclass
class VolumeRecord:
    """A cataloged volume: extracted metadata plus library bookkeeping."""

    item_id: str
    series: str
    volume_number: int
    metadata: EpubMetadata
    cover_path: Path | None
    source_path: Path
    file_hash: str
    date_added: str
    date_modified: str


def volume_to_row(
    item_id: str,
    metadata: EpubMetadata,
    *,
    series: str,
    volume_number: int,
    source_path: Path,
    file_hash: str,
    cover_path: Path | None = None,
) -> dict[str, Any]:
    """Build the column dict for inserting one volume."""
    return {
        "item_id": item_id,
        "series": series,
        "volume_number": volume_number,
        "title": metadata.title,
        "creator": metadata.creator,
        "publisher": metadata.publisher,
        "language": metadata.language,
        "identifier": metadata.identifier,
        "description": metadata.description,
        "cover_path": str(cover_path) if cover_path else None,
        "source_path": str(source_path),
        "file_hash": file_hash,
    }


def row_to_metadata(row: Any) -> EpubMetadata:
    return EpubMetadata(
        title=row["title"],
        creator=row["creator"],
        publisher=row["publisher"],
        language=row["language"],
        identifier=row["identifier"],
        description=row["description"],
    )


def row_to_record(row: Any) -> VolumeRecord:
    """Convert a full database row to a VolumeRecord."""
    cover = row["cover_path"]
    return VolumeRecord(
        item_id=row["item_id"],
        series=row["series"],
        volume_number=row["volume_number"],
        metadata=row_to_metadata(row),
        cover_path=Path(cover) if cover else None,
        source_path=Path(row["source_path"]),
        file_hash=row["file_hash"],
        date_added=row["date_added"],
        date_modified=row["date_modified"],
    )
