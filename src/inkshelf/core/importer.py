# ABOUTME: Import pipeline for cataloging EPUB volumes into the inkshelf library.
# ABOUTME: Hashes each file, ingests metadata and cover, and stores a catalog record.

import logging
import re
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from inkshelf.db.catalog import DuplicateVolumeError, LibraryCatalog
from inkshelf.db.hashing import compute_file_hash
from inkshelf.epub.errors import InvalidArchive
from inkshelf.formats.epub import ingest_epub

logger = logging.getLogger(__name__)

METADATA_DIR_NAME = ".metadata"

_VOLUME_NUMBER_RE = re.compile(r"vol(?:ume)?[-_\s]?(\d+)|v(\d+)|(\d+)", re.IGNORECASE)


@dataclass
class ImportResult:
    """Summary of an import operation."""

    added: int = 0
    skipped: int = 0
    errors: int = 0
    added_ids: list[str] = field(default_factory=list)
    error_details: list[tuple[Path, str]] = field(default_factory=list)


def extract_volume_number(path: Path) -> int | None:
    """Guess a volume number from a file name.

    Recognizes "vol 3", "volume_3", "v3", and falls back to the first bare
    number in the name. Returns None when the name has no digits.
    """
    match = _VOLUME_NUMBER_RE.search(path.stem)
    if match is None:
        return None
    number = next(group for group in match.groups() if group is not None)
    return int(number)


def cover_dir_for(epub_path: Path) -> Path:
    """Where a volume's cover is written: <series dir>/.metadata/<file stem>/."""
    return epub_path.parent / METADATA_DIR_NAME / epub_path.stem


def _new_item_id() -> str:
    return uuid.uuid4().hex


def import_volumes(
    paths: list[Path],
    catalog: LibraryCatalog,
    *,
    id_factory: Callable[[], str] = _new_item_id,
) -> ImportResult:
    """Import EPUB volumes into the library catalog.

    For each file: computes its SHA-256 hash, skips it if already cataloged,
    extracts metadata and a cover, and adds a record. The series is the
    name of the file's directory. Files that are not usable EPUBs are
    recorded as errors and do not stop the batch.

    Args:
        paths: EPUB files to import.
        catalog: The library catalog to add volumes to.
        id_factory: Produces the item id for each new volume.

    Returns:
        ImportResult with counts of added, skipped, and errored files.
    """
    result = ImportResult()

    for epub_path in paths:
        try:
            file_hash = compute_file_hash(epub_path)
        except OSError as exc:
            result.errors += 1
            result.error_details.append((epub_path, str(exc)))
            continue

        # Check for duplicate before opening the archive (cheaper)
        if catalog.get_by_hash(file_hash) is not None:
            result.skipped += 1
            continue

        try:
            ingested = ingest_epub(epub_path, cover_dir_for(epub_path))
        except InvalidArchive as exc:
            logger.warning("Could not import %s: %s", epub_path, exc)
            result.errors += 1
            result.error_details.append((epub_path, str(exc)))
            continue

        try:
            item_id = catalog.add_volume(
                id_factory(),
                ingested.metadata,
                series=epub_path.parent.name,
                volume_number=extract_volume_number(epub_path) or 1,
                source_path=epub_path,
                file_hash=file_hash,
                cover_path=ingested.cover_path,
            )
        except DuplicateVolumeError:
            # Another process cataloged the same file since the hash check
            result.skipped += 1
            continue

        result.added += 1
        result.added_ids.append(item_id)

    return result
