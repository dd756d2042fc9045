# ABOUTME: CRUD operations for the inkshelf library catalog.
# ABOUTME: Add, query, update, and delete imported volumes in the SQLite database.

import sqlite3
from pathlib import Path

from inkshelf.db.mapping import VolumeRecord, row_to_record, volume_to_row
from inkshelf.epub.types import EpubMetadata


class DuplicateVolumeError(Exception):
    """Raised when adding a volume whose file_hash is already cataloged."""


class LibraryCatalog:
    """Wraps a sqlite3 connection and provides typed CRUD for the volumes table."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def add_volume(
        self,
        item_id: str,
        metadata: EpubMetadata,
        *,
        series: str,
        source_path: Path,
        file_hash: str,
        volume_number: int = 1,
        cover_path: Path | None = None,
    ) -> str:
        """Add a volume to the catalog under a caller-assigned item id.

        Returns:
            The item id.

        Raises:
            DuplicateVolumeError: If a volume with this file_hash already exists.
        """
        row = volume_to_row(
            item_id,
            metadata,
            series=series,
            volume_number=volume_number,
            source_path=source_path,
            file_hash=file_hash,
            cover_path=cover_path,
        )
        columns = ", ".join(row.keys())
        placeholders = ", ".join("?" for _ in row)

        try:
            self._conn.execute(
                f"INSERT INTO volumes ({columns}) VALUES ({placeholders})",
                list(row.values()),
            )
            self._conn.commit()
        except sqlite3.IntegrityError as exc:
            if "volumes.file_hash" in str(exc):
                raise DuplicateVolumeError(
                    f"Volume with hash {file_hash} already exists"
                ) from exc
            raise

        return item_id

    def get_by_id(self, item_id: str) -> VolumeRecord | None:
        """Retrieve a volume by its item id."""
        cursor = self._conn.execute("SELECT * FROM volumes WHERE item_id = ?", (item_id,))
        row = cursor.fetchone()
        return row_to_record(row) if row else None

    def get_by_hash(self, file_hash: str) -> VolumeRecord | None:
        """Retrieve a volume by its file hash."""
        cursor = self._conn.execute("SELECT * FROM volumes WHERE file_hash = ?", (file_hash,))
        row = cursor.fetchone()
        return row_to_record(row) if row else None

    def list_all(self) -> list[VolumeRecord]:
        """Return all volumes, grouped by series and ordered by volume number."""
        cursor = self._conn.execute(
            "SELECT * FROM volumes ORDER BY series, volume_number, title"
        )
        return [row_to_record(row) for row in cursor.fetchall()]

    def list_by_series(self, series: str) -> list[VolumeRecord]:
        """Return the volumes of one series, ordered by volume number."""
        cursor = self._conn.execute(
            "SELECT * FROM volumes WHERE series = ? ORDER BY volume_number",
            (series,),
        )
        return [row_to_record(row) for row in cursor.fetchall()]

    def set_cover_path(self, item_id: str, cover_path: Path | None) -> None:
        """Replace (or clear) the stored cover path for a volume.

        Raises:
            ValueError: If the item_id does not exist.
        """
        cursor = self._conn.execute(
            "UPDATE volumes SET cover_path = ?, "
            "date_modified = strftime('%Y-%m-%dT%H:%M:%S', 'now') "
            "WHERE item_id = ?",
            (str(cover_path) if cover_path else None, item_id),
        )
        self._conn.commit()

        if cursor.rowcount == 0:
            raise ValueError(f"Volume with id {item_id} not found")

    def delete_volume(self, item_id: str) -> None:
        """Delete a volume from the catalog.

        Raises:
            ValueError: If the item_id does not exist.
        """
        cursor = self._conn.execute("DELETE FROM volumes WHERE item_id = ?", (item_id,))
        self._conn.commit()

        if cursor.rowcount == 0:
            raise ValueError(f"Volume with id {item_id} not found")
