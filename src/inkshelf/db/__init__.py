# ABOUTME: Public API for the inkshelf library database layer.
# ABOUTME: Exports connection management, catalog operations, and data types.

from inkshelf.db.catalog import DuplicateVolumeError, LibraryCatalog
from inkshelf.db.connection import DEFAULT_DB_PATH, open_library
from inkshelf.db.hashing import compute_file_hash
from inkshelf.db.mapping import VolumeRecord

__all__ = [
    "DEFAULT_DB_PATH",
    "DuplicateVolumeError",
    "LibraryCatalog",
    "VolumeRecord",
    "compute_file_hash",
    "open_library",
]
