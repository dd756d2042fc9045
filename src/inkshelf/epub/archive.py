# ABOUTME: Archive reader adapter: list, read, and decode entries of an EPUB zip.
# ABOUTME: A protocol plus zip-backed and in-memory implementations.

import io
import logging
import zipfile
import zlib
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol, runtime_checkable

from inkshelf.epub.errors import InvalidArchive
from inkshelf.epub.paths import normalize_entry_path

logger = logging.getLogger(__name__)


def decode_text(data: bytes) -> str:
    """Decode entry bytes as UTF-8, dropping a BOM and replacing bad sequences."""
    return data.decode("utf-8-sig", errors="replace")


@dataclass(frozen=True)
class ArchiveEntry:
    """An immutable view of one archive member, bound to its reader."""

    path: str
    is_directory: bool
    reader: "ArchiveReader" = field(repr=False, compare=False)

    def read_bytes(self) -> bytes:
        return self.reader.read_bytes(self.path)

    def read_text(self) -> str:
        return self.reader.read_text(self.path)


@runtime_checkable
class ArchiveReader(Protocol):
    """Protocol for the archive access the EPUB pipeline needs."""

    def entries(self) -> list[ArchiveEntry]: ...

    def get(self, path: str) -> ArchiveEntry | None: ...

    def read_bytes(self, path: str) -> bytes: ...

    def read_text(self, path: str) -> str: ...

    def close(self) -> None: ...


class _BaseArchiveReader:
    """Shared lookup, decoding, and context-manager behavior."""

    def entries(self) -> list[ArchiveEntry]:
        raise NotImplementedError

    def read_bytes(self, path: str) -> bytes:
        raise NotImplementedError

    def close(self) -> None:
        """Release the underlying handle. Safe to call more than once."""

    def get(self, path: str) -> ArchiveEntry | None:
        """Look up an entry by archive path, or None if absent."""
        wanted = normalize_entry_path(path)
        for entry in self.entries():
            if entry.path == wanted:
                return entry
        return None

    def read_text(self, path: str) -> str:
        return decode_text(self.read_bytes(path))

    def __enter__(self) -> "_BaseArchiveReader":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


# Raised by zipfile when a member exists but cannot be decompressed
_ENTRY_READ_ERRORS = (zipfile.BadZipFile, zlib.error, NotImplementedError, RuntimeError, EOFError)


class ZipArchiveReader(_BaseArchiveReader):
    """Reads entries from a zip archive on disk or in memory.

    Only the entries that are actually requested get decompressed.

    Raises:
        InvalidArchive: If the source is missing or is not a zip archive.
    """

    def __init__(self, source: Path | str | bytes) -> None:
        try:
            if isinstance(source, bytes):
                self._zip = zipfile.ZipFile(io.BytesIO(source))
            else:
                self._zip = zipfile.ZipFile(source)
        except (zipfile.BadZipFile, OSError) as exc:
            raise InvalidArchive(f"Not a readable zip archive: {exc}") from exc

        # Canonical entry path -> member name as stored in the zip
        self._members: dict[str, str] = {}
        self._entries: list[ArchiveEntry] = []
        for info in self._zip.infolist():
            canonical = normalize_entry_path(info.filename)
            if not canonical or canonical in self._members:
                continue
            self._members[canonical] = info.filename
            self._entries.append(
                ArchiveEntry(path=canonical.rstrip("/"), is_directory=info.is_dir(), reader=self)
            )
        self._closed = False

    def entries(self) -> list[ArchiveEntry]:
        return list(self._entries)

    def get(self, path: str) -> ArchiveEntry | None:
        wanted = normalize_entry_path(path)
        member = self._members.get(wanted)
        if member is None:
            return None
        return ArchiveEntry(path=wanted, is_directory=member.endswith("/"), reader=self)

    def read_bytes(self, path: str) -> bytes:
        """Decompress one entry.

        Raises:
            KeyError: If the archive has no such entry.
            InvalidArchive: If the entry exists but is corrupt, encrypted, or
                uses an unsupported compression method.
        """
        member = self._members.get(normalize_entry_path(path))
        if member is None:
            raise KeyError(path)
        try:
            return self._zip.read(member)
        except _ENTRY_READ_ERRORS as exc:
            raise InvalidArchive(f"Unreadable archive entry {member}: {exc}") from exc

    def close(self) -> None:
        if not self._closed:
            self._zip.close()
            self._closed = True


class MemoryArchiveReader(_BaseArchiveReader):
    """An archive held as a mapping of path to content.

    Names ending in "/" are directory entries. Text values are stored as
    UTF-8.
    """

    def __init__(self, files: Mapping[str, bytes | str]) -> None:
        self._data: dict[str, bytes] = {}
        self._entries: list[ArchiveEntry] = []
        for name, content in files.items():
            canonical = normalize_entry_path(name)
            is_directory = canonical.endswith("/")
            path = canonical.rstrip("/")
            if not is_directory:
                self._data[path] = content.encode("utf-8") if isinstance(content, str) else content
            self._entries.append(ArchiveEntry(path=path, is_directory=is_directory, reader=self))

    def entries(self) -> list[ArchiveEntry]:
        return list(self._entries)

    def read_bytes(self, path: str) -> bytes:
        try:
            return self._data[normalize_entry_path(path)]
        except KeyError:
            raise KeyError(path) from None


@contextmanager
def open_archive(source: Path | str | bytes) -> Iterator[ZipArchiveReader]:
    """Open an EPUB for one extraction or render call.

    The handle is closed on every exit path, including errors raised by the
    caller's block.

    Raises:
        InvalidArchive: If the source cannot be opened as a zip archive.
    """
    reader = ZipArchiveReader(source)
    try:
        yield reader
    finally:
        reader.close()
        logger.debug("Closed archive %s", source if not isinstance(source, bytes) else "<bytes>")
