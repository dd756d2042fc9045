# ABOUTME: Unit tests for locating the package document through META-INF/container.xml.
# ABOUTME: Valid, alternate, and broken container layouts.

from pathlib import Path

import pytest

from inkshelf.epub.archive import MemoryArchiveReader, ZipArchiveReader
from inkshelf.epub.container import CONTAINER_PATH, resolve_package_path
from inkshelf.epub.errors import InvalidArchive
from tests.fixtures.archives import corrupt_entry, epub_files, write_zip


class TestResolvePackagePath:
    """Tests for resolve_package_path."""

    def test_standard_container(self) -> None:
        reader = MemoryArchiveReader(epub_files())
        assert resolve_package_path(reader) == "OEBPS/content.opf"

    def test_package_at_root(self) -> None:
        reader = MemoryArchiveReader(epub_files(package_path="content.opf"))
        assert resolve_package_path(reader) == "content.opf"

    def test_prefers_package_media_type(self) -> None:
        """A rootfile declaring the OEBPS media type wins over earlier ones."""
        container = """<container xmlns="urn:oasis:names:tc:opendocument:xmlns:container">
          <rootfiles>
            <rootfile full-path="preview.pdf" media-type="application/pdf"/>
            <rootfile full-path="book/package.opf" media-type="application/oebps-package+xml"/>
          </rootfiles>
        </container>"""
        reader = MemoryArchiveReader({CONTAINER_PATH: container})
        assert resolve_package_path(reader) == "book/package.opf"

    def test_rootfile_without_wrapper(self) -> None:
        """Containers that skip <rootfiles> and the namespace still resolve."""
        reader = MemoryArchiveReader(
            {CONTAINER_PATH: '<container><rootfile full-path="/content.opf"/></container>'}
        )
        assert resolve_package_path(reader) == "content.opf"

    def test_missing_container(self) -> None:
        reader = MemoryArchiveReader({"mimetype": "application/epub+zip"})
        with pytest.raises(InvalidArchive, match="container.xml not found"):
            resolve_package_path(reader)

    def test_container_without_rootfile(self) -> None:
        reader = MemoryArchiveReader({CONTAINER_PATH: "<container><rootfiles/></container>"})
        with pytest.raises(InvalidArchive, match="no package path"):
            resolve_package_path(reader)

    def test_rootfile_without_full_path(self) -> None:
        reader = MemoryArchiveReader(
            {CONTAINER_PATH: '<container><rootfile media-type="application/oebps-package+xml"/></container>'}
        )
        with pytest.raises(InvalidArchive):
            resolve_package_path(reader)

    def test_unparsable_container(self) -> None:
        reader = MemoryArchiveReader({CONTAINER_PATH: b""})
        with pytest.raises(InvalidArchive):
            resolve_package_path(reader)

    def test_corrupt_container_entry(self, tmp_path: Path) -> None:
        """A container.xml that fails to decompress makes the archive invalid."""
        path = write_zip(tmp_path / "book.epub", epub_files())
        corrupt_entry(path, CONTAINER_PATH)
        with ZipArchiveReader(path) as reader, pytest.raises(InvalidArchive):
            resolve_package_path(reader)
