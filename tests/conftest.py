# ABOUTME: Shared pytest fixtures for inkshelf tests.
# ABOUTME: Provides sample EPUB files (valid, illustrated, and corrupt) for testing.

from pathlib import Path

import pytest
from ebooklib import epub

from tests.fixtures.archives import JPEG_BYTES, PNG_BYTES


def _build_book(title: str, author: str | None = None) -> epub.EpubBook:
    book = epub.EpubBook()
    book.set_identifier(f"urn:uuid:test-{title.lower().replace(' ', '-')}")
    book.set_title(title)
    book.set_language("en")
    if author:
        book.add_author(author)
    return book


def _finish(book: epub.EpubBook, chapters: list[epub.EpubHtml], path: Path) -> Path:
    book.toc = [
        epub.Link(chapter.file_name, chapter.title, chapter.id) for chapter in chapters
    ]
    book.add_item(epub.EpubNcx())
    book.add_item(epub.EpubNav())
    book.spine = [*chapters]
    epub.write_epub(str(path), book)
    return path


@pytest.fixture
def fixtures_dir() -> Path:
    """Path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def sample_epub(tmp_path: Path) -> Path:
    """A complete EPUB with metadata, a declared cover, and an illustrated chapter."""
    book = _build_book("Spice and Wolf", "Isuna Hasekura")
    book.add_metadata("DC", "publisher", "Yen Press")
    book.add_metadata("DC", "description", "A merchant meets a wolf deity.")
    book.set_cover("cover.jpg", JPEG_BYTES)

    plate = epub.EpubImage(
        uid="plate1",
        file_name="images/plate1.png",
        media_type="image/png",
        content=PNG_BYTES,
    )
    book.add_item(plate)

    chapter1 = epub.EpubHtml(uid="chap01", title="Chapter 1", file_name="chap01.xhtml", lang="en")
    chapter1.content = (
        b'<html><body><h1>Chapter 1</h1>'
        b'<p><img src="images/plate1.png" alt="plate"/></p>'
        b'<p><img src="images/lost.png" alt="lost"/></p>'
        b'<p><a href="chap02.xhtml#start">Next</a> '
        b'<a href="https://example.com/wolf">Site</a></p>'
        b"</body></html>"
    )
    chapter2 = epub.EpubHtml(uid="chap02", title="Chapter 2", file_name="chap02.xhtml", lang="en")
    chapter2.content = b'<html><body><h1 id="start">Chapter 2</h1><p>Pasloe.</p></body></html>'
    book.add_item(chapter1)
    book.add_item(chapter2)

    return _finish(book, [chapter1, chapter2], tmp_path / "Spice and Wolf vol 1.epub")


@pytest.fixture
def minimal_epub(tmp_path: Path) -> Path:
    """An EPUB with only a title and no images at all."""
    book = _build_book("Untitled Volume")
    chapter = epub.EpubHtml(uid="content", title="Content", file_name="content.xhtml", lang="en")
    chapter.content = b"<html><body><p>Minimal content.</p></body></html>"
    book.add_item(chapter)
    return _finish(book, [chapter], tmp_path / "minimal.epub")


@pytest.fixture
def corrupt_epub(tmp_path: Path) -> Path:
    """A file with an .epub name that is not a zip archive."""
    filepath = tmp_path / "corrupt.epub"
    filepath.write_text("this is not a valid epub file")
    return filepath
