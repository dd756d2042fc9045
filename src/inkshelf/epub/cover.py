# ABOUTME: Finds a representative cover image inside an EPUB and saves it to disk.
# ABOUTME: Four ordered strategies, a pure scoring function, and magic-byte validation.

import logging
import posixpath
import re
from collections.abc import Callable, Iterable
from pathlib import Path
from urllib.parse import unquote

from inkshelf.epub.archive import ArchiveReader
from inkshelf.epub.container import resolve_package_path
from inkshelf.epub.errors import InvalidArchive
from inkshelf.epub.paths import basename, dirname, is_image_path, join_archive_path
from inkshelf.epub.signature import is_valid_image
from inkshelf.epub.types import CoverResult
from inkshelf.epub.xmlparse import XmlParser

logger = logging.getLogger(__name__)

# Common image directories, searched in this order by the directory strategy.
IMAGE_DIRECTORIES: tuple[str, ...] = (
    "images",
    "img",
    "pics",
    "pictures",
    "assets",
    "OEBPS/images",
    "OEBPS/img",
)

# Name fragments that mark decorative images rather than covers.
_NON_COVER_HINTS: tuple[str, ...] = ("icon", "bullet", "ornament")
_SCORE_PENALTY_HINTS: tuple[str, ...] = ("icon", "bullet", "ornament", "decoration")

# Explicit cover references in the raw package document, most specific first.
_ID_COVER_HREF_RE = re.compile(r"""id=["']cover["'][^>]*href=["']([^"']+)["']""", re.IGNORECASE)
_HREF_COVER_RE = re.compile(r"""href=["']([^"']*cover[^"']*)["']""", re.IGNORECASE)
_META_COVER_RES = (
    re.compile(r"""<meta\s+name=["']cover["']\s+content=["']([^"']+)["']""", re.IGNORECASE),
    re.compile(r"""<meta\s+content=["']([^"']+)["']\s+name=["']cover["']""", re.IGNORECASE),
)
_ITEM_TAG_RE = re.compile(r"<item\b[^>]*>", re.IGNORECASE)
_ID_ATTR_RE = re.compile(r"""\bid=["']([^"']+)["']""", re.IGNORECASE)
_HREF_ATTR_RE = re.compile(r"""\bhref=["']([^"']+)["']""", re.IGNORECASE)


def cover_score(path: str) -> int:
    """Score how likely an archive path is to be the book's cover.

    Higher is better. Rewards "cover", "title", and "front" in the file name,
    a location at the archive root or under images/, and common photo
    formats; penalizes names that suggest decorative assets.
    """
    lower_path = path.lower()
    file_name = basename(lower_path)
    score = 0

    if "cover" in file_name:
        score += 10
    if file_name in ("cover.jpg", "cover.png"):
        score += 15

    if "title" in file_name:
        score += 8
    if "front" in file_name:
        score += 8

    if "/" not in lower_path or lower_path.startswith("images/"):
        score += 5

    for hint in _SCORE_PENALTY_HINTS:
        if hint in file_name:
            score -= 5

    if file_name.endswith((".jpg", ".jpeg")):
        score += 2
    if file_name.endswith(".png"):
        score += 2

    return score


def _looks_like_cover_name(path: str) -> bool:
    """Whether a path or file name suggests a cover (naming-convention strategy)."""
    lower_path = path.lower()
    file_name = basename(lower_path)
    return (
        "cover" in lower_path
        or file_name.startswith("cover.")
        or "title" in lower_path
        or "front" in lower_path
        or "vol" in file_name
        or "volume" in file_name
    )


def _image_paths(reader: ArchiveReader) -> list[str]:
    """Paths of image-type file entries, in archive enumeration order."""
    return [
        entry.path
        for entry in reader.entries()
        if not entry.is_directory and is_image_path(entry.path)
    ]


def _manifest_hrefs_by_id(package_text: str) -> dict[str, str]:
    """Map manifest item ids to hrefs using the raw package text."""
    hrefs: dict[str, str] = {}
    for tag in _ITEM_TAG_RE.findall(package_text):
        id_match = _ID_ATTR_RE.search(tag)
        href_match = _HREF_ATTR_RE.search(tag)
        if id_match and href_match:
            hrefs.setdefault(id_match.group(1), href_match.group(1))
    return hrefs


def explicit_cover_references(package_text: str, package_path: str) -> list[str]:
    """Archive paths the package document explicitly names as its cover.

    Matches, in priority order: a manifest item with id "cover", any href
    containing "cover", and a <meta name="cover"> element. The meta element's
    content is usually a manifest id, so it is looked up in the manifest
    before being treated as a path. Every reference is resolved relative to
    the package document's directory.
    """
    references: list[str] = []
    references.extend(_ID_COVER_HREF_RE.findall(package_text))
    references.extend(_HREF_COVER_RE.findall(package_text))

    hrefs_by_id = _manifest_hrefs_by_id(package_text)
    for pattern in _META_COVER_RES:
        for content in pattern.findall(package_text):
            references.append(hrefs_by_id.get(content, content))

    package_dir = dirname(package_path)
    resolved: list[str] = []
    for reference in references:
        path = join_archive_path(package_dir, unquote(reference))
        if path not in resolved:
            resolved.append(path)
    return resolved


def _save_cover(data: bytes, source_path: str, output_dir: Path) -> Path:
    output_dir.mkdir(parents=True, exist_ok=True)
    suffix = posixpath.splitext(basename(source_path))[1]
    destination = output_dir / f"cover{suffix}"
    destination.write_bytes(data)
    return destination


def _try_candidate(reader: ArchiveReader, path: str, output_dir: Path) -> CoverResult | None:
    """Read, validate, and save one candidate. Any failure just means "not this one"."""
    if reader.get(path) is None:
        return None
    try:
        data = reader.read_bytes(path)
    except Exception as exc:
        logger.debug("Could not read cover candidate %s: %s", path, exc)
        return None

    if not is_valid_image(data):
        logger.debug("Rejected cover candidate %s: not a recognized image", path)
        return None

    try:
        saved = _save_cover(data, path, output_dir)
    except OSError as exc:
        logger.warning("Failed to save cover candidate %s: %s", path, exc)
        return None
    return CoverResult(source_entry_path=path, saved_file_path=saved)


def _first_valid(
    reader: ArchiveReader, candidates: Iterable[str], output_dir: Path
) -> CoverResult | None:
    for path in candidates:
        result = _try_candidate(reader, path, output_dir)
        if result is not None:
            return result
    return None


def _explicit_strategy(
    reader: ArchiveReader, output_dir: Path, package_path: str | None
) -> CoverResult | None:
    if package_path is None or reader.get(package_path) is None:
        return None
    try:
        package_text = reader.read_text(package_path)
    except Exception as exc:
        logger.debug("Could not read package document %s: %s", package_path, exc)
        return None
    return _first_valid(reader, explicit_cover_references(package_text, package_path), output_dir)


def _naming_strategy(reader: ArchiveReader, output_dir: Path) -> CoverResult | None:
    candidates = [path for path in _image_paths(reader) if _looks_like_cover_name(path)]
    # sorted() is stable, so equal scores keep archive order
    ranked = sorted(candidates, key=cover_score, reverse=True)
    return _first_valid(reader, ranked, output_dir)


def _directory_strategy(reader: ArchiveReader, output_dir: Path) -> CoverResult | None:
    images = _image_paths(reader)
    for directory in IMAGE_DIRECTORIES:
        prefix = f"{directory.lower()}/"
        in_directory = sorted(path for path in images if path.lower().startswith(prefix))
        result = _first_valid(reader, in_directory, output_dir)
        if result is not None:
            return result
    return None


def _fallback_strategy(reader: ArchiveReader, output_dir: Path) -> CoverResult | None:
    images = sorted(_image_paths(reader))

    def likely_cover(path: str) -> bool:
        name = basename(path).lower()
        if "cover" in name or "title" in name or "front" in name:
            return True
        return not any(hint in name for hint in _NON_COVER_HINTS)

    likely = [path for path in images if likely_cover(path)]
    return _first_valid(reader, likely or images, output_dir)


def locate_cover(
    reader: ArchiveReader,
    output_dir: Path,
    *,
    package_path: str | None = None,
    parser: XmlParser | None = None,
) -> CoverResult | None:
    """Find the best cover image in an archive and save it as ``cover<ext>``.

    Strategies run in order and the first validated candidate wins:

    1. References in the package document (manifest id, href, cover meta).
    2. Image names suggesting a cover, ranked by cover_score.
    3. The first valid image in a common image directory.
    4. Any image, skipping names that look decorative when possible.

    Args:
        reader: The open archive.
        output_dir: Where to write the cover; created if missing.
        package_path: Archive path of the OPF file. Resolved from the
            container when omitted; if that fails the explicit strategy is
            skipped.
        parser: XML parser used only when package_path must be resolved.

    Returns:
        The saved CoverResult, or None when no candidate validates.
    """
    if package_path is None:
        try:
            package_path = resolve_package_path(reader, parser)
        except InvalidArchive as exc:
            logger.debug("Skipping explicit cover lookup: %s", exc)

    strategies: list[tuple[str, Callable[[], CoverResult | None]]] = [
        ("explicit reference", lambda: _explicit_strategy(reader, output_dir, package_path)),
        ("naming convention", lambda: _naming_strategy(reader, output_dir)),
        ("image directory", lambda: _directory_strategy(reader, output_dir)),
        ("fallback", lambda: _fallback_strategy(reader, output_dir)),
    ]
    for name, strategy in strategies:
        result = strategy()
        if result is not None:
            logger.info("Found cover %s via %s", result.source_entry_path, name)
            return result

    logger.info("No cover image found")
    return None
