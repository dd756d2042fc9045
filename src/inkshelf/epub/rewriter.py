# ABOUTME: Rewrites chapter markup so images, SVG images, and links resolve offline.
# ABOUTME: Pure functions over strings; the caller supplies the resource lookup table.

import html
import re
from collections.abc import Mapping

from inkshelf.epub.paths import basename, resolve_relative_path
from inkshelf.epub.types import Chapter

# Directories tried, in order, when neither the resolved path nor the bare
# filename is in the lookup table.
RESOURCE_DIRECTORIES: tuple[str, ...] = (
    "images",
    "Images",
    "OEBPS/images",
    "OEBPS/Images",
    "OEBPS",
)

NO_OP_HREF = "javascript:void(0)"

_IMG_RE = re.compile(r"""<img\b[^>]*?\ssrc=["']([^"']*)["'][^>]*>""", re.IGNORECASE)
_SVG_IMAGE_RE = re.compile(r"""<image\b[^>]*?\sxlink:href=["']([^"']*)["'][^>]*>""", re.IGNORECASE)
_ANCHOR_RE = re.compile(r"""<a\b[^>]*?\shref=["']([^"']*)["'][^>]*>""", re.IGNORECASE)
_BODY_RE = re.compile(r"<body[^>]*>(.*?)</body>", re.IGNORECASE | re.DOTALL)
_STYLESHEET_LINK_RE = re.compile(r"""<link\b[^>]*\shref=["']([^"']*)["'][^>]*>""", re.IGNORECASE)
_VIEWPORT_META_RES = (
    re.compile(r"""<meta\b[^>]*\bname=["']viewport["'][^>]*>""", re.IGNORECASE),
    re.compile(r"""<meta\b[^>]*\bcontent=["'][^"']*viewport[^"']*["'][^>]*>""", re.IGNORECASE),
)


def _replace_group(match: re.Match[str], replacement: str) -> str:
    """The whole match with its first group swapped for replacement."""
    whole = match.group(0)
    start = match.start(1) - match.start(0)
    end = match.end(1) - match.start(0)
    return whole[:start] + replacement + whole[end:]


def find_resource(path: str, resources: Mapping[str, str]) -> str | None:
    """Look a resolved archive path up in the resource table.

    Tries the path verbatim, then the bare filename, then the filename under
    each of RESOURCE_DIRECTORIES. Empty values count as missing.
    """
    value = resources.get(path)
    if value:
        return value

    file_name = basename(path)
    value = resources.get(file_name)
    if value:
        return value

    for directory in RESOURCE_DIRECTORIES:
        value = resources.get(f"{directory}/{file_name}")
        if value:
            return value
    return None


def _missing_image(reference: str) -> str:
    file_name = basename(reference) or reference
    return f'<div class="missing-image">Image not found: {html.escape(file_name)}</div>'


def replace_image_sources(
    content: str, resources: Mapping[str, str], chapter_href: str, base_path: str
) -> str:
    """Point every <img> at its resolved resource, or replace it with a placeholder."""

    def substitute(match: re.Match[str]) -> str:
        src = match.group(1)
        if src.startswith("data:"):
            return match.group(0)
        resolved = resolve_relative_path(src, chapter_href, base_path)
        found = find_resource(resolved, resources)
        if found:
            return _replace_group(match, found)
        return _missing_image(src)

    return _IMG_RE.sub(substitute, content)


def replace_svg_images(
    content: str, resources: Mapping[str, str], chapter_href: str, base_path: str
) -> str:
    """Point SVG <image xlink:href> at resolved resources, keeping unresolved ones as-is."""

    def substitute(match: re.Match[str]) -> str:
        href = match.group(1)
        if href.startswith("data:"):
            return match.group(0)
        resolved = resolve_relative_path(href, chapter_href, base_path)
        found = find_resource(resolved, resources)
        return _replace_group(match, found) if found else match.group(0)

    return _SVG_IMAGE_RE.sub(substitute, content)


def fix_internal_links(content: str) -> str:
    """Keep external links, turn fragment links same-document, neutralize the rest."""

    def substitute(match: re.Match[str]) -> str:
        href = match.group(1)
        if href.startswith(("http://", "https://")):
            return match.group(0)
        if "#" in href:
            return _replace_group(match, "#" + href.split("#", 1)[1])
        return _replace_group(match, NO_OP_HREF)

    return _ANCHOR_RE.sub(substitute, content)


def process_chapter_content(
    chapter: Chapter, resources: Mapping[str, str], base_path: str
) -> str:
    """Rewrite a chapter's markup for display outside the archive.

    Runs three passes: raster images, SVG image references, then anchors.
    The result is wrapped in a container tagged with the chapter id. The
    resource table is only read.

    Args:
        chapter: The chapter to rewrite.
        resources: Archive path (and fallback keys) to resolvable reference.
        base_path: The package document's directory within the archive.

    Returns:
        The processed chapter markup.
    """
    if not chapter.raw_content:
        return ""

    content = replace_image_sources(chapter.raw_content, resources, chapter.href, base_path)
    content = replace_svg_images(content, resources, chapter.href, base_path)
    content = fix_internal_links(content)

    chapter_id = html.escape(chapter.id, quote=True)
    return (
        f'<div class="chapter" data-chapter-id="{chapter_id}" id="chapter-{chapter_id}">'
        f"{content}</div>"
    )


def extract_body_content(markup: str) -> str:
    """Concatenated contents of every <body> element, or the input if there is none."""
    body = "".join(_BODY_RE.findall(markup))
    return body or markup


def _is_stylesheet_href(href: str) -> bool:
    lower = href.lower()
    return lower.endswith(".css") or "/css/" in lower or "/styles/" in lower


def strip_layout_overrides(markup: str) -> str:
    """Drop stylesheet links and viewport meta tags that fight the reader's layout."""
    markup = _STYLESHEET_LINK_RE.sub(
        lambda m: "" if _is_stylesheet_href(m.group(1)) else m.group(0), markup
    )
    for pattern in _VIEWPORT_META_RES:
        markup = pattern.sub("", markup)
    return markup
