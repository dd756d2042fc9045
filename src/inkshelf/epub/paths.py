# ABOUTME: Path arithmetic inside an EPUB archive's internal namespace.
# ABOUTME: Pure string functions; nothing here touches the real filesystem.

import posixpath

IMAGE_EXTENSIONS: frozenset[str] = frozenset(
    {".jpg", ".jpeg", ".png", ".gif", ".webp", ".bmp", ".svg"}
)


def dirname(path: str) -> str:
    """Directory part of an archive path, empty at the archive root."""
    return "/".join(path.split("/")[:-1])


def basename(path: str) -> str:
    """Last segment of an archive path (the whole string if there is no slash)."""
    return path.split("/")[-1]


def extension(path: str) -> str:
    """Lowercased extension including the dot, or empty string."""
    return posixpath.splitext(basename(path))[1].lower()


def is_image_path(path: str) -> bool:
    """Whether the path names a file with an image extension."""
    return extension(path) in IMAGE_EXTENSIONS


def normalize_entry_path(path: str) -> str:
    """Canonical form for archive member names: forward slashes, no leading slash."""
    return path.replace("\\", "/").lstrip("/")


def join_archive_path(directory: str, href: str) -> str:
    """Join a manifest-relative href onto a directory and collapse dot segments."""
    joined = posixpath.normpath(posixpath.join(directory or ".", href))
    return normalize_entry_path(joined)


def resolve_relative_path(reference: str, chapter_href: str, base_path: str) -> str:
    """Resolve a chapter-relative resource reference to an archive path.

    Only references that begin with ``./`` or ``../`` are rewritten; anything
    else is assumed to already be archive-relative and is returned unchanged.
    A single leading ``../`` climbs out of the chapter's directory. When the
    chapter has no parent directory to climb into, base_path is used instead.

    Args:
        reference: The value of a src/href attribute.
        chapter_href: The chapter's location, e.g. ``text/ch1.xhtml``.
        base_path: Fallback directory for references that climb past the root.

    Returns:
        The resolved archive path.
    """
    if not reference.startswith(("../", "./")):
        return reference

    chapter_dir = dirname(chapter_href)

    if reference.startswith("../"):
        parent_dir = dirname(chapter_dir)
        if parent_dir:
            prefix = f"{parent_dir}/"
        else:
            prefix = f"{base_path}/" if base_path else ""
        return prefix + reference[len("../"):]

    prefix = f"{chapter_dir}/" if chapter_dir else ""
    return prefix + reference[len("./"):]
