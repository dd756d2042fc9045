# ABOUTME: Magic-byte checks that tell real raster images from look-alike files.
# ABOUTME: Used to reject cover candidates whose name says image but whose bytes don't.

_MIN_LENGTH = 8

# Checked in order; the first matching prefix names the format.
_SIGNATURES: tuple[tuple[str, bytes], ...] = (
    ("jpeg", b"\xff\xd8\xff"),
    ("png", b"\x89PNG"),
    ("gif", b"GIF"),
    ("webp", b"RIFF"),
    ("bmp", b"BM"),
)


def detect_image_type(data: bytes) -> str | None:
    """Name the raster format of a buffer from its leading bytes.

    Returns:
        One of "jpeg", "png", "gif", "webp", "bmp", or None when the buffer
        is too short or starts with none of the known signatures.
    """
    if len(data) < _MIN_LENGTH:
        return None
    for name, magic in _SIGNATURES:
        if data.startswith(magic):
            return name
    return None


def is_valid_image(data: bytes) -> bool:
    """Whether a buffer looks like a genuine raster image."""
    return detect_image_type(data) is not None
