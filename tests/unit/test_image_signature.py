# ABOUTME: Unit tests for magic-byte image detection.
# ABOUTME: Ensures look-alike files are rejected and the known formats are recognized.

import pytest

from inkshelf.epub.signature import detect_image_type, is_valid_image

_PADDING = b"\x00" * 16


class TestDetectImageType:
    """Tests for detect_image_type."""

    @pytest.mark.parametrize(
        ("prefix", "expected"),
        [
            (b"\xff\xd8\xff", "jpeg"),
            (b"\x89PNG", "png"),
            (b"GIF89a", "gif"),
            (b"RIFF", "webp"),
            (b"BM", "bmp"),
        ],
    )
    def test_known_formats(self, prefix: bytes, expected: str) -> None:
        assert detect_image_type(prefix + _PADDING) == expected

    def test_unknown_bytes(self) -> None:
        assert detect_image_type(b"<html></html>" + _PADDING) is None

    def test_too_short(self) -> None:
        """Fewer than eight bytes is never an image, even with a valid prefix."""
        assert detect_image_type(b"\xff\xd8\xff\xe0\x00\x00\x00") is None


class TestIsValidImage:
    """Tests for is_valid_image."""

    def test_zero_bytes_rejected(self) -> None:
        assert not is_valid_image(b"\x00" * 32)

    def test_jpeg_accepted(self) -> None:
        assert is_valid_image(b"\xff\xd8\xff" + _PADDING)

    def test_empty_rejected(self) -> None:
        assert not is_valid_image(b"")
