# ABOUTME: End-to-end tests for `inkshelf render`.
# ABOUTME: Renders chapters of a real EPUB to stdout and to files.

from pathlib import Path

from click.testing import CliRunner

from inkshelf.cli import cli


class TestRenderCommand:
    """E2E tests for `inkshelf render`."""

    def test_first_chapter_to_stdout(self, sample_epub: Path) -> None:
        result = CliRunner().invoke(cli, ["render", str(sample_epub)])

        assert result.exit_code == 0
        assert "<!DOCTYPE html>" in result.output
        assert 'data-chapter-id="chap01"' in result.output
        assert "data:image/png;base64," in result.output

    def test_named_chapter_to_file(self, sample_epub: Path, tmp_path: Path) -> None:
        output = tmp_path / "out" / "chap02.html"
        result = CliRunner().invoke(
            cli, ["render", str(sample_epub), "chap02", "-o", str(output)]
        )

        assert result.exit_code == 0
        document = output.read_text(encoding="utf-8")
        assert 'data-chapter-id="chap02"' in document
        assert "Pasloe." in document
        assert "<title>Spice and Wolf</title>" in document

    def test_unknown_chapter(self, sample_epub: Path) -> None:
        result = CliRunner().invoke(cli, ["render", str(sample_epub), "missing"])
        assert result.exit_code == 1
        assert "Chapter not found" in result.output

    def test_corrupt_file(self, corrupt_epub: Path) -> None:
        result = CliRunner().invoke(cli, ["render", str(corrupt_epub)])
        assert result.exit_code == 1
        assert "Error" in result.output
