# ABOUTME: End-to-end tests for the inkshelf CLI root group and `inspect`.
# ABOUTME: Tests commands via Click's CliRunner with real EPUB fixtures.

from pathlib import Path

from click.testing import CliRunner

from inkshelf.cli import cli


class TestCliRoot:
    """E2E tests for the root command group."""

    def test_help_lists_commands(self) -> None:
        result = CliRunner().invoke(cli, ["--help"])
        assert result.exit_code == 0
        for command in ("import", "inspect", "ls", "info", "render"):
            assert command in result.output

    def test_verbose_flag_accepted(self, sample_epub: Path) -> None:
        result = CliRunner().invoke(cli, ["--verbose", "inspect", str(sample_epub)])
        assert result.exit_code == 0


class TestCliInspect:
    """E2E tests for `inkshelf inspect`."""

    def test_shows_metadata(self, sample_epub: Path) -> None:
        result = CliRunner().invoke(cli, ["inspect", str(sample_epub)])
        assert result.exit_code == 0
        assert "Spice and Wolf" in result.output
        assert "Isuna Hasekura" in result.output
        assert "Yen Press" in result.output

    def test_shows_cover_and_reading_order(self, sample_epub: Path) -> None:
        result = CliRunner().invoke(cli, ["inspect", str(sample_epub)])
        assert result.exit_code == 0
        assert "EPUB/cover.jpg" in result.output
        assert "Reading order" in result.output
        assert "chap01" in result.output
        assert "chap02" in result.output

    def test_does_not_write_cover_next_to_file(self, sample_epub: Path) -> None:
        CliRunner().invoke(cli, ["inspect", str(sample_epub)])
        assert not (sample_epub.parent / ".metadata").exists()

    def test_nonexistent_file_fails(self) -> None:
        result = CliRunner().invoke(cli, ["inspect", "/nonexistent/path.epub"])
        assert result.exit_code != 0

    def test_corrupt_epub_reports_error(self, corrupt_epub: Path) -> None:
        result = CliRunner().invoke(cli, ["inspect", str(corrupt_epub)])
        assert result.exit_code == 1
        assert "Error" in result.output
