# ABOUTME: The `inkshelf inspect` command for viewing an EPUB without importing it.
# ABOUTME: Shows metadata, the cover the locator would pick, and the reading order.

import tempfile
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from inkshelf.epub.archive import open_archive
from inkshelf.epub.cover import locate_cover
from inkshelf.epub.errors import InvalidArchive
from inkshelf.formats.epub import read_book

console = Console()


@click.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def inspect(path: Path) -> None:
    """Show metadata and structure of an EPUB file."""
    try:
        with open_archive(path) as reader, tempfile.TemporaryDirectory() as scratch:
            book = read_book(reader)
            cover = locate_cover(reader, Path(scratch), package_path=book.package.path)
    except InvalidArchive as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise SystemExit(1) from exc

    meta = book.metadata
    table = Table(title=str(path.name), show_header=False, pad_edge=False)
    table.add_column("Field", style="bold")
    table.add_column("Value")

    table.add_row("Title", meta.title)
    table.add_row("Creator", meta.creator or "[dim]unknown[/dim]")
    table.add_row("Publisher", meta.publisher or "[dim]unknown[/dim]")
    table.add_row("Language", meta.language or "[dim]unknown[/dim]")
    table.add_row("Identifier", meta.identifier or "[dim]none[/dim]")
    table.add_row("Description", meta.description or "[dim]none[/dim]")
    table.add_row("Package", book.package.path)
    table.add_row("Cover", cover.source_entry_path if cover else "[dim]none[/dim]")
    table.add_row("Chapters", str(len(book.spine)))
    table.add_row("TOC entries", str(len(book.toc)))

    console.print(table)

    if book.spine:
        console.print("\n[bold]Reading order[/bold]")
        for chapter_id in book.spine:
            item = book.package.manifest.get(chapter_id)
            href = item.href if item else "[red]missing[/red]"
            console.print(f"  {chapter_id} [dim]{href}[/dim]")
