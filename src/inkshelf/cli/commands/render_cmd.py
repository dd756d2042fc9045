# ABOUTME: The `inkshelf render` command for turning one chapter into standalone HTML.
# ABOUTME: Inlines images, neutralizes cross-chapter links, and writes a reader document.

import asyncio
from pathlib import Path

import click
from rich.console import Console

from inkshelf.epub.errors import InvalidArchive
from inkshelf.formats.epub import ChapterNotFound, open_book, render_chapter, wrap_document

console = Console(stderr=True)


@click.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("chapter_id", required=False)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write the HTML document here instead of stdout.",
)
def render(path: Path, chapter_id: str | None, output: Path | None) -> None:
    """Render a chapter of an EPUB (default: the first in reading order) to HTML."""
    try:
        book = open_book(path)
        if chapter_id is None:
            if not book.spine:
                console.print("[red]Error:[/red] book has no chapters")
                raise SystemExit(1)
            chapter_id = book.spine[0]
        body = asyncio.run(render_chapter(path, chapter_id))
    except (InvalidArchive, ChapterNotFound) as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise SystemExit(1) from exc

    document = wrap_document(book.metadata.title, body, book.toc)
    if output is None:
        click.echo(document, nl=False)
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(document, encoding="utf-8")
    console.print(f"[green]Wrote[/green] {output}")
