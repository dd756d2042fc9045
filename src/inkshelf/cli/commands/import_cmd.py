# ABOUTME: The `inkshelf import` command for scanning and cataloging EPUB volumes.
# ABOUTME: Walks a directory, extracts metadata and covers, and stores records.

from pathlib import Path

import click
from rich.console import Console

from inkshelf.cli.options import db_option
from inkshelf.core.importer import import_volumes
from inkshelf.db.catalog import LibraryCatalog
from inkshelf.db.connection import DEFAULT_DB_PATH, open_library

console = Console()


def _find_epubs(directory: Path) -> list[Path]:
    """Recursively find all .epub files in a directory."""
    return sorted(directory.rglob("*.epub"))


@click.command("import")
@click.argument(
    "directory",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
)
@db_option
def import_command(directory: Path, db_path: Path | None) -> None:
    """Scan a directory for EPUB files and catalog them in the library."""
    epub_files = _find_epubs(directory)

    if not epub_files:
        console.print(f"[yellow]No EPUB files found in {directory}[/yellow]")
        return

    console.print(f"Found [bold]{len(epub_files)}[/bold] EPUB file(s)\n")

    conn = open_library(db_path or DEFAULT_DB_PATH)
    try:
        catalog = LibraryCatalog(conn)
        result = import_volumes(epub_files, catalog)

        for item_id in result.added_ids:
            record = catalog.get_by_id(item_id)
            if record is not None:
                notes = "" if record.cover_path else " [dim](no cover)[/dim]"
                if record.metadata.is_degraded:
                    notes += " [dim](no metadata)[/dim]"
                console.print(
                    f"  [green]+[/green] {record.metadata.title} "
                    f"[dim]({record.series} vol. {record.volume_number})[/dim]{notes}"
                )
    finally:
        conn.close()

    parts = []
    if result.added:
        parts.append(f"[green]{result.added} added[/green]")
    if result.skipped:
        parts.append(f"[yellow]{result.skipped} skipped[/yellow]")
    if result.errors:
        parts.append(f"[red]{result.errors} error(s)[/red]")

    console.print("\n" + ", ".join(parts))

    if result.error_details:
        console.print(
            f"\n[yellow]{result.errors} file(s) could not be imported:[/yellow]"
        )
        for path, msg in result.error_details:
            console.print(f"  [dim]{path.name}:[/dim] {msg}")
