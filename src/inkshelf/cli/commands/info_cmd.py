# ABOUTME: The `inkshelf info` command for displaying one cataloged volume.
# ABOUTME: Shows all stored fields for a volume by item id.

from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from inkshelf.cli.options import db_option
from inkshelf.db.catalog import LibraryCatalog
from inkshelf.db.connection import DEFAULT_DB_PATH, open_library

console = Console()


@click.command("info")
@click.argument("item_id")
@db_option
def info(item_id: str, db_path: Path | None) -> None:
    """Show stored metadata for a volume by ID."""
    conn = open_library(db_path or DEFAULT_DB_PATH)
    try:
        record = LibraryCatalog(conn).get_by_id(item_id)
    finally:
        conn.close()

    if record is None:
        console.print(f"[red]Volume {item_id} not found.[/red]")
        raise SystemExit(1)

    meta = record.metadata
    table = Table(show_header=False, box=None, pad_edge=False)
    table.add_column("Field", style="bold", width=14)
    table.add_column("Value")

    table.add_row("ID", record.item_id)
    table.add_row("Series", f"{record.series} #{record.volume_number}")
    table.add_row("Title", meta.title)
    table.add_row("Creator", meta.creator or "unknown")
    if meta.publisher:
        table.add_row("Publisher", meta.publisher)
    table.add_row("Language", meta.language or "?")
    if meta.identifier:
        table.add_row("Identifier", meta.identifier)
    if meta.description:
        table.add_row("Description", meta.description)
    table.add_row("Cover", str(record.cover_path) if record.cover_path else "none")
    table.add_row("Source", str(record.source_path))
    table.add_row("Hash", record.file_hash)
    table.add_row("Added", record.date_added)
    table.add_row("Modified", record.date_modified)

    console.print(table)
