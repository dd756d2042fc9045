# ABOUTME: The `inkshelf ls` command for listing cataloged volumes.
# ABOUTME: Displays a Rich table of all volumes in the library database.

from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from inkshelf.cli.options import db_option
from inkshelf.db.catalog import LibraryCatalog
from inkshelf.db.connection import DEFAULT_DB_PATH, open_library

console = Console()


@click.command("ls")
@db_option
@click.option(
    "--series",
    "series_filter",
    default=None,
    help="Only list volumes of this series.",
)
def ls(db_path: Path | None, series_filter: str | None) -> None:
    """List all volumes in the library catalog."""
    conn = open_library(db_path or DEFAULT_DB_PATH)
    try:
        catalog = LibraryCatalog(conn)
        if series_filter:
            records = catalog.list_by_series(series_filter)
        else:
            records = catalog.list_all()
    finally:
        conn.close()

    if not records:
        console.print("[yellow]No volumes in the library.[/yellow]")
        return

    table = Table()
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Series")
    table.add_column("Vol", justify="right", width=4)
    table.add_column("Title", style="bold")
    table.add_column("Creator")
    table.add_column("Cover", width=5)

    for record in records:
        table.add_row(
            record.item_id,
            record.series,
            str(record.volume_number),
            record.metadata.title,
            record.metadata.creator or "[dim]unknown[/dim]",
            "yes" if record.cover_path else "no",
        )

    console.print(table)
    console.print(f"\n[dim]{len(records)} volume(s)[/dim]")
