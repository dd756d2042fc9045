# ABOUTME: CLI package for inkshelf, built on Click.
# ABOUTME: Defines the root command group, logging setup, and registers subcommands.

import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from inkshelf.cli.commands import import_cmd, info_cmd, inspect_cmd, ls_cmd, render_cmd


@click.group()
@click.version_option(package_name="inkshelf")
@click.option("-v", "--verbose", is_flag=True, default=False, help="Show debug logging.")
def cli(verbose: bool) -> None:
    """inkshelf - a personal light novel library."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


cli.add_command(import_cmd.import_command)
cli.add_command(inspect_cmd.inspect)
cli.add_command(ls_cmd.ls)
cli.add_command(info_cmd.info)
cli.add_command(render_cmd.render)
