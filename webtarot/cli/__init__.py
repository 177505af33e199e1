"""CLI commands package."""
import click

from webtarot.cli.draw import draw_command


@click.group()
def cli():
    """webtarot command line tools."""


cli.add_command(draw_command)

__all__ = ["cli", "draw_command"]
