"""csspurge CLI entry point: Click group with subcommands."""

import click

from csspurge import __version__


@click.group()
@click.version_option(version=__version__, prog_name="csspurge")
def cli() -> None:
    """csspurge - strip unused CSS rules from a finished build."""


# Import and register subcommands
from csspurge.cli.purge import purge  # noqa: E402
from csspurge.cli.selectors import selectors  # noqa: E402

cli.add_command(purge)
cli.add_command(selectors)
