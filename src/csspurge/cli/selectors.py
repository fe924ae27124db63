"""CLI command: csspurge selectors -- print the selectors discovered in a build."""

from __future__ import annotations

import sys

import click

from csspurge.build import DirectoryBuild
from csspurge.cli.options import configure_logging, load_options
from csspurge.errors import ConfigError, ModuleParseError
from csspurge.plugin import PurgePlugin


@click.command()
@click.argument("out_dir", type=click.Path(exists=True, file_okay=False))
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="JSON file with purge options",
)
@click.option("-v", "--verbose", count=True, help="Increase log verbosity")
def selectors(out_dir: str, config_path: str | None, verbose: int) -> None:
    """Print the selectors found in the JavaScript files of OUT_DIR, one per line."""
    configure_logging(verbose)
    try:
        plugin = PurgePlugin(load_options(config_path))
    except ConfigError as exc:
        click.echo(f"Config error: {exc}", err=True)
        sys.exit(1)

    build = DirectoryBuild(out_dir)
    for module_id in build.module_ids:
        plugin.load(module_id)
    try:
        found = plugin.discover_selectors(build)
    except ModuleParseError as exc:
        click.echo(f"Parse error: {exc}", err=True)
        sys.exit(1)
    for selector in found:
        click.echo(selector)
