"""CLI command: csspurge purge -- purge the stylesheets of a build directory."""

from __future__ import annotations

import sys

import click

from csspurge.build import DirectoryBuild
from csspurge.cli.options import configure_logging, load_options
from csspurge.errors import ConfigError, ModuleParseError
from csspurge.events import AssetPurged, AssetSkipped
from csspurge.plugin import PurgePlugin


@click.command()
@click.argument("out_dir", type=click.Path(exists=True, file_okay=False))
@click.option(
    "--root",
    type=click.Path(exists=True, file_okay=False),
    default=None,
    help="Project root searched for HTML content (defaults to OUT_DIR)",
)
@click.option("--content", multiple=True, help="Extra content glob (repeatable)")
@click.option(
    "--safelist",
    "safelist_entries",
    multiple=True,
    help="Selector to always keep; /slashes/ make it a pattern (repeatable)",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="JSON file with purge options",
)
@click.option("--rejected", "show_rejected", is_flag=True, help="List rejected selectors")
@click.option("--dry-run", is_flag=True, help="Report without writing files")
@click.option("-v", "--verbose", count=True, help="Increase log verbosity")
def purge(
    out_dir: str,
    root: str | None,
    content: tuple[str, ...],
    safelist_entries: tuple[str, ...],
    config_path: str | None,
    show_rejected: bool,
    dry_run: bool,
    verbose: int,
) -> None:
    """Remove unused CSS rules from the stylesheets in OUT_DIR.

    JavaScript files in OUT_DIR are scanned for selectors; every CSS file is
    purged and rewritten in place. Other files are never modified.
    """
    configure_logging(verbose)
    try:
        options = load_options(config_path, content, safelist_entries)
    except ConfigError as exc:
        click.echo(f"Config error: {exc}", err=True)
        sys.exit(1)

    plugin = PurgePlugin(options)
    purged = plugin.events.record(AssetPurged)
    skipped = plugin.events.record(AssetSkipped)

    try:
        DirectoryBuild(out_dir, root=root).run(plugin, write=not dry_run)
    except ModuleParseError as exc:
        click.echo(f"Parse error: {exc}", err=True)
        sys.exit(1)

    for event in purged:
        click.echo(
            f"{event.file_name}: {event.original_size} -> {event.purged_size} bytes, "
            f"{len(event.rejected)} selector(s) rejected"
        )
        if show_rejected:
            for selector in event.rejected:
                click.echo(f"  - {selector}")
    for event in skipped:
        click.echo(f"{event.file_name}: unchanged ({event.reason})")

    if not purged and not skipped:
        click.echo("No stylesheets found")
    elif dry_run:
        click.echo("Dry run: no files written")
