"""swgen CLI.

Provides commands to create a config file, build the service worker and
inspect the persisted snapshot.
"""

import logging
import sys
from pathlib import Path

import click
from pydantic import ValidationError

from swgen.build import run_build
from swgen.config.loader import create_default_config
from swgen.config.loader import get_config_path
from swgen.config.loader import load_config
from swgen.config.loader import load_definition
from swgen.errors import ServiceWorkerGeneratorError
from swgen.storage.snapshot_store import SnapshotStore


def configure_logging(level: str, verbose: bool = False) -> None:
    """Configure root logging for a CLI run."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        force=True,
    )


@click.group()
def cli():
    """swgen - generate an incrementally updated service worker."""
    pass


@cli.command()
@click.option("--config", "config_path", type=click.Path(path_type=Path), help="Config file (default: swgen.yaml)")
def init(config_path: Path | None):
    """Write a default swgen.yaml if none exists."""
    path = (config_path or get_config_path()).resolve()
    if path.exists():
        click.echo(f"Config already exists: {path}")
        return
    create_default_config(path)
    click.echo(f"Created {path}")


@cli.command()
@click.option("--config", "config_path", type=click.Path(path_type=Path), help="Config file (default: swgen.yaml)")
@click.option("--output", help="Worker program path, relative to the document root")
@click.option("--client-output", help="Page registration script path, relative to the document root")
@click.option("--dry-run", is_flag=True, help="Reconcile and render without writing anything")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging")
def build(config_path: Path | None, output: str | None, client_output: str | None, dry_run: bool, verbose: bool):
    """Build the service worker from the config file."""
    try:
        path = (config_path or get_config_path()).resolve()
        settings = load_config(path)
        configure_logging(settings.log_level, verbose)

        overrides = {}
        if output:
            overrides["output"] = output
        if client_output:
            overrides["client_output"] = client_output
        if overrides:
            settings = settings.model_copy(update=overrides)

        definition = load_definition(path)
        result = run_build(settings, definition, dry_run=dry_run)

    except (ServiceWorkerGeneratorError, ValidationError, FileNotFoundError, NotADirectoryError, RuntimeError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    manifest = result.manifest
    click.echo(f"Changed: {'yes' if result.changed else 'no'} (ts {result.timestamp})")
    click.echo(f"Cache: {result.cache_name}")
    click.echo(f"  {len(manifest.cache_first)} cache-first, {len(manifest.on_demand)} on-demand")
    click.echo(f"  cleanup: {len(manifest.cleanup_caches)} cache(s), {len(manifest.cleanup_files)} file(s)")
    if dry_run:
        click.echo("Dry run: nothing written")
    else:
        click.echo(f"Wrote {settings.resolve_output(settings.output)}")


@cli.command()
@click.option("--config", "config_path", type=click.Path(path_type=Path), help="Config file (default: swgen.yaml)")
def state(config_path: Path | None):
    """Print the persisted snapshot."""
    try:
        settings = load_config((config_path or get_config_path()).resolve())
    except (ServiceWorkerGeneratorError, ValidationError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    snapshot = SnapshotStore(settings.resolve_output(settings.state_file)).load()
    if snapshot is None:
        click.echo("No snapshot")
        return
    click.echo(snapshot.to_json(), nl=False)


def main():
    """Entry point for swgen CLI."""
    try:
        cli()
    except KeyboardInterrupt:
        click.echo("\nInterrupted")
        sys.exit(0)


if __name__ == "__main__":
    main()
