"""Main CLI entry point and application setup."""

import logging
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import click
from click.exceptions import Exit
from rich.console import Console

from quotebook import __version__
from quotebook.cli.commands import collection, quote, sort
from quotebook.cli.config import display_defaults, load_config
from quotebook.core.exceptions import QuotebookError
from quotebook.core.sorting import SortRegistry, create_default_registry
from quotebook.storage.backends.sqlite import SQLiteBackend
from quotebook.storage.store import QuoteStore

logger = logging.getLogger(__name__)

DATABASE_NAME = "quotebook.db"


@dataclass
class Context:
    """CLI context that holds shared resources."""

    store: QuoteStore
    registry: SortRegistry
    console: Console
    config: dict[str, Any] = field(default_factory=dict)
    assume_yes: bool = False
    debug: bool = False


def setup_logging(
    verbose: bool = False, quiet: bool = False, debug: bool = False
) -> None:
    """Configure logging based on CLI flags."""
    if quiet:
        level = logging.ERROR
    elif verbose or debug:
        level = logging.DEBUG
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s"
        if not debug
        else "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def create_console(no_color: bool = False, width: int | None = None) -> Console:
    """Create Rich console with appropriate settings."""
    return Console(
        no_color=no_color,
        width=width or 120,
        highlight=not no_color,
        color_system=None if no_color else "auto",
    )


def get_storage_path(data_dir: Path | str | None = None) -> Path:
    """Get the directory holding the quote database."""
    if data_dir:
        return Path(data_dir)

    # Check environment variable
    if env_dir := os.environ.get("QUOTEBOOK_DATA_DIR"):
        return Path(env_dir)

    # Default to XDG data home
    xdg_data_home = Path(
        os.environ.get("XDG_DATA_HOME", Path.home() / ".local" / "share")
    )
    return xdg_data_home / "quotebook"


class QuotebookGroup(click.Group):
    """Custom group that reports errors without tracebacks."""

    def invoke(self, ctx):
        try:
            return super().invoke(ctx)
        except KeyboardInterrupt:
            console = getattr(ctx.obj, "console", None) if ctx.obj else None
            if console:
                console.print("[yellow]Interrupted[/yellow]")
            ctx.exit(130)
        except (click.ClickException, click.Abort, Exit, SystemExit):
            raise
        except QuotebookError as e:
            debug = getattr(ctx.obj, "debug", False) if ctx.obj else False
            if debug:
                raise
            console = getattr(ctx.obj, "console", None) if ctx.obj else None
            if console:
                console.print(f"[red]Error:[/red] {e}")
            else:
                click.echo(f"Error: {e}", err=True)
            ctx.exit(1)


@click.group(cls=QuotebookGroup)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-error output")
@click.option("--no-color", is_flag=True, help="Disable colored output")
@click.option("--debug", is_flag=True, help="Enable debug mode with full tracebacks")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, path_type=Path),
    help="Path to configuration file",
)
@click.option(
    "--data-dir",
    "-d",
    type=click.Path(path_type=Path),
    help="Override data directory location",
)
@click.version_option(
    version=__version__, prog_name="quotebook", message="quotebook version %(version)s"
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    no_color: bool,
    debug: bool,
    yes: bool,
    config: Path | None,
    data_dir: Path | None,
) -> None:
    """Collect, sort and share quotes.

    Quotes live in named collections, carry optional author and tag metadata,
    and can be listed in sections under any of the built-in sorts.
    """
    setup_logging(verbose=verbose, quiet=quiet, debug=debug)
    console = create_console(no_color=no_color)

    try:
        config_data = load_config(config)
        storage_path = get_storage_path(data_dir or config_data.get("data_dir"))
        storage_path.mkdir(parents=True, exist_ok=True)

        backend = SQLiteBackend(storage_path / DATABASE_NAME)
        ctx.call_on_close(backend.close)

        store = QuoteStore(backend, default_display=display_defaults(config_data))
        registry = create_default_registry(store.preferences)
        logger.debug("Opened quote library at %s", storage_path)

        ctx.obj = Context(
            store=store,
            registry=registry,
            console=console,
            config=config_data,
            assume_yes=yes,
            debug=debug,
        )

    except (OSError, ValueError) as e:
        if debug:
            raise
        console.print(f"[red]Error initializing application:[/red] {e}")
        ctx.exit(1)


# Command: status
@cli.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Show library location and statistics."""
    console = ctx.obj.console
    store = ctx.obj.store

    stats = store.get_statistics()
    console.print("\n[bold]Library Status[/bold]\n")
    console.print(f"Storage location: {store.backend.db_path}")
    console.print(f"Collections: {stats['total_collections']}")
    console.print(f"Quotes: {stats['total_quotes']}")


cli.add_command(collection.collection)
cli.add_command(quote.quote)
cli.add_command(sort.sort)


def main() -> None:
    """Main entry point for the CLI application."""
    try:
        cli()
    except KeyboardInterrupt:
        sys.exit(130)


if __name__ == "__main__":
    main()
