"""Main CLI application entry point.

Defines the Typer application: ``rimraf <path> [<path> ...]``.
"""

import asyncio
import logging
from pathlib import Path
from typing import Annotated, Any

import typer
from rich.markup import escape

from rimraf import __version__
from rimraf.api import rimraf, rimraf_sync
from rimraf.core.config import ConfigError, load_config_or_default
from rimraf.core.errors import RimrafError
from rimraf.utils.formatting import print_error, print_success

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="rimraf",
    help="Remove files and directories like rm -rf.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"rimraf version {__version__}")
        raise typer.Exit()


def _configure_logging(verbose: bool, quiet: bool) -> None:
    """Send library logs to stderr at the requested level.

    --quiet wins over --verbose and hides warnings about discarded errors.
    """
    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.DEBUG
    else:
        return
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


@app.command()
def main(
    paths: Annotated[
        list[str],
        typer.Argument(help="Paths or glob patterns to remove.", show_default=False),
    ],
    no_glob: Annotated[
        bool,
        typer.Option("--no-glob", "-G", help="Treat every argument as a literal path."),
    ] = False,
    max_retries: Annotated[
        int | None,
        typer.Option("--max-retries", min=0, help="Retries for busy entries per target."),
    ] = None,
    emfile_wait: Annotated[
        int | None,
        typer.Option("--emfile-wait", min=0, help="Backoff budget when out of file descriptors."),
    ] = None,
    sequential: Annotated[
        bool,
        typer.Option("--sequential", help="Remove one entry at a time instead of concurrently."),
    ] = False,
    config_path: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Config file to read defaults from."),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose output."),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Only log errors; overrides --verbose."),
    ] = False,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
) -> None:
    """Remove each PATH, recursing into directories.

    Glob patterns are expanded unless [bold]--no-glob[/bold] is given.
    Paths that do not exist are ignored.
    """
    _configure_logging(verbose, quiet)

    overrides: dict[str, Any] = {}
    if no_glob:
        overrides["glob"] = None
    if max_retries is not None:
        overrides["max_retries"] = max_retries
    if emfile_wait is not None:
        overrides["emfile_wait"] = emfile_wait

    try:
        options = load_config_or_default(config_path, **overrides)
    except ConfigError as e:
        print_error(escape(str(e)))
        raise typer.Exit(code=1) from e

    try:
        if sequential:
            rimraf_sync(paths, options)
        else:
            asyncio.run(rimraf(paths, options))
    except RimrafError as e:
        print_error(escape(str(e)))
        raise typer.Exit(code=1) from e

    if verbose and not quiet:
        print_success(f"Removed {len(paths)} argument(s).")


if __name__ == "__main__":
    app()
