"""Main CLI application entry point.

Defines the Typer application and global options.
"""

import logging
from typing import Annotated

import typer
from rich.logging import RichHandler

from profclean import __version__
from profclean.cli.commands import clean, config, profiles
from profclean.utils.formatting import err_console

# Create main Typer app
app = typer.Typer(
    name="profclean",
    help="Reclaim disk space by removing stale local user profiles.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"profclean version {__version__}")
        raise typer.Exit()


def _configure_logging(verbose: bool) -> None:
    """Route module loggers through Rich on stderr."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=verbose, markup=False)],
        force=True,
    )


@app.callback()
def main(
    ctx: typer.Context,
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
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output.",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress the live decision stream (the log file is still written).",
        ),
    ] = False,
) -> None:
    """profclean - Reclaim disk space by removing stale local user profiles.

    Profiles are selected by inactivity or by size and deleted through
    the operating system, never by removing files directly.
    """
    _configure_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet


# Register commands
app.add_typer(clean.app, name="clean")
app.add_typer(profiles.app, name="profiles")
app.add_typer(config.app, name="config")


if __name__ == "__main__":
    app()
