"""Config command implementation.

Shows, creates and locates the machine-wide settings file.
"""

from typing import Annotated

import typer
from rich.table import Table

from profclean.core.errors import SettingsError
from profclean.core.paths import get_log_dir, get_settings_path
from profclean.core.settings import Settings, load_settings, save_settings
from profclean.profiles.protected import BUILTIN_PROTECTED_USERNAMES
from profclean.utils.formatting import console, print_error, print_info, print_success

app = typer.Typer(
    help="Manage profclean settings.",
    no_args_is_help=True,
)


@app.command()
def show() -> None:
    """Show the effective settings."""
    try:
        settings = load_settings()
    except SettingsError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    table = Table(
        title="Settings",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Setting", style="bold")
    table.add_column("Value")

    table.add_row("month_cutoff", str(settings.month_cutoff or "off"))
    table.add_row("space_limit_gb", str(settings.space_limit_gb or "off"))
    table.add_row("profile_limit", str(settings.profile_limit or "unlimited"))
    table.add_row("volume", settings.volume or "[dim](system drive)[/dim]")
    table.add_row("log_dir", settings.log_dir or f"[dim]{get_log_dir()}[/dim]")
    table.add_row("whitelist", ", ".join(settings.whitelist) or "[dim](none)[/dim]")
    table.add_row("built-in protected", f"[dim]{', '.join(BUILTIN_PROTECTED_USERNAMES)}[/dim]")

    console.print(table)


@app.command()
def init(
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite an existing settings file."),
    ] = False,
) -> None:
    """Create a settings file with default values."""
    path = get_settings_path()
    if path.exists() and not force:
        print_error(f"Settings file already exists: {path} (use --force to overwrite)")
        raise typer.Exit(code=1)

    try:
        saved = save_settings(Settings(), path)
    except SettingsError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    print_success(f"Settings written to {saved}")


@app.command()
def path() -> None:
    """Print the settings file and log directory locations."""
    print_info(f"Settings: {get_settings_path()}")
    print_info(f"Logs: {get_log_dir()}")
