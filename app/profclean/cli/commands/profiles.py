"""Profiles command implementation.

Lists the OS user profiles and whether each one may be deleted.
"""

import json
from typing import Annotated

import typer
from rich.table import Table

from profclean.cli.types import OutputFormat, get_profile_directory
from profclean.core.errors import EnumerationError, SettingsError
from profclean.core.settings import load_settings
from profclean.probes.size import format_gb, total_size
from profclean.profiles.filter import exclusion_reason
from profclean.profiles.protected import build_whitelist
from profclean.utils.formatting import console, print_error, print_info

app = typer.Typer(
    help="List local user profiles.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def list_profiles(
    output_format: Annotated[
        OutputFormat,
        typer.Option(
            "--format",
            "-f",
            help="Output format.",
            case_sensitive=False,
        ),
    ] = OutputFormat.TABLE,
    sizes: Annotated[
        bool,
        typer.Option("--sizes", help="Measure the size of every eligible profile (slow)."),
    ] = False,
    whitelist: Annotated[
        list[str] | None,
        typer.Option("--whitelist", "-w", help="Username to protect (repeatable)."),
    ] = None,
) -> None:
    """List local user profiles and their eligibility for deletion."""
    try:
        settings = load_settings()
    except SettingsError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    directory = get_profile_directory()
    if not directory.is_available():
        print_error("The OS profile directory is not available on this system.")
        raise typer.Exit(code=1)

    try:
        records = directory.list_profiles()
    except EnumerationError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    if not records:
        print_info("No profiles found.")
        return

    protected = build_whitelist([*settings.whitelist, *(whitelist or [])])
    rows: list[dict[str, object]] = []
    for record in records:
        reason = exclusion_reason(record, protected)
        size = total_size(record.path) if sizes and reason is None else None
        rows.append(
            {
                "username": record.username,
                "path": record.path,
                "special": record.is_special,
                "loaded": record.is_loaded,
                "eligible": reason is None,
                "excluded_by": reason.value if reason else None,
                "size_bytes": size,
            }
        )

    if output_format == OutputFormat.JSON:
        console.print_json(json.dumps(rows))
        return

    _print_table(rows, show_sizes=sizes)
    eligible_count = sum(1 for r in rows if r["eligible"])
    console.print(f"\n[dim]{len(rows)} profile(s), {eligible_count} eligible for deletion[/dim]")


def _print_table(rows: list[dict[str, object]], *, show_sizes: bool) -> None:
    """Display profiles as a Rich table."""
    table = Table(
        title="Local User Profiles",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Profile", style="bold", no_wrap=True)
    table.add_column("Path", style="muted")
    table.add_column("Eligible", width=10)
    if show_sizes:
        table.add_column("Size", justify="right", width=12)

    for row in rows:
        if row["eligible"]:
            verdict = "[delete]yes[/]"
        else:
            verdict = f"[keep]no[/] [dim]({row['excluded_by']})[/dim]"
        cells = [str(row["username"]), str(row["path"]), verdict]
        if show_sizes:
            size = row["size_bytes"]
            cells.append(format_gb(size) if isinstance(size, int) else "-")
        table.add_row(*cells)

    console.print(table)
