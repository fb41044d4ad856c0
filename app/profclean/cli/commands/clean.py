"""Clean command implementation.

Selects stale or space-consuming profiles and deletes them through the
OS profile directory, logging every decision.
"""

import json
from pathlib import Path
from typing import Annotated

import typer
from rich.table import Table

from profclean.cli.types import get_profile_directory
from profclean.core.decision_log import DecisionLog
from profclean.core.diskspace import FreeSpaceReader
from profclean.core.engine import CleanupEngine
from profclean.core.errors import (
    ConfigurationError,
    EnumerationError,
    FreeSpaceError,
    SettingsError,
)
from profclean.core.paths import default_volume, ensure_log_dir
from profclean.core.settings import Settings, load_settings
from profclean.models.config import RunConfig
from profclean.models.report import DeletionReport, DeletionStatus, RunOutcome
from profclean.probes.size import format_gb
from profclean.profiles.protected import build_whitelist
from profclean.utils.formatting import (
    console,
    print_error,
    print_info,
    print_success,
    print_warning,
)

app = typer.Typer(
    help="Delete stale local user profiles.",
    invoke_without_command=True,
)

# Exit code used by shells for SIGINT
_EXIT_INTERRUPTED = 130


@app.callback(invoke_without_command=True)
def clean_profiles(
    ctx: typer.Context,
    months: Annotated[
        int | None,
        typer.Option(
            "--months",
            "-m",
            min=0,
            help="Delete profiles without activity for this many months (0 = off).",
        ),
    ] = None,
    space_limit: Annotated[
        float | None,
        typer.Option(
            "--space-limit",
            "-s",
            min=0,
            help="Delete largest profiles until this many GB are free (0 = off).",
        ),
    ] = None,
    profile_limit: Annotated[
        int | None,
        typer.Option(
            "--profile-limit",
            "-n",
            min=0,
            help="Process at most this many profiles (0 = unlimited).",
        ),
    ] = None,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Show what would be deleted."),
    ] = False,
    whitelist: Annotated[
        list[str] | None,
        typer.Option(
            "--whitelist",
            "-w",
            help="Username to protect (repeatable).",
        ),
    ] = None,
    volume: Annotated[
        str | None,
        typer.Option("--volume", help="Volume to measure free space on."),
    ] = None,
    log_dir: Annotated[
        Path | None,
        typer.Option("--log-dir", help="Directory for the decision log."),
    ] = None,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Skip confirmation prompt."),
    ] = False,
    export_path: Annotated[
        Path | None,
        typer.Option("--export", "-e", help="Export the run report to a JSON file."),
    ] = None,
) -> None:
    """Delete stale local user profiles.

    With --months, profiles without user activity since the cutoff are
    deleted. With only --space-limit, the largest profiles are deleted
    until enough space is free. With both, inactive profiles are deleted
    and the space limit only stops the run early.
    """
    obj = ctx.obj if isinstance(ctx.obj, dict) else {}
    quiet = bool(obj.get("quiet", False))

    try:
        settings = load_settings()
    except SettingsError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    try:
        config = _build_config(
            settings,
            months=months,
            space_limit=space_limit,
            profile_limit=profile_limit,
            dry_run=dry_run,
            whitelist=whitelist or [],
            volume=volume,
        )
    except ConfigurationError as e:
        print_error(str(e))
        raise typer.Exit(code=2) from e

    directory = get_profile_directory()
    if not directory.is_available():
        print_error("The OS profile directory is not available on this system.")
        raise typer.Exit(code=1)

    if not dry_run and not yes:
        confirmed = typer.confirm("Delete user profiles now?", default=False)
        if not confirmed:
            print_info("Aborted.")
            raise typer.Exit(code=0)

    log = _open_decision_log(log_dir or _settings_log_dir(settings), quiet=quiet)
    engine = CleanupEngine(directory, FreeSpaceReader(config.volume), log)

    try:
        with log:
            report = engine.run(config)
    except (EnumerationError, FreeSpaceError) as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
    except KeyboardInterrupt:
        print_warning("Interrupted. The profile being deleted was handed to the OS as a whole.")
        raise typer.Exit(code=_EXIT_INTERRUPTED) from None

    _print_report(report)
    if log.log_path is not None:
        print_info(f"Decision log: {log.log_path}")

    if export_path is not None:
        _export_report(report, export_path)

    if not report.success:
        raise typer.Exit(code=1)


# === Private helper functions ===


def _build_config(
    settings: Settings,
    *,
    months: int | None,
    space_limit: float | None,
    profile_limit: int | None,
    dry_run: bool,
    whitelist: list[str],
    volume: str | None,
) -> RunConfig:
    """Merge command-line options over settings into a RunConfig.

    Raises:
        ConfigurationError: If the merged configuration is invalid.
    """
    return RunConfig.from_gigabytes(
        month_cutoff=months if months is not None else settings.month_cutoff,
        space_limit_gb=space_limit if space_limit is not None else settings.space_limit_gb,
        profile_limit=profile_limit if profile_limit is not None else settings.profile_limit,
        dry_run=dry_run,
        whitelist=build_whitelist([*settings.whitelist, *whitelist]),
        volume=volume or settings.volume or default_volume(),
    )


def _settings_log_dir(settings: Settings) -> Path | None:
    return Path(settings.log_dir) if settings.log_dir else None


def _open_decision_log(log_dir: Path | None, *, quiet: bool) -> DecisionLog:
    """Create the run's decision log, falling back to console-only."""
    try:
        directory = ensure_log_dir(log_dir)
    except RuntimeError as e:
        print_warning(f"{e}. Continuing without a log file.")
        return DecisionLog(console, None, echo=not quiet)
    return DecisionLog.for_run(console, directory, echo=not quiet)


def _print_report(report: DeletionReport) -> None:
    """Display per-profile results and the run outcome."""
    if report.results:
        title = "Deletion Results (dry-run)" if report.dry_run else "Deletion Results"
        table = Table(
            title=title,
            show_header=True,
            header_style="bold_header",
            border_style="border",
        )
        table.add_column("Profile", style="bold")
        table.add_column("Size", justify="right", width=12)
        table.add_column("Status", width=10)
        table.add_column("Details", style="dim")

        for r in report.results:
            if r.status == DeletionStatus.DRY_RUN:
                status, detail = "[info]dry-run[/]", "Would delete"
            elif r.status == DeletionStatus.DELETED:
                status, detail = "[success]deleted[/]", ""
            elif r.status == DeletionStatus.VANISHED:
                status, detail = "[warning]gone[/]", "Profile no longer exists"
            else:
                status, detail = "[error]failed[/]", r.error or "Unknown error"
            size = format_gb(r.size_bytes) if r.size_bytes is not None else "-"
            table.add_row(r.username, size, status, detail)

        console.print(table)

    if report.outcome == RunOutcome.NOTHING_TO_DO:
        print_success("Enough free space already. Nothing to do.")
    elif report.outcome == RunOutcome.THRESHOLD_NOT_REACHED:
        print_warning("Space limit not reached after processing all candidates.")
    elif report.dry_run:
        print_info(f"Dry-run: {report.processed_count} profile(s) would be deleted.")
    elif report.failed_count:
        print_warning(f"{report.deleted_count} deleted, {report.failed_count} failed")
    else:
        print_success(f"{report.deleted_count} profile(s) deleted.")


def _export_report(report: DeletionReport, export_path: Path) -> None:
    """Export the run report to a JSON file."""
    export_path = export_path.resolve()
    if export_path.is_dir():
        print_error(f"Export path is a directory: {export_path}")
        raise typer.Exit(code=1)

    try:
        export_path.parent.mkdir(parents=True, exist_ok=True)
        export_path.write_text(json.dumps(report.to_dict(), indent=2))
        print_info(f"Report exported to {export_path}")
    except OSError as e:
        print_error(f"Failed to export: {e}")
        raise typer.Exit(code=1) from e
