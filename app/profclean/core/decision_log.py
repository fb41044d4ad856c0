"""Decision log: the audit trail of a cleanup run.

Every state transition, keep/delete/skip decision, free-space reading and
probe failure is written as one timestamped line to the live console and
appended to a per-run log file. Writing the file never aborts a run: the
first failure is reported on the console and persistence is switched off.

Line format::

    [10/18/26 14:03:07.1234560] Deleting profile jdoe (12.40 GB)
"""

import logging
from collections.abc import Callable
from datetime import datetime
from pathlib import Path
from typing import IO

from rich.console import Console
from rich.markup import escape

from profclean.core.errors import ProbeError
from profclean.models.report import FreeSpaceReading, RunOutcome, RunState
from profclean.probes.size import format_gb

logger = logging.getLogger(__name__)

LOG_FILE_PREFIX = "profclean"

# Rich style per logging level
_LEVEL_STYLES: dict[int, str] = {
    logging.DEBUG: "muted",
    logging.INFO: "text",
    logging.WARNING: "warning",
    logging.ERROR: "error",
}


def format_timestamp(moment: datetime) -> str:
    """Format a timestamp as ``[MM/DD/YY HH:MM:SS.fffffff]``.

    Python datetimes carry microseconds, so the seventh fractional digit
    is always zero.
    """
    return f"[{moment:%m/%d/%y %H:%M:%S}.{moment.microsecond:06d}0]"


def log_file_name(started_at: datetime) -> str:
    """Return the log file name for a run started at ``started_at``."""
    return f"{LOG_FILE_PREFIX}-{started_at:%Y%m%d-%H%M%S}.log"


class DecisionLog:
    """Writes decisions to the console and an append-only log file.

    Args:
        console: Rich console for the live stream.
        log_path: File to append to. None disables persistence.
        clock: Source of line timestamps (local time by default).
        echo: If False, lines are only persisted, not printed.
    """

    def __init__(
        self,
        console: Console,
        log_path: Path | None = None,
        *,
        clock: Callable[[], datetime] = datetime.now,
        echo: bool = True,
    ) -> None:
        self._console = console
        self._log_path = log_path
        self._clock = clock
        self._echo = echo
        self._file: IO[str] | None = None
        self._persist = log_path is not None
        self.lines: list[str] = []

    @classmethod
    def for_run(
        cls,
        console: Console,
        log_dir: Path,
        *,
        started_at: datetime | None = None,
        echo: bool = True,
    ) -> "DecisionLog":
        """Create a decision log whose file is named after the run start time."""
        start = started_at or datetime.now()
        return cls(console, log_dir / log_file_name(start), echo=echo)

    @property
    def log_path(self) -> Path | None:
        return self._log_path

    def __enter__(self) -> "DecisionLog":
        return self

    def __exit__(self, *_exc: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the log file if it was opened."""
        if self._file is not None:
            try:
                self._file.close()
            except OSError as e:
                logger.debug("Error closing decision log: %s", e)
            self._file = None

    def record(self, message: str, level: int = logging.INFO, style: str | None = None) -> None:
        """Append one decision line to the console and the log file.

        Args:
            message: Plain-text message (no Rich markup).
            level: Logging level, used for styling.
            style: Rich style overriding the level's default.
        """
        stamp = format_timestamp(self._clock())
        self.lines.append(message)

        if self._echo:
            line_style = style or _LEVEL_STYLES.get(level, "text")
            self._console.print(f"[timestamp]{escape(stamp)}[/] [{line_style}]{escape(message)}[/]")

        self._write(f"{stamp} {message}\n")

    def _write(self, line: str) -> None:
        if not self._persist or self._log_path is None:
            return
        try:
            if self._file is None:
                self._log_path.parent.mkdir(parents=True, exist_ok=True)
                self._file = self._log_path.open(mode="a", encoding="utf-8")
            self._file.write(line)
            self._file.flush()
        except OSError as e:
            self._persist = False
            self._console.print(
                f"[warning]Warning:[/] Cannot write decision log {escape(str(self._log_path))}: "
                f"{escape(str(e))}. Continuing without a log file."
            )

    # === Decision helpers ===

    def transition(self, state: RunState) -> None:
        self.record(f"State: {state.value}", logging.DEBUG)

    def keep(self, username: str, reason: str) -> None:
        self.record(f"Keeping profile {username}: {reason}", style="keep")

    def skip(self, username: str, reason: str) -> None:
        self.record(f"Skipping profile {username}: {reason}", style="skip")

    def delete(self, username: str, size_bytes: int | None = None, *, dry_run: bool = False) -> None:
        prefix = "Would delete" if dry_run else "Deleting"
        size = f" ({format_gb(size_bytes)})" if size_bytes is not None else ""
        self.record(f"{prefix} profile {username}{size}", style="delete")

    def deleted(self, username: str) -> None:
        self.record(f"Deleted profile {username}", style="success")

    def vanished(self, username: str) -> None:
        self.record(f"Profile {username} no longer exists, skipping", logging.WARNING)

    def deletion_failed(self, username: str, reason: str) -> None:
        self.record(f"Failed to delete profile {username}: {reason}", logging.ERROR)

    def free_space(self, reading: FreeSpaceReading, label: str = "Free space") -> None:
        self.record(f"{label}: {format_gb(reading.free_bytes)}", style="space")

    def probe_failure(self, path: str, error: OSError) -> None:
        failure = ProbeError(path, error.strerror or str(error))
        self.record(str(failure), logging.WARNING)

    def outcome(self, outcome: RunOutcome, message: str) -> None:
        level = logging.WARNING if outcome == RunOutcome.THRESHOLD_NOT_REACHED else logging.INFO
        style = "warning" if level == logging.WARNING else "success"
        self.record(message, level, style=style)
