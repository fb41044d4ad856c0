"""Unit tests for the decision log."""

import io
import logging
from datetime import UTC, datetime
from pathlib import Path

from profclean.core.decision_log import DecisionLog, format_timestamp, log_file_name
from profclean.core.theme import ThemeColors, get_rich_theme
from profclean.models.config import BYTES_PER_GB
from profclean.models.report import FreeSpaceReading, RunOutcome, RunState
from rich.console import Console

STAMP = datetime(2026, 10, 18, 14, 3, 7, 123456)


def _console(buffer: io.StringIO) -> Console:
    return Console(file=buffer, theme=get_rich_theme(ThemeColors()), width=200, color_system=None)


class TestFormatting:
    """Tests for timestamp and file name formatting."""

    def test_format_timestamp(self) -> None:
        """Timestamps use MM/DD/YY and seven fractional digits."""
        assert format_timestamp(STAMP) == "[10/18/26 14:03:07.1234560]"

    def test_format_timestamp_pads_fraction(self) -> None:
        """Small fractions are zero-padded."""
        assert format_timestamp(datetime(2026, 1, 2, 3, 4, 5, 7)) == "[01/02/26 03:04:05.0000070]"

    def test_log_file_name(self) -> None:
        """Log files are named after the run start."""
        assert log_file_name(STAMP) == "profclean-20261018-140307.log"


class TestDecisionLog:
    """Tests for DecisionLog."""

    def test_record_writes_console_and_file(self, tmp_path: Path) -> None:
        """Lines go to the console and are appended to the file."""
        buffer = io.StringIO()
        log_path = tmp_path / "run.log"

        with DecisionLog(_console(buffer), log_path, clock=lambda: STAMP) as log:
            log.record("Found 3 profile(s)")
            log.record("Deleting profile jdoe")

        assert log_path.read_text().splitlines() == [
            "[10/18/26 14:03:07.1234560] Found 3 profile(s)",
            "[10/18/26 14:03:07.1234560] Deleting profile jdoe",
        ]
        assert "[10/18/26 14:03:07.1234560] Found 3 profile(s)" in buffer.getvalue()
        assert log.lines == ["Found 3 profile(s)", "Deleting profile jdoe"]

    def test_file_is_appended(self, tmp_path: Path) -> None:
        """An existing log file is never truncated."""
        log_path = tmp_path / "run.log"
        log_path.write_text("earlier line\n")

        with DecisionLog(_console(io.StringIO()), log_path) as log:
            log.record("new line")

        lines = log_path.read_text().splitlines()
        assert lines[0] == "earlier line"
        assert lines[1].endswith(" new line")

    def test_markup_is_escaped(self) -> None:
        """Usernames containing brackets are printed literally."""
        buffer = io.StringIO()
        with DecisionLog(_console(buffer), None) as log:
            log.record("Deleting profile [bold]x")

        assert "Deleting profile [bold]x" in buffer.getvalue()

    def test_no_echo(self, tmp_path: Path) -> None:
        """With echo off, lines are persisted but not printed."""
        buffer = io.StringIO()
        log_path = tmp_path / "run.log"

        with DecisionLog(_console(buffer), log_path, echo=False) as log:
            log.record("quiet line")

        assert buffer.getvalue() == ""
        assert "quiet line" in log_path.read_text()

    def test_without_file(self) -> None:
        """A log without a path only prints."""
        buffer = io.StringIO()
        log = DecisionLog(_console(buffer))
        log.record("console only")

        assert log.log_path is None
        assert "console only" in buffer.getvalue()

    def test_write_failure_is_not_fatal(self, tmp_path: Path) -> None:
        """An unwritable log warns once and keeps logging to the console."""
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        buffer = io.StringIO()
        log = DecisionLog(_console(buffer), blocker / "run.log")

        log.record("first")
        log.record("second")

        output = buffer.getvalue()
        assert output.count("Cannot write decision log") == 1
        assert "first" in output
        assert "second" in output
        assert log.lines == ["first", "second"]

    def test_for_run(self, tmp_path: Path) -> None:
        """for_run names the file after the start time."""
        log = DecisionLog.for_run(_console(io.StringIO()), tmp_path, started_at=STAMP)
        assert log.log_path == tmp_path / "profclean-20261018-140307.log"


class TestDecisionHelpers:
    """Tests for the decision helper methods."""

    def test_messages(self, decision_log: DecisionLog) -> None:
        """Helpers produce stable, readable messages."""
        reading = FreeSpaceReading(free_bytes=50 * BYTES_PER_GB, taken_at=datetime.now(UTC))

        decision_log.transition(RunState.FILTERING)
        decision_log.keep("alice", "activity since 2026-04-01")
        decision_log.skip("svc", "special")
        decision_log.delete("bob", BYTES_PER_GB)
        decision_log.delete("carol", dry_run=True)
        decision_log.deleted("bob")
        decision_log.vanished("dave")
        decision_log.deletion_failed("erin", "access denied")
        decision_log.free_space(reading, "Free space before deletion")
        decision_log.probe_failure("C:\\Users\\x\\AppData", PermissionError(13, "Access is denied"))

        assert decision_log.lines == [
            "State: filtering",
            "Keeping profile alice: activity since 2026-04-01",
            "Skipping profile svc: special",
            "Deleting profile bob (1.00 GB)",
            "Would delete profile carol",
            "Deleted profile bob",
            "Profile dave no longer exists, skipping",
            "Failed to delete profile erin: access denied",
            "Free space before deletion: 50.00 GB",
            "Cannot access C:\\Users\\x\\AppData: Access is denied",
        ]

    def test_outcome_levels(self, console_output: io.StringIO, tmp_path: Path) -> None:
        """Outcome lines are written to the file like any other line."""
        log = DecisionLog(_console(console_output), tmp_path / "o.log")
        log.outcome(RunOutcome.THRESHOLD_NOT_REACHED, "Threshold not reached")
        log.record("debug detail", logging.DEBUG)
        log.close()

        content = (tmp_path / "o.log").read_text()
        assert "Threshold not reached" in content
        assert "debug detail" in content
