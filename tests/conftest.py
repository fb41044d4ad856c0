"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

import io
import os
from collections.abc import Callable, Iterator
from datetime import UTC, datetime
from pathlib import Path

import pytest
from rich.console import Console

from profclean.core.decision_log import DecisionLog
from profclean.core.diskspace import FreeSpaceReader
from profclean.core.theme import ThemeColors, get_rich_theme
from profclean.models.profile import ProfileRecord

# Reference instant for age-based tests
FIXED_NOW = datetime(2026, 10, 1, 12, 0, tzinfo=UTC)
# Well before any cutoff used in the tests
STALE_MTIME = datetime(2025, 1, 1, tzinfo=UTC)


@pytest.fixture(autouse=True)
def isolated_dirs(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    """Point config and log directories at a temporary location."""
    monkeypatch.setenv("PROFCLEAN_CONFIG_DIR", str(tmp_path / "profclean-config"))
    monkeypatch.setenv("PROFCLEAN_LOG_DIR", str(tmp_path / "profclean-logs"))
    yield tmp_path


@pytest.fixture
def now() -> datetime:
    """Fixed 'now' used as the clock of age-based runs."""
    return FIXED_NOW


@pytest.fixture
def console_output() -> io.StringIO:
    """Buffer receiving the live decision stream."""
    return io.StringIO()


@pytest.fixture
def decision_log(tmp_path: Path, console_output: io.StringIO) -> Iterator[DecisionLog]:
    """Decision log writing to a buffer console and a temporary file."""
    console = Console(
        file=console_output,
        theme=get_rich_theme(ThemeColors()),
        width=200,
        color_system=None,
    )
    log = DecisionLog(console, tmp_path / "decisions.log")
    yield log
    log.close()


@pytest.fixture
def make_profile() -> Callable[..., ProfileRecord]:
    """Factory for profile records below C:\\Users."""
    counter = iter(range(1001, 10000))

    def _make(name: str, *, special: bool = False, loaded: bool = False) -> ProfileRecord:
        return ProfileRecord(
            path=f"C:\\Users\\{name}",
            is_special=special,
            is_loaded=loaded,
            handle=f"S-1-5-21-100-200-300-{next(counter)}",
        )

    return _make


@pytest.fixture
def write_file() -> Callable[..., Path]:
    """Factory creating a file with given content and modification time."""

    def _write(
        path: Path,
        content: bytes = b"x",
        mtime: datetime = STALE_MTIME,
    ) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
        stamp = mtime.timestamp()
        os.utime(path, (stamp, stamp))
        return path

    return _write


@pytest.fixture
def fixed_reader() -> Callable[[list[int]], FreeSpaceReader]:
    """Factory for readers returning the given values in order (last one repeats)."""

    def _reader(values: list[int]) -> FreeSpaceReader:
        remaining = list(values)

        def measure(_volume: str) -> int:
            if len(remaining) > 1:
                return remaining.pop(0)
            return remaining[0]

        return FreeSpaceReader("C:\\", measure=measure, clock=lambda: FIXED_NOW)

    return _reader
