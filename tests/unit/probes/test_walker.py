"""Unit tests for the lazy file walker."""

import os
from pathlib import Path

import pytest
from profclean.probes.walker import walk_files


def _names(root: Path, **kwargs: object) -> list[str]:
    return sorted(entry.name for entry in walk_files(root, **kwargs))  # type: ignore[arg-type]


class TestWalkFiles:
    """Tests for walk_files."""

    def test_yields_nested_files(self, tmp_path: Path) -> None:
        """Files in nested directories are all yielded."""
        (tmp_path / "a" / "b").mkdir(parents=True)
        (tmp_path / "top.txt").write_text("1")
        (tmp_path / "a" / "mid.txt").write_text("22")
        (tmp_path / "a" / "b" / "deep.txt").write_text("333")

        assert _names(tmp_path) == ["deep.txt", "mid.txt", "top.txt"]

    def test_entry_metadata(self, tmp_path: Path) -> None:
        """Entries carry size, UTC mtime and full path."""
        target = tmp_path / "data.bin"
        target.write_bytes(b"12345")
        os.utime(target, (1_700_000_000, 1_700_000_000))

        [entry] = list(walk_files(tmp_path))

        assert entry.path == str(target)
        assert entry.size == 5
        assert entry.mtime.timestamp() == 1_700_000_000
        assert entry.mtime.tzinfo is not None
        assert entry.is_system is False

    def test_empty_directory(self, tmp_path: Path) -> None:
        """An empty directory yields nothing."""
        assert list(walk_files(tmp_path)) == []

    def test_symlinked_directory_not_followed(self, tmp_path: Path) -> None:
        """Symlinked directories are neither followed nor reported."""
        outside = tmp_path / "outside"
        outside.mkdir()
        (outside / "secret.txt").write_text("x")
        profile = tmp_path / "profile"
        profile.mkdir()
        (profile / "own.txt").write_text("x")
        (profile / "link").symlink_to(outside, target_is_directory=True)

        assert _names(profile) == ["own.txt"]

    def test_symlinked_file_not_reported(self, tmp_path: Path) -> None:
        """Symlinked files are skipped."""
        real = tmp_path / "real.txt"
        real.write_text("x")
        profile = tmp_path / "profile"
        profile.mkdir()
        (profile / "alias.txt").symlink_to(real)

        assert _names(profile) == []

    def test_missing_root_reported(self, tmp_path: Path) -> None:
        """A missing root is reported to on_error, not raised."""
        errors: list[tuple[str, OSError]] = []
        missing = tmp_path / "missing"

        result = list(walk_files(missing, on_error=lambda p, e: errors.append((p, e))))

        assert result == []
        assert len(errors) == 1
        assert errors[0][0] == str(missing)
        assert isinstance(errors[0][1], FileNotFoundError)

    def test_inaccessible_subdirectory_skipped(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """A subdirectory that cannot be listed is skipped; siblings are still walked."""
        (tmp_path / "locked").mkdir()
        (tmp_path / "locked" / "hidden.txt").write_text("x")
        (tmp_path / "open").mkdir()
        (tmp_path / "open" / "visible.txt").write_text("x")

        locked = str(tmp_path / "locked")
        real_scandir = os.scandir

        def fake_scandir(path: str):  # type: ignore[no-untyped-def]
            if os.fspath(path) == locked:
                raise PermissionError(13, "Access is denied", path)
            return real_scandir(path)

        monkeypatch.setattr("profclean.probes.walker.os.scandir", fake_scandir)
        errors: list[str] = []

        names = [e.name for e in walk_files(tmp_path, on_error=lambda p, _e: errors.append(p))]

        assert names == ["visible.txt"]
        assert errors == [locked]

    def test_is_lazy(self, tmp_path: Path) -> None:
        """The walk is a generator and does no work until iterated."""
        walker = walk_files(tmp_path / "does-not-exist")
        assert iter(walker) is walker
