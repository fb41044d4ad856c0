"""Lazy filesystem walker used by the profile probers.

Walks a directory tree with ``os.scandir`` without following reparse
points (symlinks and Windows junctions), optionally skipping files the
OS flags as system files. Inaccessible nodes are reported through an
``on_error`` callback and skipped; the walk itself never raises.
"""

import logging
import os
import stat
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from datetime import UTC, datetime

logger = logging.getLogger(__name__)

# Windows file attribute bits (stat module only defines them on Windows builds)
_FILE_ATTRIBUTE_SYSTEM = getattr(stat, "FILE_ATTRIBUTE_SYSTEM", 0x4)
_FILE_ATTRIBUTE_REPARSE_POINT = getattr(stat, "FILE_ATTRIBUTE_REPARSE_POINT", 0x400)

ErrorCallback = Callable[[str, OSError], None]


@dataclass(frozen=True, slots=True)
class FileEntry:
    """A regular file found during a walk.

    Attributes:
        path: Absolute path of the file.
        name: Base name of the file.
        mtime: Last write time (UTC).
        size: Size in bytes.
        is_system: True if the OS flags the file as a system file.
    """

    path: str
    name: str
    mtime: datetime
    size: int
    is_system: bool = False


def _attributes(st: os.stat_result) -> int:
    return getattr(st, "st_file_attributes", 0)


def is_reparse_point(entry: os.DirEntry[str]) -> bool:
    """Check whether a directory entry is a symlink or Windows reparse point."""
    if entry.is_symlink():
        return True
    if hasattr(entry, "is_junction") and entry.is_junction():
        return True
    return bool(_attributes(entry.stat(follow_symlinks=False)) & _FILE_ATTRIBUTE_REPARSE_POINT)


def walk_files(
    root: str | os.PathLike[str],
    *,
    skip_reparse_points: bool = True,
    skip_system_files: bool = False,
    on_error: ErrorCallback | None = None,
) -> Iterator[FileEntry]:
    """Yield every regular file below ``root``.

    Args:
        root: Directory to walk.
        skip_reparse_points: Do not descend into or report reparse points.
        skip_system_files: Do not report files flagged as system files.
        on_error: Called with (path, error) for every inaccessible node.

    Yields:
        FileEntry for each file, in directory order (depth-first).
    """

    def report(path: str, exc: OSError) -> None:
        logger.debug("Skipping inaccessible path %s: %s", path, exc)
        if on_error is not None:
            on_error(path, exc)

    stack: list[str] = [os.fspath(root)]
    while stack:
        current = stack.pop()
        try:
            with os.scandir(current) as it:
                entries = list(it)
        except OSError as e:
            report(current, e)
            continue

        subdirs: list[str] = []
        for entry in entries:
            try:
                if skip_reparse_points and is_reparse_point(entry):
                    continue
                if entry.is_dir(follow_symlinks=not skip_reparse_points):
                    subdirs.append(entry.path)
                    continue
                if not entry.is_file(follow_symlinks=not skip_reparse_points):
                    continue
                st = entry.stat(follow_symlinks=not skip_reparse_points)
            except OSError as e:
                report(entry.path, e)
                continue

            is_system = bool(_attributes(st) & _FILE_ATTRIBUTE_SYSTEM)
            if skip_system_files and is_system:
                continue

            yield FileEntry(
                path=entry.path,
                name=entry.name,
                mtime=datetime.fromtimestamp(st.st_mtime, tz=UTC),
                size=st.st_size,
                is_system=is_system,
            )

        # Reverse so subdirectories are visited in listing order
        stack.extend(reversed(subdirs))
