"""Size prober for user profiles."""

import os
from collections.abc import Callable, Iterator

from profclean.models.config import BYTES_PER_GB
from profclean.probes.walker import ErrorCallback, FileEntry, walk_files

Walker = Callable[..., Iterator[FileEntry]]


def total_size(
    profile_root: str | os.PathLike[str],
    *,
    walker: Walker = walk_files,
    on_error: ErrorCallback | None = None,
) -> int:
    """Sum the sizes of all accessible files below ``profile_root``.

    Reparse points are not followed. Inaccessible sub-paths contribute
    nothing and are reported to ``on_error``; the partial sum is returned.

    Args:
        profile_root: Root directory of the profile.
        walker: File walker (injectable for tests).
        on_error: Called with (path, error) for every inaccessible node.

    Returns:
        Total size in bytes.
    """
    files = walker(
        profile_root,
        skip_reparse_points=True,
        skip_system_files=False,
        on_error=on_error,
    )
    return sum(entry.size for entry in files)


def format_gb(size_bytes: int | None) -> str:
    """Format a byte count as gigabytes with 2 decimals (display only)."""
    if size_bytes is None:
        return "-"
    return f"{size_bytes / BYTES_PER_GB:.2f} GB"
