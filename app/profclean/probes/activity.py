"""Activity prober for user profiles.

Decides whether a profile shows genuine user activity after a cutoff
instant. Registry hive files and OS system files are ignored because
their modification times reflect OS housekeeping rather than the user.
"""

import logging
import os
from collections.abc import Callable, Iterator
from datetime import datetime

from profclean.probes.walker import ErrorCallback, FileEntry, walk_files

logger = logging.getLogger(__name__)

# Base names (before the first dot, case-insensitive) of per-user registry hives
RESERVED_BASE_NAMES: frozenset[str] = frozenset({"ntuser", "usrclass"})

Walker = Callable[..., Iterator[FileEntry]]


def is_reserved_file(name: str) -> bool:
    """Check if a file name belongs to a per-user registry hive.

    Matches ``NTUSER.DAT``, ``ntuser.dat.LOG1``, ``UsrClass.dat`` and
    similar, but not names that merely start with the same letters.

    Args:
        name: File base name.

    Returns:
        True if the file should be ignored by the activity prober.
    """
    return name.split(".", 1)[0].casefold() in RESERVED_BASE_NAMES


def has_recent_activity(
    profile_root: str | os.PathLike[str],
    cutoff: datetime,
    *,
    walker: Walker = walk_files,
    on_error: ErrorCallback | None = None,
) -> bool:
    """Check whether any user file was modified strictly after ``cutoff``.

    Stops at the first qualifying file. Inaccessible sub-paths count as
    no evidence of activity; they are passed to ``on_error`` and skipped.

    Args:
        profile_root: Root directory of the profile.
        cutoff: Timezone-aware instant; files must be newer than this.
        walker: File walker (injectable for tests).
        on_error: Called with (path, error) for every inaccessible node.

    Returns:
        True if recent activity was found, False otherwise.
    """
    files = walker(
        profile_root,
        skip_reparse_points=True,
        skip_system_files=True,
        on_error=on_error,
    )
    for entry in files:
        if is_reserved_file(entry.name):
            continue
        if entry.mtime > cutoff:
            logger.debug("Recent activity in %s: %s (%s)", profile_root, entry.path, entry.mtime)
            return True
    return False
