"""Filesystem probes for user profiles.

Provides the lazy file walker and the activity and size probers built
on top of it.
"""

from profclean.probes.activity import RESERVED_BASE_NAMES, has_recent_activity, is_reserved_file
from profclean.probes.size import format_gb, total_size
from profclean.probes.walker import FileEntry, walk_files

__all__ = [
    "RESERVED_BASE_NAMES",
    "FileEntry",
    "format_gb",
    "has_recent_activity",
    "is_reserved_file",
    "total_size",
    "walk_files",
]
