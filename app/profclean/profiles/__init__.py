"""OS profile directories and candidate filtering.

This module provides the profile directory interface and its Windows
and in-memory implementations, the built-in protected usernames, and
the candidate filter.
"""

from profclean.profiles.base import ProfileDirectory
from profclean.profiles.filter import ExclusionReason, eligible, exclusion_reason
from profclean.profiles.memory import InMemoryProfileDirectory, SimulatedVolume
from profclean.profiles.protected import BUILTIN_PROTECTED_USERNAMES, build_whitelist
from profclean.profiles.windows import WindowsProfileDirectory

__all__ = [
    "BUILTIN_PROTECTED_USERNAMES",
    "ExclusionReason",
    "InMemoryProfileDirectory",
    "ProfileDirectory",
    "SimulatedVolume",
    "WindowsProfileDirectory",
    "build_whitelist",
    "eligible",
    "exclusion_reason",
]
