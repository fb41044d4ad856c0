"""Shared types and helpers for CLI commands.

This module provides common enums and factory functions used across
multiple CLI command modules.
"""

from enum import Enum

from profclean.profiles.base import ProfileDirectory
from profclean.profiles.windows import WindowsProfileDirectory


class OutputFormat(str, Enum):
    """Output format options."""

    TABLE = "table"
    JSON = "json"


def get_profile_directory() -> ProfileDirectory:
    """Get the profile directory for this system.

    Returns:
        Profile directory instance.
    """
    return WindowsProfileDirectory()
