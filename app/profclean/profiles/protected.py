"""Usernames that are never eligible for deletion.

This module defines the built-in protected accounts that are always
part of the whitelist, regardless of user configuration.
"""

from collections.abc import Iterable

from profclean.models.config import WhitelistSet

# Built-in and well-known Windows profile folder names.
# Matched case-insensitively against the last segment of the profile path.
BUILTIN_PROTECTED_USERNAMES: tuple[str, ...] = (
    # Local administrator and guest accounts
    "Administrator",
    "Guest",
    # Template and shared profile folders
    "Default",
    "Default User",
    "Public",
    "All Users",
    # OOBE and sandbox accounts
    "defaultuser0",
    "WDAGUtilityAccount",
)


def build_whitelist(user_names: Iterable[str] = ()) -> WhitelistSet:
    """Build the effective whitelist for a run.

    Args:
        user_names: Additional usernames supplied by the user.

    Returns:
        WhitelistSet containing the built-in accounts plus ``user_names``.
    """
    return WhitelistSet(BUILTIN_PROTECTED_USERNAMES).union(user_names)
