"""Candidate filter.

Selects the profiles that may be considered for deletion at all.
"""

from collections.abc import Callable, Iterable
from enum import Enum

from profclean.models.config import WhitelistSet
from profclean.models.profile import ProfileRecord


class ExclusionReason(str, Enum):
    """Why a profile is not eligible for deletion."""

    SPECIAL = "special"
    LOADED = "loaded"
    WHITELISTED = "whitelisted"


def exclusion_reason(profile: ProfileRecord, whitelist: WhitelistSet) -> ExclusionReason | None:
    """Return why a profile is excluded, or None if it is eligible.

    Args:
        profile: Profile to check.
        whitelist: Protected usernames (case-insensitive).

    Returns:
        ExclusionReason, or None for an eligible profile.
    """
    if profile.is_special:
        return ExclusionReason.SPECIAL
    if profile.is_loaded:
        return ExclusionReason.LOADED
    if profile.username in whitelist:
        return ExclusionReason.WHITELISTED
    return None


def eligible(
    all_profiles: Iterable[ProfileRecord],
    whitelist: WhitelistSet,
    *,
    on_excluded: Callable[[ProfileRecord, ExclusionReason], None] | None = None,
) -> list[ProfileRecord]:
    """Return the profiles eligible for deletion, in input order.

    A profile is eligible iff it is not special, not loaded, and its
    username is not in the whitelist.

    Args:
        all_profiles: Every profile known to the OS.
        whitelist: Protected usernames.
        on_excluded: Called for each excluded profile with its reason.

    Returns:
        Eligible profiles.
    """
    result: list[ProfileRecord] = []
    for profile in all_profiles:
        reason = exclusion_reason(profile, whitelist)
        if reason is None:
            result.append(profile)
        elif on_excluded is not None:
            on_excluded(profile, reason)
    return result
