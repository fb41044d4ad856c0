"""Abstract base class for OS profile directories.

A profile directory lists the OS-level profile records and deletes them
through the operating system's official mechanism.
"""

from abc import ABC, abstractmethod

from profclean.models.profile import ProfileRecord
from profclean.models.report import DeletionStatus


class ProfileDirectory(ABC):
    """Abstract base class for all profile directories.

    Example:
        >>> directory = WindowsProfileDirectory()
        >>> if directory.is_available():
        ...     for profile in directory.list_profiles():
        ...         print(profile.username, profile.is_loaded)
    """

    @abstractmethod
    def list_profiles(self) -> list[ProfileRecord]:
        """List every profile record known to the OS.

        Returns:
            Profile records in OS enumeration order.

        Raises:
            EnumerationError: If the profiles cannot be listed at all.
        """

    @abstractmethod
    def delete_profile(self, profile: ProfileRecord) -> DeletionStatus:
        """Delete a profile record and its files through the OS.

        Args:
            profile: Record previously returned by :meth:`list_profiles`.

        Returns:
            DeletionStatus.DELETED, or DeletionStatus.VANISHED if the
            record no longer exists.

        Raises:
            DeletionError: If the OS rejected the request.
        """

    @abstractmethod
    def is_available(self) -> bool:
        """Check if this profile directory can be used on this system."""
