"""In-memory profile directory.

Backs simulated runs and tests with a fixed list of records. Deleting a
record can free a configured amount of space on a :class:`SimulatedVolume`.
"""

from collections.abc import Callable, Iterable

from profclean.core.errors import DeletionError
from profclean.models.profile import ProfileRecord
from profclean.models.report import DeletionStatus
from profclean.profiles.base import ProfileDirectory


class SimulatedVolume:
    """Volume whose free space only changes when profiles are deleted."""

    def __init__(self, free_bytes: int) -> None:
        self.free_bytes = free_bytes

    def free(self, amount: int) -> None:
        self.free_bytes += amount


class InMemoryProfileDirectory(ProfileDirectory):
    """Profile directory holding records in a list.

    Args:
        profiles: Initial profile records.
        sizes: Bytes freed on the volume per deleted path.
        volume: Volume credited when a profile is deleted.
        failing: Paths whose deletion raises DeletionError.
    """

    def __init__(
        self,
        profiles: Iterable[ProfileRecord] = (),
        *,
        sizes: dict[str, int] | None = None,
        volume: SimulatedVolume | None = None,
        failing: Iterable[str] = (),
    ) -> None:
        self._profiles = list(profiles)
        self._sizes = dict(sizes or {})
        self._volume = volume
        self._failing = set(failing)
        self.deleted: list[ProfileRecord] = []

    def is_available(self) -> bool:
        return True

    def list_profiles(self) -> list[ProfileRecord]:
        return list(self._profiles)

    def delete_profile(self, profile: ProfileRecord) -> DeletionStatus:
        if profile.path in self._failing:
            raise DeletionError(profile.username, "access denied")
        if profile not in self._profiles:
            return DeletionStatus.VANISHED

        self._profiles.remove(profile)
        self.deleted.append(profile)
        if self._volume is not None:
            self._volume.free(self._sizes.get(profile.path, 0))
        return DeletionStatus.DELETED

    def free_space_reader(self) -> Callable[[str], int]:
        """Return a measure function for :class:`FreeSpaceReader` on the simulated volume."""
        volume = self._volume
        if volume is None:
            msg = "No simulated volume configured"
            raise RuntimeError(msg)
        return lambda _volume: volume.free_bytes
