"""Free-space measurement for the target volume."""

import logging
import shutil
from collections.abc import Callable

from profclean.core.clock import Clock, utc_now
from profclean.models.report import FreeSpaceReading

logger = logging.getLogger(__name__)


def disk_free_bytes(volume: str) -> int:
    """Return available bytes on ``volume`` as reported by the OS."""
    return shutil.disk_usage(volume).free


class FreeSpaceReader:
    """Takes fresh free-space readings on demand.

    Readings are never cached: every call to :meth:`read` queries the
    volume again, because each deletion changes the answer.

    Args:
        volume: Volume (drive root or mount point) to measure.
        measure: Function returning free bytes for a volume.
        clock: Source of the reading timestamp.
    """

    def __init__(
        self,
        volume: str,
        *,
        measure: Callable[[str], int] = disk_free_bytes,
        clock: Clock = utc_now,
    ) -> None:
        self._volume = volume
        self._measure = measure
        self._clock = clock

    @property
    def volume(self) -> str:
        return self._volume

    def read(self) -> FreeSpaceReading:
        """Measure free space now.

        Raises:
            OSError: If the volume cannot be queried.
        """
        free = self._measure(self._volume)
        logger.debug("Free space on %s: %d bytes", self._volume, free)
        return FreeSpaceReading(free_bytes=free, taken_at=self._clock())
