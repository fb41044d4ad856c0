"""Profile domain models.

This module defines the records handed out by an OS profile directory
and the candidates produced by a selection policy.
"""

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True, slots=True)
class ProfileRecord:
    """A single OS-level user profile.

    Records are owned by the profile directory that listed them; the
    engine only borrows them for the duration of one run.

    Attributes:
        path: Absolute filesystem root of the profile (unique key).
        is_special: True for OS/service profiles.
        is_loaded: True if the profile is currently in use.
        handle: Opaque identity used by the directory to delete the
            record (the SID on Windows). None if the directory keys on path.
    """

    path: str
    is_special: bool = False
    is_loaded: bool = False
    handle: str | None = None

    def __post_init__(self) -> None:
        """Validate profile data after initialization."""
        if not self.path:
            msg = "Profile path cannot be empty"
            raise ValueError(msg)

    @property
    def username(self) -> str:
        """Final path segment of the profile root.

        Both Windows and POSIX separators are accepted so that records
        listed on one platform can be inspected on another.
        """
        trimmed = self.path.rstrip("\\/")
        return trimmed.replace("\\", "/").rsplit("/", 1)[-1]


class MetricKind(str, Enum):
    """Kind of measurement attached to a candidate.

    Attributes:
        ACTIVITY: Boolean "has recent activity" from the activity prober.
        SIZE: Size in bytes from the size prober.
    """

    ACTIVITY = "activity"
    SIZE = "size"


@dataclass(frozen=True, slots=True)
class Candidate:
    """A profile annotated by a selection policy.

    Use :meth:`for_activity` or :meth:`for_size` rather than the
    constructor so the metric always matches its kind.

    Attributes:
        profile: The underlying profile record.
        kind: Which policy produced the metric.
        metric: Boolean for ACTIVITY, byte count for SIZE.
    """

    profile: ProfileRecord
    kind: MetricKind
    metric: bool | int

    def __post_init__(self) -> None:
        """Validate that the metric matches its kind."""
        if self.kind == MetricKind.ACTIVITY and not isinstance(self.metric, bool):
            msg = f"Activity metric must be a bool, got {type(self.metric).__name__}"
            raise TypeError(msg)
        if self.kind == MetricKind.SIZE:
            if isinstance(self.metric, bool) or not isinstance(self.metric, int):
                msg = f"Size metric must be an int, got {type(self.metric).__name__}"
                raise TypeError(msg)
            if self.metric < 0:
                msg = f"Size metric cannot be negative, got {self.metric}"
                raise ValueError(msg)

    @classmethod
    def for_activity(cls, profile: ProfileRecord, has_recent_activity: bool) -> "Candidate":
        """Create a candidate scored by the age policy."""
        return cls(profile=profile, kind=MetricKind.ACTIVITY, metric=has_recent_activity)

    @classmethod
    def for_size(cls, profile: ProfileRecord, size_bytes: int) -> "Candidate":
        """Create a candidate scored by the space policy."""
        return cls(profile=profile, kind=MetricKind.SIZE, metric=size_bytes)

    @property
    def username(self) -> str:
        """Username of the underlying profile."""
        return self.profile.username

    @property
    def has_recent_activity(self) -> bool:
        """Activity verdict. Only valid for ACTIVITY candidates."""
        if self.kind != MetricKind.ACTIVITY:
            msg = "Candidate was not scored by activity"
            raise TypeError(msg)
        return bool(self.metric)

    @property
    def size_bytes(self) -> int:
        """Measured size. Only valid for SIZE candidates."""
        if self.kind != MetricKind.SIZE:
            msg = "Candidate was not scored by size"
            raise TypeError(msg)
        return int(self.metric)

    @property
    def known_size(self) -> int | None:
        """Measured size if known, otherwise None."""
        return int(self.metric) if self.kind == MetricKind.SIZE else None
