"""Run report models.

This module defines free-space readings, per-profile deletion results,
run states and the final report produced by the deletion loop.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from profclean.models.config import BYTES_PER_GB


@dataclass(frozen=True, slots=True)
class FreeSpaceReading:
    """Point-in-time measurement of available bytes on the target volume.

    Attributes:
        free_bytes: Available bytes at the time of the reading.
        taken_at: When the reading was taken.
    """

    free_bytes: int
    taken_at: datetime

    @property
    def free_gb(self) -> float:
        """Free space in GB, rounded to 2 decimals for display."""
        return round(self.free_bytes / BYTES_PER_GB, 2)


class DeletionStatus(str, Enum):
    """Outcome of processing a single candidate.

    Attributes:
        DELETED: The profile record was removed.
        DRY_RUN: Deletion was skipped because the run is a dry-run.
        FAILED: The delete request failed.
        VANISHED: The profile disappeared between listing and deletion.
    """

    DELETED = "deleted"
    DRY_RUN = "dry_run"
    FAILED = "failed"
    VANISHED = "vanished"


@dataclass(frozen=True, slots=True)
class DeletionResult:
    """Result of processing one candidate in the deletion loop."""

    username: str
    path: str
    status: DeletionStatus
    error: str | None = None
    size_bytes: int | None = None

    @property
    def failed(self) -> bool:
        return self.status == DeletionStatus.FAILED


class RunOutcome(str, Enum):
    """Terminal outcome of a run. None of these is an error.

    Attributes:
        THRESHOLD_MET: Free space reached the configured limit.
        LIMIT_REACHED: The profile limit was reached.
        EXHAUSTED: Every candidate was processed (no space limit configured).
        THRESHOLD_NOT_REACHED: Candidates ran out before the space limit was met.
        NOTHING_TO_DO: Free space was already above the limit before the run.
    """

    THRESHOLD_MET = "threshold_met"
    LIMIT_REACHED = "limit_reached"
    EXHAUSTED = "exhausted"
    THRESHOLD_NOT_REACHED = "threshold_not_reached"
    NOTHING_TO_DO = "nothing_to_do"


class RunState(str, Enum):
    """Engine states for one run."""

    IDLE = "idle"
    FILTERING = "filtering"
    SCORING = "scoring"
    DELETING = "deleting"
    FAILED = "failed"
    FINISHED = "finished"


@dataclass(slots=True)
class DeletionReport:
    """Summary of a completed run.

    Attributes:
        outcome: Terminal outcome of the run.
        results: One result per processed candidate, in processing order.
        initial_free: Free-space reading taken before the first deletion.
        final_free: Free-space reading after the last deletion, None if it
            could not be taken.
        kept: Usernames kept by the age policy because of recent activity.
        dry_run: Whether the run was a dry-run.
    """

    outcome: RunOutcome
    results: list[DeletionResult] = field(default_factory=lambda: [])
    initial_free: FreeSpaceReading | None = None
    final_free: FreeSpaceReading | None = None
    kept: list[str] = field(default_factory=lambda: [])
    dry_run: bool = False

    @property
    def processed_count(self) -> int:
        return len(self.results)

    @property
    def deleted_count(self) -> int:
        return sum(1 for r in self.results if r.status == DeletionStatus.DELETED)

    @property
    def failed_count(self) -> int:
        return sum(1 for r in self.results if r.failed)

    @property
    def success(self) -> bool:
        """True if no delete request failed."""
        return self.failed_count == 0

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a dictionary for JSON export."""

        def reading(r: FreeSpaceReading | None) -> dict[str, Any] | None:
            if r is None:
                return None
            return {"free_bytes": r.free_bytes, "taken_at": r.taken_at.isoformat()}

        return {
            "outcome": self.outcome.value,
            "dry_run": self.dry_run,
            "initial_free": reading(self.initial_free),
            "final_free": reading(self.final_free),
            "kept": list(self.kept),
            "results": [
                {
                    "username": r.username,
                    "path": r.path,
                    "status": r.status.value,
                    "error": r.error,
                    "size_bytes": r.size_bytes,
                }
                for r in self.results
            ],
        }
