"""Selection policies.

A selection policy turns the eligible profiles into an ordered deletion
queue of candidates:

- AgePolicy keeps profiles with activity after the cutoff and queues the
  rest in filter order.
- SpacePolicy sizes every eligible profile and queues them largest first.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from datetime import datetime

from profclean.core.clock import Clock, compute_cutoff, utc_now
from profclean.core.decision_log import DecisionLog
from profclean.models.config import RunConfig
from profclean.models.profile import Candidate, ProfileRecord
from profclean.probes.activity import has_recent_activity
from profclean.probes.size import format_gb, total_size
from profclean.probes.walker import ErrorCallback

logger = logging.getLogger(__name__)

ActivityProber = Callable[..., bool]
SizeProber = Callable[..., int]


class SelectionPolicy(ABC):
    """Abstract base class for selection policies."""

    def __init__(self, log: DecisionLog) -> None:
        self._log = log
        self.kept: list[str] = []

    @property
    @abstractmethod
    def name(self) -> str:
        """Short policy name used in logs."""

    @abstractmethod
    def select(self, profiles: Sequence[ProfileRecord]) -> list[Candidate]:
        """Score eligible profiles and return the ordered deletion queue.

        Args:
            profiles: Eligible profiles in filter order.

        Returns:
            Candidates in the order they should be deleted.
        """

    def _on_probe_error(self) -> ErrorCallback:
        return self._log.probe_failure


class AgePolicy(SelectionPolicy):
    """Queue every eligible profile without activity after the cutoff.

    Args:
        cutoff: Files modified strictly after this instant count as activity.
        log: Decision log.
        prober: Activity prober (injectable for tests).
    """

    def __init__(
        self,
        cutoff: datetime,
        log: DecisionLog,
        *,
        prober: ActivityProber = has_recent_activity,
    ) -> None:
        super().__init__(log)
        self._cutoff = cutoff
        self._prober = prober

    @property
    def name(self) -> str:
        return "age"

    @property
    def cutoff(self) -> datetime:
        return self._cutoff

    def select(self, profiles: Sequence[ProfileRecord]) -> list[Candidate]:
        queue: list[Candidate] = []
        for profile in profiles:
            active = self._prober(profile.path, self._cutoff, on_error=self._on_probe_error())
            if active:
                self.kept.append(profile.username)
                self._log.keep(profile.username, f"activity since {self._cutoff:%Y-%m-%d}")
                continue
            queue.append(Candidate.for_activity(profile, False))
        return queue


class SpacePolicy(SelectionPolicy):
    """Queue eligible profiles by descending size.

    Sizing walks every file of a profile, so the eligible list is capped
    to ``profile_limit`` entries before sizing rather than after.

    Args:
        log: Decision log.
        profile_limit: Maximum profiles to size (0 = unlimited).
        prober: Size prober (injectable for tests).
    """

    def __init__(
        self,
        log: DecisionLog,
        *,
        profile_limit: int = 0,
        prober: SizeProber = total_size,
    ) -> None:
        super().__init__(log)
        self._profile_limit = profile_limit
        self._prober = prober

    @property
    def name(self) -> str:
        return "space"

    def select(self, profiles: Sequence[ProfileRecord]) -> list[Candidate]:
        if self._profile_limit > 0:
            profiles = profiles[: self._profile_limit]

        candidates: list[Candidate] = []
        for profile in profiles:
            size = self._prober(profile.path, on_error=self._on_probe_error())
            self._log.record(f"Profile {profile.username} uses {format_gb(size)}", logging.DEBUG)
            candidates.append(Candidate.for_size(profile, size))

        # sorted() is stable: equal sizes keep filter order
        return sorted(candidates, key=lambda c: c.size_bytes, reverse=True)


def choose_policy(
    config: RunConfig,
    log: DecisionLog,
    *,
    clock: Clock = utc_now,
    activity_prober: ActivityProber = has_recent_activity,
    size_prober: SizeProber = total_size,
) -> SelectionPolicy:
    """Pick the selection policy for a run.

    The age policy wins whenever a month cutoff is set; a space limit
    then only acts as an early exit of the deletion loop.
    """
    if config.age_mode:
        cutoff = compute_cutoff(config.month_cutoff, clock)
        logger.debug("Age policy cutoff: %s", cutoff.isoformat())
        return AgePolicy(cutoff, log, prober=activity_prober)
    return SpacePolicy(log, profile_limit=config.profile_limit, prober=size_prober)
