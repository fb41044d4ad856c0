"""Cleanup engine.

Drives one run through its states::

    IDLE -> FILTERING -> SCORING -> DELETING -> FINISHED
      \\-> FAILED (enumeration failure, unreadable free space)

Configuration errors are raised while building the RunConfig, before the
engine is ever started.
"""

import logging

from profclean.core.clock import Clock, utc_now
from profclean.core.decision_log import DecisionLog
from profclean.core.diskspace import FreeSpaceReader
from profclean.core.errors import EnumerationError, FreeSpaceError
from profclean.core.loop import DeletionLoop
from profclean.core.policy import ActivityProber, SizeProber, choose_policy
from profclean.models.config import RunConfig
from profclean.models.profile import ProfileRecord
from profclean.models.report import DeletionReport, FreeSpaceReading, RunOutcome, RunState
from profclean.probes.activity import has_recent_activity
from profclean.probes.size import format_gb, total_size
from profclean.profiles.base import ProfileDirectory
from profclean.profiles.filter import ExclusionReason, eligible

logger = logging.getLogger(__name__)


class CleanupEngine:
    """Selects stale profiles and deletes them under a RunConfig.

    Args:
        directory: OS profile directory to list and delete profiles with.
        free_space: Reader for the target volume.
        log: Decision log receiving every decision.
        clock: Source of "now" for the age cutoff.
        activity_prober: Activity prober (injectable for tests).
        size_prober: Size prober (injectable for tests).
    """

    def __init__(
        self,
        directory: ProfileDirectory,
        free_space: FreeSpaceReader,
        log: DecisionLog,
        *,
        clock: Clock = utc_now,
        activity_prober: ActivityProber = has_recent_activity,
        size_prober: SizeProber = total_size,
    ) -> None:
        self._directory = directory
        self._free_space = free_space
        self._log = log
        self._clock = clock
        self._activity_prober = activity_prober
        self._size_prober = size_prober
        self._state = RunState.IDLE

    @property
    def state(self) -> RunState:
        return self._state

    def _enter(self, state: RunState) -> None:
        self._state = state
        self._log.transition(state)

    def run(self, config: RunConfig) -> DeletionReport:
        """Run one cleanup pass.

        Args:
            config: Validated run configuration.

        Returns:
            DeletionReport with the terminal outcome.

        Raises:
            EnumerationError: If the profile directory cannot be listed.
            FreeSpaceError: If a space-limited run cannot read free space.
        """
        self._state = RunState.IDLE
        self._log_config(config)

        if config.space_mode:
            reading = self._space_already_free(config)
            if reading is not None:
                self._enter(RunState.FINISHED)
                return DeletionReport(
                    outcome=RunOutcome.NOTHING_TO_DO,
                    initial_free=reading,
                    final_free=reading,
                    dry_run=config.dry_run,
                )

        self._enter(RunState.FILTERING)
        try:
            profiles = self._directory.list_profiles()
        except EnumerationError as e:
            self._enter(RunState.FAILED)
            self._log.record(f"Cannot enumerate profiles: {e}", logging.ERROR)
            raise

        self._log.record(f"Found {len(profiles)} profile(s)")
        candidates_in = eligible(profiles, config.whitelist, on_excluded=self._log_excluded)
        self._log.record(f"{len(candidates_in)} profile(s) eligible for deletion")

        self._enter(RunState.SCORING)
        policy = choose_policy(
            config,
            self._log,
            clock=self._clock,
            activity_prober=self._activity_prober,
            size_prober=self._size_prober,
        )
        queue = policy.select(candidates_in)
        self._log.record(f"{len(queue)} profile(s) queued by {policy.name} policy")

        self._enter(RunState.DELETING)
        try:
            report = DeletionLoop(self._directory, self._free_space, self._log).run(queue, config)
        except FreeSpaceError:
            self._enter(RunState.FAILED)
            raise
        report.kept = list(policy.kept)

        self._enter(RunState.FINISHED)
        return report

    def _log_config(self, config: RunConfig) -> None:
        parts = [
            f"months={config.month_cutoff}",
            f"space limit={format_gb(config.space_limit_bytes) if config.has_space_limit else 'off'}",
            f"profile limit={config.profile_limit or 'unlimited'}",
            f"volume={config.volume}",
        ]
        if config.dry_run:
            parts.append("dry-run")
        self._log.record("Starting cleanup: " + ", ".join(parts))
        self._log.record("Whitelist: " + ", ".join(config.whitelist), logging.DEBUG)

    def _space_already_free(self, config: RunConfig) -> FreeSpaceReading | None:
        """Return the current reading if the space limit is already met, else None.

        Raises:
            FreeSpaceError: If the volume cannot be read. An unknown reading
                never counts as below the limit.
        """
        try:
            reading = self._free_space.read()
        except OSError as e:
            msg = f"Cannot read free space on {config.volume}: {e}"
            self._enter(RunState.FAILED)
            self._log.record(msg, logging.ERROR)
            raise FreeSpaceError(msg) from e

        self._log.free_space(reading)
        if reading.free_bytes < config.space_limit_bytes:
            return None

        self._log.outcome(
            RunOutcome.NOTHING_TO_DO,
            f"Free space {format_gb(reading.free_bytes)} already meets the limit of "
            f"{format_gb(config.space_limit_bytes)}, nothing to do",
        )
        return reading

    def _log_excluded(self, profile: ProfileRecord, reason: ExclusionReason) -> None:
        self._log.skip(profile.username, reason.value)
