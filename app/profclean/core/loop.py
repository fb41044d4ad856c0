"""Deletion loop.

Walks the ordered candidate queue one profile at a time, deleting each
through the profile directory and re-reading free space after every
deletion so the loop can stop as soon as the space limit is satisfied.
"""

import logging
from collections.abc import Sequence

from profclean.core.decision_log import DecisionLog
from profclean.core.diskspace import FreeSpaceReader
from profclean.core.errors import DeletionError, FreeSpaceError
from profclean.models.config import RunConfig
from profclean.models.profile import Candidate
from profclean.models.report import (
    DeletionReport,
    DeletionResult,
    DeletionStatus,
    FreeSpaceReading,
    RunOutcome,
)
from profclean.probes.size import format_gb
from profclean.profiles.base import ProfileDirectory

logger = logging.getLogger(__name__)


class DeletionLoop:
    """Sequentially deletes candidates until a stopping condition holds.

    Stopping conditions, checked after every candidate:
    1. free space >= space limit (when a limit is set)
    2. processed count == profile limit (when a limit is set)

    A space limit that is still unmet when the loop ends is reported as
    THRESHOLD_NOT_REACHED, whichever way the loop ended. With a space
    limit set, an unreadable volume stops the loop: before the first
    deletion it raises FreeSpaceError, afterwards the run ends with the
    final free space unknown.

    Args:
        directory: Profile directory that performs deletions.
        free_space: Reader for fresh free-space readings.
        log: Decision log.
    """

    def __init__(
        self,
        directory: ProfileDirectory,
        free_space: FreeSpaceReader,
        log: DecisionLog,
    ) -> None:
        self._directory = directory
        self._free_space = free_space
        self._log = log

    def run(self, candidates: Sequence[Candidate], config: RunConfig) -> DeletionReport:
        """Process the candidate queue in order.

        Args:
            candidates: Ordered deletion queue from a selection policy.
            config: Run configuration.

        Returns:
            DeletionReport describing every processed candidate.

        Raises:
            FreeSpaceError: If a space limit is set and the initial
                reading fails.
            KeyboardInterrupt: Re-raised after logging when interrupted
                between candidates.
        """
        report = DeletionReport(outcome=RunOutcome.EXHAUSTED, dry_run=config.dry_run)
        report.initial_free = self._read_free_space("Free space before deletion")
        report.final_free = report.initial_free

        if config.has_space_limit and report.initial_free is None:
            msg = f"Cannot check the space limit on {self._free_space.volume}, nothing deleted"
            raise FreeSpaceError(msg)

        if self._threshold_met(report.final_free, config):
            return self._finish(report, config, RunOutcome.THRESHOLD_MET)

        limit_hit = False
        try:
            for candidate in candidates:
                report.results.append(self._process(candidate, config))

                report.final_free = self._read_free_space("Free space")
                if config.has_space_limit and report.final_free is None:
                    break

                if self._threshold_met(report.final_free, config):
                    return self._finish(report, config, RunOutcome.THRESHOLD_MET)

                if config.has_profile_limit and report.processed_count >= config.profile_limit:
                    limit_hit = True
                    break
        except KeyboardInterrupt:
            self._log.record(
                f"Interrupted after {report.processed_count} profile(s)", logging.WARNING
            )
            raise

        if config.has_space_limit:
            outcome = RunOutcome.THRESHOLD_NOT_REACHED
        elif limit_hit:
            outcome = RunOutcome.LIMIT_REACHED
        else:
            outcome = RunOutcome.EXHAUSTED
        return self._finish(report, config, outcome)

    def _process(self, candidate: Candidate, config: RunConfig) -> DeletionResult:
        """Delete a single candidate, absorbing per-profile failures."""
        profile = candidate.profile
        size = candidate.known_size
        self._log.delete(profile.username, size, dry_run=config.dry_run)

        if config.dry_run:
            return DeletionResult(
                username=profile.username,
                path=profile.path,
                status=DeletionStatus.DRY_RUN,
                size_bytes=size,
            )

        try:
            status = self._directory.delete_profile(profile)
        except DeletionError as e:
            self._log.deletion_failed(profile.username, e.reason)
            return DeletionResult(
                username=profile.username,
                path=profile.path,
                status=DeletionStatus.FAILED,
                error=e.reason,
                size_bytes=size,
            )

        if status == DeletionStatus.VANISHED:
            self._log.vanished(profile.username)
        else:
            self._log.deleted(profile.username)

        return DeletionResult(
            username=profile.username,
            path=profile.path,
            status=status,
            size_bytes=size,
        )

    def _read_free_space(self, label: str) -> FreeSpaceReading | None:
        """Take a fresh reading, logging it. Returns None if the volume cannot be read."""
        try:
            reading = self._free_space.read()
        except OSError as e:
            self._log.record(
                f"Cannot read free space on {self._free_space.volume}: {e}", logging.ERROR
            )
            return None
        self._log.free_space(reading, label)
        return reading

    @staticmethod
    def _threshold_met(reading: FreeSpaceReading | None, config: RunConfig) -> bool:
        if not config.has_space_limit or reading is None:
            return False
        return reading.free_bytes >= config.space_limit_bytes

    def _finish(
        self,
        report: DeletionReport,
        config: RunConfig,
        outcome: RunOutcome,
    ) -> DeletionReport:
        report.outcome = outcome
        limit = format_gb(config.space_limit_bytes)
        free = format_gb(report.final_free.free_bytes) if report.final_free else "unknown"

        if outcome == RunOutcome.THRESHOLD_MET:
            message = f"Free space {free} meets the limit of {limit}"
        elif outcome == RunOutcome.LIMIT_REACHED:
            message = f"Profile limit of {config.profile_limit} reached"
        elif outcome == RunOutcome.THRESHOLD_NOT_REACHED and report.final_free is None:
            message = f"Threshold not reached: free space unknown, limit is {limit}"
        elif outcome == RunOutcome.THRESHOLD_NOT_REACHED:
            message = f"Threshold not reached: free space {free} is below the limit of {limit}"
        else:
            message = f"All {report.processed_count} queued profile(s) processed"

        self._log.outcome(outcome, message)
        return report
