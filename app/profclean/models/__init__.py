"""Data models for profclean.

This module exports the core data structures used throughout the application.
"""

from profclean.models.config import BYTES_PER_GB, RunConfig, WhitelistSet
from profclean.models.profile import Candidate, MetricKind, ProfileRecord
from profclean.models.report import (
    DeletionReport,
    DeletionResult,
    DeletionStatus,
    FreeSpaceReading,
    RunOutcome,
    RunState,
)

__all__ = [
    "BYTES_PER_GB",
    "Candidate",
    "DeletionReport",
    "DeletionResult",
    "DeletionStatus",
    "FreeSpaceReading",
    "MetricKind",
    "ProfileRecord",
    "RunConfig",
    "RunOutcome",
    "RunState",
    "WhitelistSet",
]
