"""Clock and cutoff computation."""

import calendar
from collections.abc import Callable
from datetime import UTC, datetime

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Return the current time as a timezone-aware UTC datetime."""
    return datetime.now(UTC)


def subtract_months(moment: datetime, months: int) -> datetime:
    """Go back a number of calendar months.

    The day is clamped to the last day of the target month, so
    31 March minus one month is 28 or 29 February.

    Args:
        moment: Starting instant.
        months: Number of months to go back (>= 0).

    Returns:
        The shifted instant, same time of day and timezone.

    Raises:
        ValueError: If months is negative.
    """
    if months < 0:
        msg = f"Months must be >= 0, got {months}"
        raise ValueError(msg)
    index = moment.year * 12 + (moment.month - 1) - months
    year, month = divmod(index, 12)
    month += 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def compute_cutoff(months: int, clock: Clock = utc_now) -> datetime:
    """Return the cutoff instant ``months`` months before now."""
    return subtract_months(clock(), months)
