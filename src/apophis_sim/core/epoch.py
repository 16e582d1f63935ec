"""
Julian date helpers.

The simulator keeps time as a Julian date (days) plus elapsed seconds; hosts
usually think in calendar datetimes.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from apophis_sim.core.constants import SECONDS_PER_DAY, UNIX_EPOCH_JD

_UNIX_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def datetime_to_julian(when: datetime) -> float:
    """
    Convert a datetime to a Julian date. Naive datetimes are taken as UTC.
    """
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    seconds = (when - _UNIX_EPOCH).total_seconds()
    return seconds / SECONDS_PER_DAY + UNIX_EPOCH_JD


def julian_to_datetime(jd: float) -> datetime:
    """Convert a Julian date to an aware UTC datetime."""
    seconds = (jd - UNIX_EPOCH_JD) * SECONDS_PER_DAY
    return _UNIX_EPOCH + timedelta(seconds=seconds)


def now_julian() -> float:
    return datetime_to_julian(datetime.now(timezone.utc))
