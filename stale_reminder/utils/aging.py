"""Issue age calculations.

Every age in a run is measured against the same ``now`` instant, which the
caller captures once and passes in explicitly.
"""

import math
from datetime import datetime, timedelta, timezone

ONE_DAY = timedelta(days=1)
SATURDAY = 5


def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC so they compare with aware ones."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def calendar_age(timestamp: datetime, now: datetime) -> int:
    """Whole calendar days between two instants, rounded half up.

    The result does not depend on argument order.
    """
    delta = abs(ensure_utc(now) - ensure_utc(timestamp))
    return math.floor(delta / ONE_DAY + 0.5)


def weekday_age(timestamp: datetime, now: datetime) -> int:
    """Count the Monday-Friday calendar days in ``[timestamp, now]``.

    Both end dates are included, so a Friday timestamp measured on the
    following Monday has an age of 2. A timestamp at or after ``now`` has an
    age of 0.
    """
    timestamp = ensure_utc(timestamp)
    now = ensure_utc(now)
    if timestamp >= now:
        return 0

    workdays = 0
    day = timestamp.date()
    while day <= now.date():
        if day.weekday() < SATURDAY:
            workdays += 1
        day += ONE_DAY
    return workdays


def age(timestamp: datetime, now: datetime, only_weekdays: bool = False) -> int:
    """Age of ``timestamp`` in days under the configured counting mode."""
    if only_weekdays:
        return weekday_age(timestamp, now)
    return calendar_age(timestamp, now)
