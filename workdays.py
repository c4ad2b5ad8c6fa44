"""
Working-day calendar.

Sunday is the only non-working day ("tanggal merah"). There is no holiday
table and no regional configuration; every schedule computation in the
application goes through the helpers below.
"""

from datetime import date, timedelta
from typing import Iterator

# date.weekday() value for Sunday
OFF_DAY = 6

ONE_DAY = timedelta(days=1)


def is_non_working_day(d: date) -> bool:
    return d.weekday() == OFF_DAY


def next_working_day(d: date) -> date:
    """Return ``d`` if it is a working day, otherwise the next one."""
    while is_non_working_day(d):
        d += ONE_DAY
    return d


def add_working_days(start: date, days: int) -> date:
    """Advance ``days`` working days past ``start``.

    Counting starts strictly after ``start``: each following calendar day is
    counted only if it is a working day, and the last counted day is returned.
    ``days <= 0`` means no advancement and returns ``start`` unchanged.
    """
    result = start
    added = 0
    while added < days:
        result += ONE_DAY
        if not is_non_working_day(result):
            added += 1
    return result


def count_working_days(start: date, end: date) -> int:
    """Inclusive number of working days in ``[start, end]`` (0 if end < start)."""
    if end < start:
        return 0
    total = (end - start).days + 1
    first_off = (OFF_DAY - start.weekday()) % 7
    if first_off >= total:
        return total
    off_days = (total - 1 - first_off) // 7 + 1
    return total - off_days


def working_days_between(start: date, end: date) -> Iterator[date]:
    """Yield the working days in ``[start, end]`` in order."""
    current = start
    while current <= end:
        if not is_non_working_day(current):
            yield current
        current += ONE_DAY
