from datetime import date, timedelta

import pytest

from workdays import (
    add_working_days,
    count_working_days,
    is_non_working_day,
    next_working_day,
    working_days_between,
)

MONDAY = date(2024, 1, 1)
SUNDAY = date(2024, 1, 7)


def test_only_sunday_is_off():
    week = [MONDAY + timedelta(days=i) for i in range(7)]
    assert [is_non_working_day(d) for d in week] == [False] * 6 + [True]


@pytest.mark.parametrize(
    "start, days, expected",
    [
        (MONDAY, 1, date(2024, 1, 2)),
        (MONDAY, 3, date(2024, 1, 4)),
        (date(2024, 1, 5), 2, date(2024, 1, 8)),  # Fri + 2 skips Sunday
        (date(2024, 1, 6), 1, date(2024, 1, 8)),  # Sat + 1 lands on Monday
        (SUNDAY, 1, date(2024, 1, 8)),
        (MONDAY, 6, date(2024, 1, 8)),
    ],
)
def test_add_working_days(start, days, expected):
    assert add_working_days(start, days) == expected


@pytest.mark.parametrize("days", [0, -1, -10])
def test_add_non_positive_days_does_not_advance(days):
    assert add_working_days(SUNDAY, days) == SUNDAY
    assert add_working_days(MONDAY, days) == MONDAY


def test_add_working_days_never_lands_on_sunday_and_counts_back():
    for offset in range(14):
        start = MONDAY + timedelta(days=offset)
        for n in range(1, 21):
            result = add_working_days(start, n)
            assert not is_non_working_day(result)
            assert count_working_days(start + timedelta(days=1), result) == n


@pytest.mark.parametrize(
    "start, end, expected",
    [
        (MONDAY, MONDAY, 1),
        (SUNDAY, SUNDAY, 0),
        (MONDAY, SUNDAY, 6),
        (MONDAY, date(2024, 1, 14), 12),
        (date(2024, 1, 6), date(2024, 1, 8), 2),
        (date(2024, 1, 8), MONDAY, 0),
    ],
)
def test_count_working_days(start, end, expected):
    assert count_working_days(start, end) == expected


def test_count_matches_day_by_day_walk():
    for offset in range(7):
        start = MONDAY + timedelta(days=offset)
        for span in range(40):
            end = start + timedelta(days=span)
            assert count_working_days(start, end) == len(list(working_days_between(start, end)))


def test_next_working_day():
    assert next_working_day(SUNDAY) == date(2024, 1, 8)
    assert next_working_day(MONDAY) == MONDAY
