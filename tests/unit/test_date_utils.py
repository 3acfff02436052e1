"""Unit tests for calendar arithmetic"""

import pytest
from datetime import date

from cashflow_compass.utils.date_utils import (
    add_months,
    days_in_month,
    is_last_day_of_month,
    month_key,
    month_label,
    months_between,
    start_of_month,
    try_add_days,
    try_add_months,
)


def test_add_months_clamps_to_shorter_month():
    assert add_months(date(2026, 1, 31), 1) == date(2026, 2, 28)
    assert add_months(date(2028, 1, 31), 1) == date(2028, 2, 29)
    assert add_months(date(2026, 3, 31), 1) == date(2026, 4, 30)


def test_months_between_counts_whole_months():
    assert months_between(date(2026, 1, 15), date(2026, 2, 15)) == 1
    assert months_between(date(2026, 1, 15), date(2026, 2, 14)) == 0
    assert months_between(date(2026, 1, 15), date(2027, 1, 15)) == 12


def test_months_between_end_of_month_counts_as_complete():
    """Jan 31 -> Feb 28 is one month even though Feb has no 31st"""
    assert months_between(date(2026, 1, 31), date(2026, 2, 28)) == 1
    assert months_between(date(2026, 1, 31), date(2026, 2, 27)) == 0


def test_months_between_negative_when_reversed():
    assert months_between(date(2026, 3, 10), date(2026, 1, 10)) == -2
    assert months_between(date(2026, 3, 10), date(2026, 3, 10)) == 0


@pytest.mark.parametrize(
    "start",
    [date(2026, 1, 31), date(2026, 1, 30), date(2026, 2, 28), date(2028, 2, 29), date(2026, 9, 10)],
)
def test_months_between_inverts_add_months(start: date):
    for n in range(0, 100):
        assert months_between(start, add_months(start, n)) == n


def test_month_helpers():
    day = date(2026, 9, 17)
    assert start_of_month(day) == date(2026, 9, 1)
    assert days_in_month(day) == 30
    assert is_last_day_of_month(date(2026, 9, 30))
    assert not is_last_day_of_month(day)
    assert month_key(day) == "2026-09"
    assert month_label(day) == "September 2026"


def test_try_add_stops_at_the_end_of_the_calendar():
    assert try_add_days(date(9999, 12, 30), 1) == date.max
    assert try_add_days(date(9999, 12, 30), 2) is None
    assert try_add_months(date(9999, 11, 30), 1) == date(9999, 12, 30)
    assert try_add_months(date(9999, 11, 30), 2) is None
    assert try_add_months(date(2026, 9, 10), 1_000_000) is None
