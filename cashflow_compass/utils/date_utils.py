"""Date manipulation utilities"""

import calendar
from datetime import date, timedelta
from typing import Optional

from dateutil.relativedelta import relativedelta


def add_days(from_date: date, days: int) -> date:
    return from_date + timedelta(days=days)


def add_months(from_date: date, months: int) -> date:
    """Add calendar months, clamping to the last day of shorter months (Jan 31 + 1 -> Feb 28)"""
    return from_date + relativedelta(months=months)


def try_add_days(from_date: date, days: int) -> Optional[date]:
    """add_days, or None when the result falls outside the calendar (past date.max)"""
    try:
        return add_days(from_date, days)
    except (OverflowError, ValueError):
        return None


def try_add_months(from_date: date, months: int) -> Optional[date]:
    try:
        return add_months(from_date, months)
    except (OverflowError, ValueError):
        return None


def start_of_month(value: date) -> date:
    return value.replace(day=1)


def days_in_month(value: date) -> int:
    return calendar.monthrange(value.year, value.month)[1]


def is_last_day_of_month(value: date) -> bool:
    return value.day == days_in_month(value)


def months_between(start: date, end: date) -> int:
    """
    Whole calendar months from start to end (negative when end is earlier).

    A month counts as complete when end reaches start's day of month, or when end
    is the last day of its month (Jan 31 -> Feb 28 is one month). This keeps
    months_between(d, add_months(d, n)) == n for every d and n.
    """
    if end < start:
        return -months_between(end, start)

    months = (end.year - start.year) * 12 + (end.month - start.month)
    if end.day < start.day and not is_last_day_of_month(end):
        months -= 1
    return months


def month_key(value: date) -> str:
    return f"{value.year:04d}-{value.month:02d}"


def month_label(value: date) -> str:
    return f"{calendar.month_name[value.month]} {value.year}"
