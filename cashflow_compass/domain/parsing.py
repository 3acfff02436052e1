"""Lenient coercion of user-entered values - the engine never raises on malformed input"""

import math
from datetime import date, datetime
from typing import Any, Optional

from dateutil import parser as date_parser


def safe_float(value: Any) -> float:
    """
    Parse a user-entered amount, defaulting to 0.0.

    Accepts numbers and strings with spaces (including non-breaking) as thousands
    separators and a comma as decimal separator: "1 200,50" -> 1200.5.
    NaN and infinities also collapse to 0.0.
    """
    if value is None or value == "" or isinstance(value, bool):
        return 0.0

    if isinstance(value, (int, float)):
        number = float(value)
    else:
        cleaned = str(value).replace(" ", "").replace("\u00a0", "").replace(",", ".")
        try:
            number = float(cleaned)
        except ValueError:
            return 0.0

    return number if math.isfinite(number) else 0.0


def safe_int(value: Any) -> Optional[int]:
    """Parse an integer-like value, returning None when absent or unparseable"""
    if value is None or value == "" or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    try:
        return int(float(str(value).strip().replace(",", ".")))
    except (ValueError, OverflowError):
        return None


def parse_date(value: Any, default: date) -> date:
    """Parse a date, datetime or ISO-like string; anything unparseable falls back to default"""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not value or not isinstance(value, str):
        return default
    try:
        return date_parser.isoparse(value).date()
    except (ValueError, OverflowError):
        return default


def round_half_up(value: float, digits: int = 0) -> float:
    """Round half away from zero, matching how balances are displayed (2.5 -> 3, -2.5 -> -3)"""
    factor = 10 ** digits
    scaled = abs(value) * factor
    rounded = math.floor(scaled + 0.5 + 1e-9) / factor
    return math.copysign(rounded, value) if rounded else 0.0


def round_cents(value: float) -> float:
    return round_half_up(value, 2)


def round_units(value: float) -> int:
    return int(round_half_up(value))


def format_currency(amount: Any) -> str:
    """Whole-unit euro display: 1200.4 -> '1,200 €'"""
    return f"{round_units(safe_float(amount)):,} €"
