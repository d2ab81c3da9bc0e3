"""Small helpers shared by the analytics functions."""

import math
from datetime import date, datetime


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves rounding up (2.5 -> 3)."""
    return int(math.floor(value + 0.5))


def percentage(part: int, whole: int, empty: int = 0) -> int:
    """Rounded percentage of part in whole, or ``empty`` when whole is 0."""
    if whole == 0:
        return empty
    return round_half_up(part / whole * 100)


def as_date(value: date) -> date:
    """Strip the time of day from a datetime."""
    if isinstance(value, datetime):
        return value.date()
    return value


def short_date(value: date) -> str:
    """Chart label such as 'Oct 3'."""
    return f"{value:%b} {value.day}"
