"""Derived-field calculations."""

import math
from datetime import date

MONTHS_PER_YEAR = 12


def total_daily(morning_amount: float, evening_amount: float) -> float:
    """Return the day's total yield."""
    return morning_amount + evening_amount


def coerce_amount(value: object) -> float:
    """Coerce a caller-supplied yield to a non-negative float.

    Missing, non-numeric, non-finite or negative values become 0.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        amount = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(amount) or amount < 0:
        return 0.0
    return amount


def months_between(date_of_birth: date, today: date) -> int:
    """Return whole calendar months elapsed, ignoring the day of month."""
    months = (today.year - date_of_birth.year) * MONTHS_PER_YEAR + (
        today.month - date_of_birth.month
    )
    return max(months, 0)


def format_age(date_of_birth: date, today: date) -> str:
    """Return a display age such as "11 months" or "2 years, 1 month"."""
    total_months = months_between(date_of_birth, today)
    if total_months < MONTHS_PER_YEAR:
        return _count(total_months, "month")
    years, months = divmod(total_months, MONTHS_PER_YEAR)
    label = _count(years, "year")
    if months > 0:
        label = f"{label}, {_count(months, 'month')}"
    return label


def _count(value: int, unit: str) -> str:
    return f"{value} {unit}" if value == 1 else f"{value} {unit}s"
