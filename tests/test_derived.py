"""Tests for derived-field calculations."""

from datetime import date

import pytest

from cattle_keeper.services.derived import (
    coerce_amount,
    format_age,
    months_between,
    total_daily,
)


@pytest.mark.parametrize(
    ("date_of_birth", "today", "expected"),
    [
        (date(2023, 6, 15), date(2024, 5, 1), "11 months"),
        (date(2023, 5, 20), date(2024, 5, 1), "1 year"),
        (date(2023, 4, 2), date(2024, 5, 1), "1 year, 1 month"),
        (date(2021, 2, 10), date(2024, 5, 1), "3 years, 3 months"),
        (date(2024, 4, 30), date(2024, 5, 1), "1 month"),
        (date(2024, 5, 1), date(2024, 5, 1), "0 months"),
        (date(2022, 5, 1), date(2024, 5, 1), "2 years"),
    ],
)
def test_format_age(date_of_birth: date, today: date, expected: str) -> None:
    assert format_age(date_of_birth, today) == expected


def test_months_between_ignores_day_of_month() -> None:
    assert months_between(date(2024, 1, 31), date(2024, 2, 1)) == 1


def test_future_birth_date_reports_zero_months() -> None:
    assert format_age(date(2025, 1, 1), date(2024, 5, 1)) == "0 months"


@pytest.mark.parametrize(
    ("morning", "evening"),
    [(0.0, 0.0), (3.5, 4.0), (12.25, 0.75), (0.1, 0.2)],
)
def test_total_daily_is_sum(morning: float, evening: float) -> None:
    assert total_daily(morning, evening) == morning + evening


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (None, 0.0),
        ("", 0.0),
        ("abc", 0.0),
        ("3.5", 3.5),
        (4, 4.0),
        (True, 0.0),
        (float("nan"), 0.0),
        (float("inf"), 0.0),
        (-2, 0.0),
    ],
)
def test_coerce_amount(raw: object, expected: float) -> None:
    assert coerce_amount(raw) == expected
