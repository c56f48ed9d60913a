from __future__ import annotations

from decimal import Decimal
from fractions import Fraction

import pytest

from models.records import InvalidReading, NumericReading, parse_reading


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (55, 55.0),
        (12.5, 12.5),
        ("40", 40.0),
        ("  73.25 ", 73.25),
        ("-3", -3.0),
        (Decimal("5"), 5.0),
        (Decimal("12.5"), 12.5),
        (Fraction(1, 4), 0.25),
    ],
)
def test_numeric_values_parse(raw, expected) -> None:
    assert parse_reading(raw) == NumericReading(expected)


@pytest.mark.parametrize(
    "raw",
    [
        None,
        "",
        "   ",
        "abc",
        "12%",
        "1_0",
        "5_0.5",
        "nan",
        "inf",
        float("nan"),
        float("inf"),
        Decimal("NaN"),
        Decimal("sNaN"),
        True,
        [],
        {},
        10**400,
    ],
)
def test_invalid_values_are_tagged_invalid(raw) -> None:
    reading = parse_reading(raw)

    assert isinstance(reading, InvalidReading)
