"""Whole-unit currency helpers.

Salaries are integers; percentages are fractions. Products are computed in
Decimal and rounded half-up so 10_000_000 * 1.15 is 11_500_000, not
11_499_999.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Union

Number = Union[int, float, Decimal]

ONE = Decimal("1")


def to_decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if value is None:
        return Decimal("0")
    return Decimal(str(value))


def to_units(value: Number) -> int:
    """Round to the nearest whole currency unit, halves away from zero."""
    return int(to_decimal(value).quantize(ONE, rounding=ROUND_HALF_UP))


def scale(amount: Number, factor: Number) -> int:
    return to_units(to_decimal(amount) * to_decimal(factor))


def escalate(amount: Number, rate: Number, years: int = 1) -> int:
    """Apply a compounding raise ``years`` times, rounding once at the end."""
    factor = (ONE + to_decimal(rate)) ** years
    return to_units(to_decimal(amount) * factor)


def mean_units(values: Iterable[int]) -> int:
    items = list(values)
    if not items:
        return 0
    return to_units(Decimal(sum(items)) / Decimal(len(items)))
