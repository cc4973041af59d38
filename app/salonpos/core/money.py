"""Decimal money helpers shared by the checkout pricing pipeline.

Amounts are carried at full precision through intermediate arithmetic and only
quantized at the points where a value is finalized (a priced line item, a
discount entry, a totals snapshot).
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

ZERO = Decimal("0.00")
CENT = Decimal("0.01")
UNIT = Decimal("1")
HUNDRED = Decimal("100")


def to_decimal(value: Decimal | int | float | str | None) -> Decimal:
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        # str() keeps the shortest repr, so 0.1 becomes Decimal("0.1") rather than its binary expansion
        return Decimal(str(value))
    return Decimal(value)


def round_money(value: Decimal | int | float | str | None) -> Decimal:
    """Round to two decimal places, half away from zero."""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def round_whole(value: Decimal | int | float | str | None) -> Decimal:
    """Round to a whole currency unit; used for the collectable grand total."""
    return to_decimal(value).quantize(UNIT, rounding=ROUND_HALF_UP).quantize(CENT)


def percent_of(amount: Decimal, rate: Decimal | int | float | str) -> Decimal:
    return amount * to_decimal(rate) / HUNDRED


def money_sum(values: Iterable[Decimal]) -> Decimal:
    return sum((to_decimal(value) for value in values), Decimal("0"))
