"""
Values -- monetary rounding rules shared by every payroll stage.

All monetary leaf amounts are ``Decimal`` rounded to two places with
ROUND_HALF_UP at the point they are computed, never later.  Totals are sums
of already-rounded leaves, so they are exact and need no further rounding.
"""

from __future__ import annotations

from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal

ZERO = Decimal("0")
HUNDRED = Decimal("100")
CENT = Decimal("0.01")


def round_money(value: Decimal | int) -> Decimal:
    """Round to the cent (ROUND_HALF_UP)."""
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def percent_of(amount: Decimal, rate: Decimal) -> Decimal:
    """``amount × rate / 100`` at full precision (caller rounds)."""
    return amount * rate / HUNDRED


def sum_amounts(amounts: Iterable[Decimal]) -> Decimal:
    """Exact sum; starts from ``Decimal("0")`` so empty input yields zero."""
    total = ZERO
    for amount in amounts:
        total += amount
    return total
