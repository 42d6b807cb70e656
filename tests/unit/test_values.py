"""Tests for monetary rounding helpers."""

from decimal import Decimal

import pytest

from payroll_kernel.domain.values import ZERO, percent_of, round_money, sum_amounts


class TestRoundMoney:

    @pytest.mark.parametrize("value, expected", [
        ("2.345", "2.35"),
        ("2.344", "2.34"),
        ("-2.345", "-2.35"),
        ("100", "100.00"),
        ("0.005", "0.01"),
    ])
    def test_half_up(self, value, expected):
        assert round_money(Decimal(value)) == Decimal(expected)

    def test_accepts_int(self):
        assert round_money(5) == Decimal("5.00")


class TestPercentOf:

    def test_full_precision(self):
        assert percent_of(Decimal("333"), Decimal("10")) == Decimal("33.3")
        assert percent_of(Decimal("1"), Decimal("0.5")) == Decimal("0.005")


class TestSumAmounts:

    def test_empty_is_zero(self):
        assert sum_amounts([]) == ZERO

    def test_exact(self):
        assert sum_amounts([Decimal("0.10")] * 3) == Decimal("0.30")
