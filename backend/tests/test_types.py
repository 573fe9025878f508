"""
Tests: money helpers shared across the engine.

Run with:
    pytest backend/tests/test_types.py -v
"""

from decimal import Decimal

import pytest

from app.services.budget.errors import InvalidInputError
from app.services.budget.types import money_float, multiply, to_money


class TestToMoney:
    def test_float_keeps_cents(self):
        assert to_money(0.1) == Decimal("0.10")
        assert to_money(2.675) == Decimal("2.68")

    def test_half_up(self):
        assert to_money("10.005") == Decimal("10.01")

    @pytest.mark.parametrize("value", [float("inf"), float("-inf"), float("nan"), "Infinity", Decimal("NaN")])
    def test_non_finite_rejected(self, value):
        with pytest.raises(InvalidInputError):
            to_money(value)


class TestMultiply:
    def test_rounds_once(self):
        assert multiply(Decimal("1000"), 1.15, 1.3) == Decimal("1495.00")

    @pytest.mark.parametrize("multiplier", [float("inf"), float("nan")])
    def test_non_finite_multiplier_rejected(self, multiplier):
        with pytest.raises(InvalidInputError):
            multiply(Decimal("1000"), multiplier)

    def test_non_finite_amount_rejected(self):
        with pytest.raises(InvalidInputError):
            multiply(Decimal("Infinity"), 0.0)

    def test_money_float(self):
        assert money_float(Decimal("12.345")) == 12.35
