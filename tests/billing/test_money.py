"""Tests for billing/money.py - Decimal money helpers."""

from decimal import Decimal

import pytest

from billing.money import format_currency, round2, to_decimal


class TestToDecimal:
    """Tests for to_decimal()."""

    def test_float_goes_through_repr(self):
        """0.1 must not turn into 0.1000000000000000055511151231257827."""
        assert to_decimal(0.1) == Decimal("0.1")

    def test_accepts_strings_and_ints(self):
        assert to_decimal("12.345") == Decimal("12.345")
        assert to_decimal(7) == Decimal("7")

    @pytest.mark.parametrize("bad", ["abc", "", None, True, float("nan"), float("inf"), "Infinity"])
    def test_rejects_non_numbers(self, bad):
        with pytest.raises(ValueError, match="Not a monetary value"):
            to_decimal(bad)


class TestRound2:
    """Tests for round2() - half-up to cents."""

    @pytest.mark.parametrize("value,expected", [
        ("1.005", "1.01"),
        ("1.004", "1.00"),
        ("2.675", "2.68"),
        ("-1.005", "-1.01"),
        ("10", "10.00"),
        (0.125, "0.13"),
    ])
    def test_rounds_half_up(self, value, expected):
        assert round2(value) == Decimal(expected)

    def test_result_has_two_places(self):
        assert round2("3").as_tuple().exponent == -2


class TestFormatCurrency:
    """Tests for format_currency()."""

    def test_formats_with_thousands_separator(self):
        assert format_currency(Decimal("1234.5")) == "$1,234.50"

    def test_formats_negative(self):
        assert format_currency("-5") == "-$5.00"

    def test_custom_symbol(self):
        assert format_currency("25.5", symbol="€") == "€25.50"
