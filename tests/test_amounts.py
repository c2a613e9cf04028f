"""Tests for provider amount formatting and currency checks."""

from decimal import Decimal

import pytest

from app.gateways.amounts import format_amount, validate_currency
from app.gateways.errors import InvalidPaymentError


class TestFormatAmount:
    def test_two_decimals(self):
        assert format_amount(Decimal("12.99")) == "12.99"
        assert format_amount(Decimal("12.5")) == "12.50"
        assert format_amount(Decimal("100")) == "100.00"

    def test_rounds_up_to_next_unit(self):
        assert format_amount(Decimal("19.999")) == "20.00"

    def test_halves_round_away_from_zero(self):
        assert format_amount(Decimal("0.005")) == "0.01"
        assert format_amount(Decimal("2.675")) == "2.68"
        assert format_amount(Decimal("2.665")) == "2.67"

    def test_rounds_down_below_half(self):
        assert format_amount(Decimal("10.004")) == "10.00"

    def test_float_input_uses_its_repr(self):
        assert format_amount(2.675) == "2.68"
        assert format_amount(12) == "12.00"

    def test_no_grouping_separator(self):
        assert format_amount(Decimal("1234567.891")) == "1234567.89"

    def test_zero(self):
        assert format_amount(Decimal("0")) == "0.00"
        assert format_amount(Decimal("-0")) == "0.00"

    def test_large_exponent_is_not_scientific(self):
        assert format_amount(Decimal("1E+3")) == "1000.00"

    @pytest.mark.parametrize("bad", [Decimal("-0.01"), Decimal("NaN"), Decimal("Infinity"), "abc", None])
    def test_invalid_totals(self, bad):
        with pytest.raises(InvalidPaymentError):
            format_amount(bad)


class TestValidateCurrency:
    @pytest.mark.parametrize("code", ["EUR", "USD", "GBP", "CHF"])
    def test_valid(self, code):
        assert validate_currency(code) == code

    @pytest.mark.parametrize("code", ["eur", "EURO", "E1R", "", None, 978])
    def test_invalid(self, code):
        with pytest.raises(InvalidPaymentError):
            validate_currency(code)
