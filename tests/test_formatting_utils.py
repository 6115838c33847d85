"""
Tests for number and currency formatting.
"""

from decimal import Decimal

from apps.core.formatting_utils import (
    format_currency,
    format_number,
    format_percentage,
    get_default_currency,
)


class TestFormatNumber:
    def test_grouping(self):
        assert format_number(Decimal("1234567.891"), decimal_places=2) == "1,234,567.89"

    def test_without_grouping(self):
        assert format_number(1234, use_grouping=False) == "1234"

    def test_rounds_half_up(self):
        assert format_number(Decimal("2.675"), decimal_places=2) == "2.68"
        assert format_number(Decimal("0.125"), decimal_places=2) == "0.13"

    def test_float_input_uses_string_value(self):
        assert format_number(0.1, decimal_places=2) == "0.10"


class TestFormatCurrency:
    def test_peso_symbol(self):
        assert format_currency(Decimal("1234.5"), "PHP") == "₱1,234.50"

    def test_negative_amount(self):
        assert format_currency(Decimal("-21.43"), "PHP") == "-₱21.43"

    def test_currency_code(self):
        assert format_currency(350, "PHP", use_symbol=False) == "PHP 350.00"

    def test_unknown_currency_uses_code(self):
        assert format_currency(Decimal("5"), "JPY") == "JPY 5.00"

    def test_default_currency_from_settings(self, settings):
        settings.POS_PRICING = {**settings.POS_PRICING, "CURRENCY": "USD"}

        assert get_default_currency() == "USD"
        assert format_currency(Decimal("10")) == "$10.00"

    def test_zero(self):
        assert format_currency(Decimal("0.00"), "PHP") == "₱0.00"


class TestFormatPercentage:
    def test_whole_percent(self):
        assert format_percentage(Decimal("12.00")) == "12%"

    def test_fractional_percent(self):
        assert format_percentage(Decimal("12.50")) == "12.5%"

    def test_hundred(self):
        assert format_percentage(100) == "100%"
