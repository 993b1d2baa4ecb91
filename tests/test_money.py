"""
Tests for amount parsing.
"""

from decimal import Decimal

import pytest

from core.errors import ValidationError
from core.money import parse_amount, to_money, to_storage


class TestParseAmount:

    @pytest.mark.parametrize("raw, expected", [
        ("12.50", Decimal("12.50")),
        (" 7 ", Decimal("7")),
        (300, Decimal("300")),
        (0.1, Decimal("0.1")),
        (Decimal("1000.01"), Decimal("1000.01")),
        ("-5", Decimal("-5")),
    ])
    def test_parses_numeric_input(self, raw, expected):
        assert parse_amount(raw) == expected

    @pytest.mark.parametrize("raw", ["", "   ", "abc", "12,50", "NaN", "Infinity", None, True])
    def test_rejects_invalid_input(self, raw):
        with pytest.raises(ValidationError):
            parse_amount(raw)

    def test_validation_error_is_value_error(self):
        """Pydantic turns ValueError subclasses into 422 responses."""
        assert issubclass(ValidationError, ValueError)


class TestMoneyFormatting:

    def test_to_money_rounds_half_up_to_cents(self):
        assert to_money("10.005") == Decimal("10.01")
        assert to_money(3) == Decimal("3.00")

    def test_to_storage_is_fixed_point_text(self):
        assert to_storage(Decimal("1")) == "1.00"
        assert to_storage(Decimal("99.999")) == "100.00"
