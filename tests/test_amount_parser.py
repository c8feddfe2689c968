"""Tests for locale-aware amount parsing."""

from decimal import Decimal

import pytest

from ledgerimport.domain.errors import InvalidNumberError, ValidationError
from ledgerimport.utils.amount_parser import format_amount, number_separators, parse_amount


class TestNumberSeparators:
    def test_common_formats(self):
        assert number_separators("1,234.56") == (",", ".")
        assert number_separators("1.234,56") == (".", ",")
        assert number_separators("1234.56") == ("", ".")
        assert number_separators("1 234,56") == (" ", ",")

    @pytest.mark.parametrize("number_format", ["", "1234", "1.234.56", "abc"])
    def test_unknown_format_raises(self, number_format):
        with pytest.raises(ValidationError, match="Unknown number format"):
            number_separators(number_format)


class TestParseAmount:
    def test_galicia_style(self):
        assert parse_amount("1.465.950,00", "1.234,56") == Decimal("1465950.00")
        assert parse_amount("-13.900,00", "1.234,56") == Decimal("-13900.00")
        assert parse_amount("287.756,65", "1.234,56") == Decimal("287756.65")
        assert parse_amount("0,00", "1.234,56") == Decimal("0")

    def test_without_thousands_separator(self):
        """Balances in Galicia exports omit the thousands separator."""
        assert parse_amount("20440,28", "1.234,56") == Decimal("20440.28")

    def test_us_style(self):
        assert parse_amount("1,234.56") == Decimal("1234.56")
        assert parse_amount("-2,500.00") == Decimal("-2500.00")
        assert parse_amount("+3.50") == Decimal("3.50")
        assert parse_amount(".5") == Decimal("0.5")

    def test_space_thousands_accepts_non_breaking_spaces(self):
        assert parse_amount("1\u00a0234,56", "1 234,56") == Decimal("1234.56")
        assert parse_amount("1\u202f234,56", "1 234,56") == Decimal("1234.56")

    def test_exact_decimal(self):
        """Amounts keep every digit (no float rounding)."""
        assert parse_amount("0,10", "1.234,56") + parse_amount("0,20", "1.234,56") == Decimal("0.30")

    @pytest.mark.parametrize("value", ["", "   ", None])
    def test_blank_is_zero(self, value):
        assert parse_amount(value, "1.234,56") == Decimal("0")

    @pytest.mark.parametrize("value", ["abc", "12,34,56", "1.2.3,4,5", "--5", "5-"])
    def test_invalid_raises(self, value):
        with pytest.raises(InvalidNumberError):
            parse_amount(value, "1.234,56")

    def test_invalid_number_is_a_validation_error(self):
        with pytest.raises(ValidationError):
            parse_amount("twelve")


class TestFormatAmount:
    def test_plain_exact_string(self):
        assert format_amount(Decimal("13900.00")) == "13900.00"
        assert format_amount(Decimal("-287756.65")) == "-287756.65"

    def test_no_negative_zero(self):
        assert format_amount(Decimal("-0")) == "0"
        assert format_amount(Decimal("-0.00")) == "0.00"
