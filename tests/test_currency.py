"""Unit tests for currency, quantity and date parsing."""

import math

import pandas as pd
import pytest

from strategy_ledger.parsers.currency import parse_mixed_date, parse_quantity, sanitize_currency


class TestSanitizeCurrency:
    """Tests for broker currency strings."""

    def test_dollar_and_thousands_separator(self):
        assert sanitize_currency("$1,234.56") == 1234.56

    def test_accounting_negative(self):
        assert sanitize_currency("($45.67)") == -45.67

    def test_parentheses_override_embedded_minus(self):
        assert sanitize_currency("(-$45.67)") == -45.67

    def test_plain_negative(self):
        assert sanitize_currency("-12.5") == -12.5

    @pytest.mark.parametrize("raw", ["", "   ", None])
    def test_absent_is_zero(self, raw):
        assert sanitize_currency(raw) == 0

    @pytest.mark.parametrize("raw", ["N/A", "--", "$", "."])
    def test_unparsable_is_zero(self, raw):
        assert sanitize_currency(raw) == 0

    def test_leading_number_wins(self):
        """Only the leading numeric prefix is parsed."""
        assert sanitize_currency("1.2.3") == 1.2
        assert sanitize_currency("5-3") == 5

    def test_huge_value_is_finite(self):
        assert sanitize_currency("9" * 400) == 0
        assert math.isfinite(sanitize_currency("9" * 400))

    def test_accepts_numbers(self):
        assert sanitize_currency(12.5) == 12.5


class TestParseQuantity:
    def test_thousands_separator(self):
        assert parse_quantity("1,000") == 1000

    def test_default_zero(self):
        assert parse_quantity(None) == 0
        assert parse_quantity("") == 0
        assert parse_quantity("abc") == 0

    def test_negative(self):
        assert parse_quantity("-3") == -3


class TestParseMixedDate:
    def test_us_date(self):
        assert parse_mixed_date("04/23/2023") == pd.Timestamp("2023-04-23", tz="UTC")

    def test_ib_timestamp(self):
        assert parse_mixed_date("2023-04-23, 14:30:00") == pd.Timestamp("2023-04-23 14:30:00", tz="UTC")

    def test_iso_with_offset_is_converted(self):
        assert parse_mixed_date("2024-12-20T09:30:00-05:00") == pd.Timestamp("2024-12-20 14:30:00", tz="UTC")

    def test_garbage_is_nat(self):
        assert pd.isna(parse_mixed_date("not-a-date"))
