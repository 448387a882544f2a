"""Tests for display formatting helpers."""

from decimal import Decimal

import pytest

from app.utils.formatting import format_currency, format_duration, format_subscription_type


class TestFormatDuration:
    @pytest.mark.parametrize(
        "days,expected",
        [
            (1, "1 day"),
            (2, "2 days"),
            (29, "29 days"),
            (30, "1 month"),
            (31, "1 month, 1 day"),
            (45, "1 month, 15 days"),
            (60, "2 months"),
            (365, "12 months, 5 days"),
        ],
    )
    def test_durations(self, days, expected):
        assert format_duration(days) == expected


class TestFormatCurrency:
    def test_grouping_and_decimals(self):
        assert format_currency(1234.5, "NOK") == "NOK 1,234.50"
        assert format_currency(Decimal("1000000"), "USD") == "USD 1,000,000.00"

    def test_rounds_to_cents(self):
        assert format_currency(Decimal("2.005"), "EUR") == "EUR 2.01"

    def test_malformed_amount(self):
        assert format_currency("abc", "USD") == "USD 0.00"
        assert format_currency(None, "NOK") == "NOK 0.00"


class TestFormatSubscriptionType:
    def test_labels(self):
        assert format_subscription_type("temporary") == "Temp"
        assert format_subscription_type("normal") == "Normal"
