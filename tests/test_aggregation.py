"""Tests for dashboard and archive aggregation."""

from datetime import date, timedelta
from decimal import Decimal
from types import SimpleNamespace

from app.services.aggregation import summarize_archive, summarize_subscriptions

TODAY = date(2024, 6, 10)
RATES = {"EUR": Decimal("11.5"), "USD": Decimal("10")}


def _sub(price, currency="NOK", kind="normal", days=30):
    return {
        "price": price,
        "currency": currency,
        "subscription_type": kind,
        "renewal_date": TODAY + timedelta(days=days),
    }


class TestSummarizeSubscriptions:
    """Tests for summarize_subscriptions()."""

    def test_empty_collection(self):
        summary = summarize_subscriptions([], RATES, today=TODAY, reference_currency="NOK")
        assert summary.count == 0
        assert summary.total == 0
        assert summary.temporary_count == 0
        assert summary.renewing_soon_count == 0
        assert summary.currency == "NOK"

    def test_normalizes_mixed_currencies(self):
        subscriptions = [_sub("100"), _sub("10", "EUR"), _sub("2.50", "USD")]

        summary = summarize_subscriptions(subscriptions, RATES, today=TODAY, reference_currency="NOK")

        assert summary.count == 3
        assert summary.total == Decimal("240.0")

    def test_counts_temporary(self):
        subscriptions = [_sub(1, kind="temporary"), _sub(1), _sub(1, kind="temporary")]
        summary = summarize_subscriptions(subscriptions, RATES, today=TODAY)
        assert summary.temporary_count == 2

    def test_renewing_soon_uses_five_day_window(self):
        subscriptions = [_sub(1, days=d) for d in (-1, 0, 3, 5, 6, 20)]
        summary = summarize_subscriptions(subscriptions, RATES, today=TODAY)
        assert summary.renewing_soon_count == 3

    def test_malformed_prices_count_as_zero(self):
        subscriptions = [_sub("abc"), _sub(None), _sub(""), _sub("12")]

        summary = summarize_subscriptions(subscriptions, RATES, today=TODAY, reference_currency="NOK")

        assert summary.count == 4
        assert summary.total == Decimal("12")

    def test_unparseable_renewal_date_is_not_soon(self):
        broken = _sub(5)
        broken["renewal_date"] = "not-a-date"
        missing = _sub(5)
        missing["renewal_date"] = None

        summary = summarize_subscriptions([broken, missing], RATES, today=TODAY)

        assert summary.count == 2
        assert summary.renewing_soon_count == 0

    def test_accepts_model_like_objects(self):
        subscriptions = [SimpleNamespace(**_sub(Decimal("9.99"), days=1))]
        summary = summarize_subscriptions(subscriptions, RATES, today=TODAY, reference_currency="NOK")
        assert summary.total == Decimal("9.99")
        assert summary.renewing_soon_count == 1

    def test_unknown_currency_is_not_dropped(self):
        summary = summarize_subscriptions([_sub(10, "XYZ")], {}, today=TODAY, reference_currency="NOK")
        assert summary.count == 1
        assert summary.total > 0


class TestSummarizeArchive:
    """Tests for summarize_archive()."""

    def test_empty_collection(self):
        summary = summarize_archive([], RATES)
        assert (summary.count, summary.total, summary.temporary_count, summary.renewing_soon_count) == (0, 0, 0, 0)

    def test_sums_total_spent(self):
        archived = [
            {"total_spent": "40", "price": "20", "currency": "NOK", "subscription_type": "normal"},
            {"total_spent": "10", "price": "5", "currency": "EUR", "subscription_type": "temporary"},
        ]

        summary = summarize_archive(archived, RATES, reference_currency="NOK")

        assert summary.count == 2
        assert summary.total == Decimal("155.0")
        assert summary.temporary_count == 1

    def test_never_renewing_soon(self):
        archived = [
            {
                "total_spent": "10",
                "currency": "NOK",
                "subscription_type": "normal",
                "renewal_date": date.today(),
            }
        ]
        assert summarize_archive(archived, RATES).renewing_soon_count == 0
