"""Summary statistics over active and archived subscriptions."""
import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Iterable, Optional

from app.config import settings
from app.services.currency import RateTable, normalize
from app.services.urgency import is_renewing_soon

logger = logging.getLogger(__name__)

TEMPORARY = "temporary"


@dataclass(frozen=True)
class SubscriptionSummary:
    count: int
    total: Decimal
    temporary_count: int
    renewing_soon_count: int
    currency: str


def _field(record: Any, name: str) -> Any:
    if isinstance(record, dict):
        return record.get(name)
    return getattr(record, name, None)


def _summarize(
    records: Iterable[Any],
    amount_field: str,
    rate_table: RateTable,
    reference_currency: Optional[str],
    today: Optional[date],
    count_renewals: bool,
) -> SubscriptionSummary:
    reference = (reference_currency or settings.reference_currency).upper()
    today = today or date.today()

    count = 0
    temporary_count = 0
    renewing_soon_count = 0
    total = Decimal("0")

    for record in records:
        count += 1
        total += normalize(_field(record, amount_field), _field(record, "currency"), rate_table, reference)

        if _field(record, "subscription_type") == TEMPORARY:
            temporary_count += 1

        if count_renewals:
            renewal_date = _field(record, "renewal_date")
            try:
                if renewal_date is not None and is_renewing_soon(renewal_date, today):
                    renewing_soon_count += 1
            except ValueError:
                logger.warning(f"Skipping unparseable renewal date {renewal_date!r}")

    return SubscriptionSummary(
        count=count,
        total=total,
        temporary_count=temporary_count,
        renewing_soon_count=renewing_soon_count,
        currency=reference,
    )


def summarize_subscriptions(
    subscriptions: Iterable[Any],
    rate_table: RateTable,
    today: Optional[date] = None,
    reference_currency: Optional[str] = None,
) -> SubscriptionSummary:
    """Dashboard totals for active subscriptions; `total` is the summed price."""
    return _summarize(subscriptions, "price", rate_table, reference_currency, today, count_renewals=True)


def summarize_archive(
    archived: Iterable[Any],
    rate_table: RateTable,
    reference_currency: Optional[str] = None,
) -> SubscriptionSummary:
    """All-time totals for archived subscriptions; `total` is the summed total_spent.

    Archived records never count as renewing soon.
    """
    return _summarize(archived, "total_spent", rate_table, reference_currency, None, count_renewals=False)
