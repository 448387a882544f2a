"""Archive-on-delete lifecycle for subscriptions."""
import logging
import math
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Optional

from app.errors import ArchiveInsertError, PartialArchiveError, RecordNotFoundError, RemoteWriteError
from app.services.currency import parse_amount_or_default
from app.store import RecordStore

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 86400
DAYS_PER_MONTH = 30


@dataclass(frozen=True)
class ArchiveFigures:
    duration_days: int
    months: int
    total_spent: Decimal


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; those are stored as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def compute_archive_figures(created_at: datetime, price: Any, now: datetime) -> ArchiveFigures:
    """
    Work out how long a subscription ran and what it cost in total.

    Duration is rounded up to whole days with a floor of one day. Billing
    periods are 30-day months, rounded up, with at least one period charged.
    The total stays in the subscription's own currency.
    """
    elapsed = (_as_utc(now) - _as_utc(created_at)).total_seconds()
    duration_days = max(1, math.ceil(elapsed / SECONDS_PER_DAY))
    months = max(1, math.ceil(duration_days / DAYS_PER_MONTH))
    total_spent = parse_amount_or_default(price) * months
    return ArchiveFigures(duration_days=duration_days, months=months, total_spent=total_spent)


def build_archived_record(subscription, now: datetime) -> dict[str, Any]:
    """Copy a subscription's fields into an archived_subscriptions row."""
    started_at = subscription.created_at or now
    figures = compute_archive_figures(started_at, subscription.price, now)
    return {
        "user_id": subscription.user_id,
        "name": subscription.name,
        "price": parse_amount_or_default(subscription.price),
        "currency": subscription.currency,
        "subscription_email": subscription.subscription_email,
        "subscription_type": subscription.subscription_type,
        "total_spent": figures.total_spent,
        "started_at": started_at,
        "ended_at": now,
        "renewal_date": subscription.renewal_date,
        "duration_days": figures.duration_days,
    }


def archive_subscription(
    store: RecordStore,
    owner_id: int,
    subscription_id: int,
    now: Optional[datetime] = None,
):
    """
    Move an active subscription into the archive.

    Runs as two separate writes. The archived copy is inserted first; the
    active row is deleted only once that insert has succeeded.

    Raises:
        RecordNotFoundError: no such subscription for this owner.
        ArchiveInsertError: the insert failed; nothing changed.
        PartialArchiveError: the insert succeeded but the delete failed, so
            the subscription exists in both tables.
    """
    subscription = store.get("subscriptions", subscription_id, filters={"user_id": owner_id})
    if subscription is None:
        raise RecordNotFoundError("subscriptions", subscription_id)

    now = now or datetime.now(timezone.utc)
    record = build_archived_record(subscription, now)

    try:
        archived = store.insert("archived_subscriptions", record)
    except RemoteWriteError as e:
        logger.error(f"Archive of subscription {subscription_id} aborted, insert failed: {e}")
        raise ArchiveInsertError(subscription_id, e) from e

    try:
        store.delete("subscriptions", subscription_id)
    except RemoteWriteError as e:
        logger.error(
            f"Subscription {subscription_id} archived as {archived.id} "
            f"but could not be deleted: {e}"
        )
        raise PartialArchiveError(subscription_id, archived.id, e) from e

    logger.info(
        f"Archived subscription {subscription_id} as {archived.id} "
        f"({record['duration_days']} days, total {record['total_spent']} {record['currency']})"
    )
    return archived
