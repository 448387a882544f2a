from datetime import date

from fastapi import APIRouter, Depends, HTTPException, status

from app.dependencies import get_current_owner_id, get_store
from app.errors import ArchiveInsertError, PartialArchiveError, RecordNotFoundError, RemoteWriteError
from app.schemas.archive import ArchivedSubscriptionResponse
from app.schemas.subscription import (
    SubscriptionCreate,
    SubscriptionListResponse,
    SubscriptionResponse,
    SubscriptionStatsResponse,
    SubscriptionUpdate,
)
from app.services.aggregation import summarize_subscriptions
from app.services.archive import archive_subscription
from app.services.currency import load_rate_table
from app.store import RecordStore
from app.utils.formatting import format_currency

router = APIRouter(prefix="/subscriptions", tags=["subscriptions"])


def _get_owned_subscription(store: RecordStore, subscription_id: int, owner_id: int):
    subscription = store.get("subscriptions", subscription_id, filters={"user_id": owner_id})
    if not subscription:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Subscription not found",
        )
    return subscription


def _write_failed(e: RemoteWriteError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_502_BAD_GATEWAY,
        detail=f"Could not save changes: {e.detail}",
    )


@router.post("", response_model=SubscriptionResponse, status_code=status.HTTP_201_CREATED)
async def create_subscription(
    subscription_data: SubscriptionCreate,
    store: RecordStore = Depends(get_store),
    owner_id: int = Depends(get_current_owner_id),
):
    """Create a new subscription for the authenticated user."""
    try:
        subscription = store.insert(
            "subscriptions",
            {
                "user_id": owner_id,
                "name": subscription_data.name,
                "price": subscription_data.price,
                "currency": subscription_data.currency.value,
                "renewal_date": subscription_data.renewal_date,
                "subscription_email": subscription_data.subscription_email,
                "subscription_type": subscription_data.subscription_type.value,
            },
        )
    except RemoteWriteError as e:
        raise _write_failed(e)
    return SubscriptionResponse.from_record(subscription)


@router.get("", response_model=SubscriptionListResponse)
async def list_subscriptions(
    store: RecordStore = Depends(get_store),
    owner_id: int = Depends(get_current_owner_id),
):
    """List the user's active subscriptions, soonest renewal first, with urgency."""
    today = date.today()
    subscriptions = store.query(
        "subscriptions",
        filters={"user_id": owner_id},
        order_by="renewal_date",
    )
    return SubscriptionListResponse(
        items=[SubscriptionResponse.from_record(s, today) for s in subscriptions],
        total_count=len(subscriptions),
    )


@router.get("/stats", response_model=SubscriptionStatsResponse)
async def get_subscription_stats(
    store: RecordStore = Depends(get_store),
    owner_id: int = Depends(get_current_owner_id),
):
    """Dashboard headline numbers with prices normalized to the reference currency."""
    subscriptions = store.query("subscriptions", filters={"user_id": owner_id})
    summary = summarize_subscriptions(subscriptions, load_rate_table(store))

    return SubscriptionStatsResponse(
        count=summary.count,
        total_monthly=round(summary.total, 2),
        total_monthly_display=format_currency(summary.total, summary.currency),
        temporary_count=summary.temporary_count,
        renewing_soon_count=summary.renewing_soon_count,
        reference_currency=summary.currency,
    )


@router.get("/{subscription_id}", response_model=SubscriptionResponse)
async def get_subscription(
    subscription_id: int,
    store: RecordStore = Depends(get_store),
    owner_id: int = Depends(get_current_owner_id),
):
    """Get a single subscription by ID."""
    subscription = _get_owned_subscription(store, subscription_id, owner_id)
    return SubscriptionResponse.from_record(subscription)


@router.put("/{subscription_id}", response_model=SubscriptionResponse)
async def update_subscription(
    subscription_id: int,
    subscription_data: SubscriptionUpdate,
    store: RecordStore = Depends(get_store),
    owner_id: int = Depends(get_current_owner_id),
):
    """Update any subset of a subscription's fields."""
    _get_owned_subscription(store, subscription_id, owner_id)

    update_data = {}
    for field, value in subscription_data.model_dump(exclude_unset=True).items():
        if value is None:
            continue
        if hasattr(value, "value"):  # Handle enums
            value = value.value
        update_data[field] = value

    try:
        subscription = store.update("subscriptions", subscription_id, update_data)
    except RemoteWriteError as e:
        raise _write_failed(e)
    return SubscriptionResponse.from_record(subscription)


@router.delete("/{subscription_id}", response_model=ArchivedSubscriptionResponse)
async def delete_subscription(
    subscription_id: int,
    store: RecordStore = Depends(get_store),
    owner_id: int = Depends(get_current_owner_id),
):
    """Remove a subscription by moving it into the archive.

    Returns the archived record. A 502 means nothing changed; a 500 with a
    "Partial archive" detail means the archived copy exists but the active
    subscription could not be removed.
    """
    try:
        archived = archive_subscription(store, owner_id, subscription_id)
    except RecordNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Subscription not found",
        )
    except ArchiveInsertError as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Archive failed, subscription unchanged: {e.cause.detail}",
        )
    except PartialArchiveError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=(
                f"Partial archive: subscription {e.subscription_id} was archived as "
                f"{e.archived_id} but is still active"
            ),
        )
    return ArchivedSubscriptionResponse.from_record(archived)
