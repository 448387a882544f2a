from fastapi import APIRouter, Depends

from app.dependencies import get_current_owner_id, get_store
from app.schemas.archive import ArchivedSubscriptionResponse, ArchiveListResponse, ArchiveStatsResponse
from app.services.aggregation import summarize_archive
from app.services.currency import load_rate_table
from app.store import RecordStore
from app.utils.formatting import format_currency

router = APIRouter(prefix="/archive", tags=["archive"])


@router.get("", response_model=ArchiveListResponse)
async def list_archived_subscriptions(
    store: RecordStore = Depends(get_store),
    owner_id: int = Depends(get_current_owner_id),
):
    """List archived subscriptions, most recently ended first."""
    archived = store.query(
        "archived_subscriptions",
        filters={"user_id": owner_id},
        order_by="ended_at",
        descending=True,
    )
    return ArchiveListResponse(
        items=[ArchivedSubscriptionResponse.from_record(a) for a in archived],
        total_count=len(archived),
    )


@router.get("/stats", response_model=ArchiveStatsResponse)
async def get_archive_stats(
    store: RecordStore = Depends(get_store),
    owner_id: int = Depends(get_current_owner_id),
):
    """All-time spend across archived subscriptions in the reference currency."""
    archived = store.query("archived_subscriptions", filters={"user_id": owner_id})
    summary = summarize_archive(archived, load_rate_table(store))

    return ArchiveStatsResponse(
        count=summary.count,
        total_spent=round(summary.total, 2),
        total_spent_display=format_currency(summary.total, summary.currency),
        temporary_count=summary.temporary_count,
        reference_currency=summary.currency,
    )
