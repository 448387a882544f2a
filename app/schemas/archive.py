from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel

from app.utils.formatting import format_duration, format_subscription_type


class ArchivedSubscriptionResponse(BaseModel):
    id: int
    user_id: int
    name: str
    price: float
    currency: str
    subscription_email: Optional[str] = None
    subscription_type: str
    type_label: str
    total_spent: float
    started_at: datetime
    ended_at: datetime
    renewal_date: Optional[date] = None
    duration_days: int
    duration_label: str

    @classmethod
    def from_record(cls, archived) -> "ArchivedSubscriptionResponse":
        return cls(
            id=archived.id,
            user_id=archived.user_id,
            name=archived.name,
            price=archived.price,
            currency=archived.currency,
            subscription_email=archived.subscription_email,
            subscription_type=archived.subscription_type,
            type_label=format_subscription_type(archived.subscription_type),
            total_spent=archived.total_spent,
            started_at=archived.started_at,
            ended_at=archived.ended_at,
            renewal_date=archived.renewal_date,
            duration_days=archived.duration_days,
            duration_label=format_duration(archived.duration_days),
        )


class ArchiveListResponse(BaseModel):
    items: list[ArchivedSubscriptionResponse]
    total_count: int


class ArchiveStatsResponse(BaseModel):
    """All-time archive totals, amounts in the reference currency."""

    count: int
    total_spent: float
    total_spent_display: str
    temporary_count: int
    reference_currency: str
