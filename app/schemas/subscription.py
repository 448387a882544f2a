from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from app.config import settings
from app.services.urgency import classify
from app.utils.formatting import format_subscription_type

CENTS = Decimal("0.01")


class SubscriptionType(str, Enum):
    NORMAL = "normal"
    TEMPORARY = "temporary"


# Only codes the rate refresh keeps a row for, plus the reference itself
ACCEPTED_CURRENCIES = [settings.reference_currency.upper()] + [
    code.upper() for code in settings.supported_currencies if code.upper() != settings.reference_currency.upper()
]

Currency = Enum("Currency", {code: code for code in ACCEPTED_CURRENCIES}, type=str)


def _strip_name(v: str | None) -> str | None:
    if v is None:
        return v
    v = v.strip()
    if not v:
        raise ValueError("Name cannot be blank")
    return v


def _round_price(v: Decimal | None) -> Decimal | None:
    if v is None:
        return v
    if not v.is_finite():
        raise ValueError("Price must be a number")
    return v.quantize(CENTS)


def _strip_email(v):
    if isinstance(v, str):
        v = v.strip()
        if not v:
            raise ValueError("Subscription email is required")
    return v


class SubscriptionCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    price: Decimal = Field(..., ge=0)
    currency: Currency = Currency(settings.reference_currency.upper())
    renewal_date: date
    subscription_email: EmailStr
    subscription_type: SubscriptionType = SubscriptionType.NORMAL

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _strip_name(v)

    @field_validator("price")
    @classmethod
    def validate_price(cls, v: Decimal | None) -> Decimal | None:
        return _round_price(v)

    @field_validator("subscription_email", mode="before")
    @classmethod
    def validate_email(cls, v):
        return _strip_email(v)


class SubscriptionUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    price: Optional[Decimal] = Field(None, ge=0)
    currency: Optional[Currency] = None
    renewal_date: Optional[date] = None
    subscription_email: Optional[EmailStr] = None
    subscription_type: Optional[SubscriptionType] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        return _strip_name(v)

    @field_validator("price")
    @classmethod
    def validate_price(cls, v: Decimal | None) -> Decimal | None:
        return _round_price(v)

    @field_validator("subscription_email", mode="before")
    @classmethod
    def validate_email(cls, v):
        return _strip_email(v)


class SubscriptionResponse(BaseModel):
    id: int
    user_id: int
    name: str
    price: float
    currency: str
    renewal_date: date
    subscription_email: Optional[str] = None
    subscription_type: str
    type_label: str
    created_at: datetime
    updated_at: datetime
    days_until: int
    urgency_level: str
    urgency_label: str

    @classmethod
    def from_record(cls, subscription, today: Optional[date] = None) -> "SubscriptionResponse":
        urgency = classify(subscription.renewal_date, today)
        return cls(
            id=subscription.id,
            user_id=subscription.user_id,
            name=subscription.name,
            price=subscription.price,
            currency=subscription.currency,
            renewal_date=subscription.renewal_date,
            subscription_email=subscription.subscription_email,
            subscription_type=subscription.subscription_type,
            type_label=format_subscription_type(subscription.subscription_type),
            created_at=subscription.created_at,
            updated_at=subscription.updated_at,
            days_until=urgency.days_until,
            urgency_level=urgency.level.value,
            urgency_label=urgency.label,
        )


class SubscriptionListResponse(BaseModel):
    items: list[SubscriptionResponse]
    total_count: int


class SubscriptionStatsResponse(BaseModel):
    """Dashboard headline numbers, amounts in the reference currency."""

    count: int
    total_monthly: float
    total_monthly_display: str
    temporary_count: int
    renewing_soon_count: int
    reference_currency: str
