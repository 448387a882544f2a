from app.schemas.archive import ArchivedSubscriptionResponse, ArchiveListResponse, ArchiveStatsResponse
from app.schemas.exchange_rate import ExchangeRateListResponse, ExchangeRateResponse
from app.schemas.subscription import (
    Currency,
    SubscriptionCreate,
    SubscriptionListResponse,
    SubscriptionResponse,
    SubscriptionStatsResponse,
    SubscriptionType,
    SubscriptionUpdate,
)
from app.schemas.user import AuthResponse, LoginRequest, UserCreate, UserProfileResponse, UserResponse

__all__ = [
    "UserCreate",
    "UserResponse",
    "UserProfileResponse",
    "AuthResponse",
    "LoginRequest",
    "Currency",
    "SubscriptionType",
    "SubscriptionCreate",
    "SubscriptionResponse",
    "SubscriptionUpdate",
    "SubscriptionListResponse",
    "SubscriptionStatsResponse",
    "ArchivedSubscriptionResponse",
    "ArchiveListResponse",
    "ArchiveStatsResponse",
    "ExchangeRateResponse",
    "ExchangeRateListResponse",
]
