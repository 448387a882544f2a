from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Numeric, String

from app.db import Base


def utc_now():
    return datetime.now(timezone.utc)


class ExchangeRate(Base):
    """One row per currency code; the reference currency itself has no row."""

    __tablename__ = "exchange_rates"

    code = Column(String(3), primary_key=True)
    rate_to_reference = Column(Numeric(18, 8), nullable=False)
    updated_at = Column(DateTime, default=utc_now, nullable=False)
