from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, Numeric, String

from app.db import Base


class ArchivedSubscription(Base):
    """Snapshot of a subscription taken when it was removed. Never updated."""

    __tablename__ = "archived_subscriptions"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    price = Column(Numeric(12, 2), nullable=False)  # Price at time of archival
    currency = Column(String(3), nullable=False)
    subscription_email = Column(String(255), nullable=True)
    subscription_type = Column(String(20), nullable=False)
    total_spent = Column(Numeric(12, 2), nullable=False)  # In the subscription's own currency
    started_at = Column(DateTime, nullable=False)  # created_at of the active subscription
    ended_at = Column(DateTime, nullable=False)
    renewal_date = Column(Date, nullable=True)  # Last known
    duration_days = Column(Integer, nullable=False)
