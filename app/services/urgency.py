"""Renewal urgency classification."""
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, Optional

from app.config import settings

URGENT_DAYS = 3
WARNING_DAYS = 7


class UrgencyLevel(str, Enum):
    PAST = "past"
    URGENT = "urgent"
    WARNING = "warning"
    OK = "ok"


@dataclass(frozen=True)
class Urgency:
    days_until: int
    level: UrgencyLevel

    @property
    def label(self) -> str:
        return urgency_label(self.days_until)


def as_date(value: Any) -> date:
    """Truncate a date, datetime or ISO string to a calendar date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return datetime.fromisoformat(value.strip().replace("Z", "+00:00")).date()
    raise ValueError(f"Not a date: {value!r}")


def days_until(renewal_date: Any, today: Any) -> int:
    """Whole days from `today` to `renewal_date`, both taken at midnight."""
    return (as_date(renewal_date) - as_date(today)).days


def urgency_label(days: int) -> str:
    if days < 0:
        return f"{abs(days)} days overdue"
    if days == 0:
        return "Today!"
    return f"{days} days"


def classify(renewal_date: Any, today: Any = None) -> Urgency:
    days = days_until(renewal_date, today or date.today())

    if days < 0:
        level = UrgencyLevel.PAST
    elif days <= URGENT_DAYS:
        level = UrgencyLevel.URGENT
    elif days <= WARNING_DAYS:
        level = UrgencyLevel.WARNING
    else:
        level = UrgencyLevel.OK

    return Urgency(days_until=days, level=level)


def is_renewing_soon(renewal_date: Any, today: Any = None, window: Optional[int] = None) -> bool:
    """
    Headline "renewing soon" check for the dashboard.

    Uses its own window (settings.renewing_soon_days, 5 by default) which is
    wider than the URGENT display threshold. Overdue renewals are excluded.
    """
    if window is None:
        window = settings.renewing_soon_days
    days = days_until(renewal_date, today or date.today())
    return 0 <= days <= window
