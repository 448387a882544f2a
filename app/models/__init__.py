from app.models.archived_subscription import ArchivedSubscription
from app.models.exchange_rate import ExchangeRate
from app.models.subscription import Subscription
from app.models.user import User

__all__ = ["ArchivedSubscription", "ExchangeRate", "Subscription", "User"]
