"""Domain errors raised by the core services.

Routers translate these into HTTP responses; the services themselves never
retry a failed remote write.
"""
from typing import Optional


class SubscriptionTrackerError(Exception):
    """Base class for all domain errors."""


class RemoteWriteError(SubscriptionTrackerError):
    """An insert, update or delete against the record store failed."""

    def __init__(self, table: str, operation: str, detail: str):
        self.table = table
        self.operation = operation
        self.detail = detail
        super().__init__(f"{operation} on {table} failed: {detail}")


class ArchiveInsertError(SubscriptionTrackerError):
    """Phase one of an archive failed. The subscription is still active and was not deleted."""

    def __init__(self, subscription_id: int, cause: RemoteWriteError):
        self.subscription_id = subscription_id
        self.cause = cause
        super().__init__(f"Could not archive subscription {subscription_id}: {cause.detail}")


class PartialArchiveError(SubscriptionTrackerError):
    """Phase two of an archive failed.

    The archived copy was written but the active subscription could not be
    deleted, so both rows now exist. Operators reconcile using the two ids.
    """

    def __init__(self, subscription_id: int, archived_id: int, cause: RemoteWriteError):
        self.subscription_id = subscription_id
        self.archived_id = archived_id
        self.cause = cause
        super().__init__(
            f"Partial archive: subscription {subscription_id} was archived as "
            f"{archived_id} but could not be removed: {cause.detail}"
        )


class RateUnavailableError(SubscriptionTrackerError):
    """No exchange rate row exists for a currency code."""

    def __init__(self, currency: str):
        self.currency = currency
        super().__init__(f"No exchange rate for {currency}")


class RefreshFetchError(SubscriptionTrackerError):
    """The rate source was unreachable, returned an error, or sent a malformed payload."""

    def __init__(self, message: str, cause: Optional[Exception] = None):
        self.cause = cause
        super().__init__(message)


class RecordNotFoundError(SubscriptionTrackerError):
    """The record does not exist or is not owned by the requesting user."""

    def __init__(self, table: str, record_id):
        self.table = table
        self.record_id = record_id
        super().__init__(f"{table} record {record_id} not found")
