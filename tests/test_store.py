"""Tests for RecordStore write failure handling."""

from datetime import date, datetime, timezone
from decimal import Decimal
from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from app.errors import ArchiveInsertError, RemoteWriteError
from app.services.archive import archive_subscription


def _lost_connection():
    return OperationalError("SELECT", {}, Exception("server closed the connection"))


def _subscription_record(user):
    return {
        "user_id": user.id,
        "name": "Netflix",
        "price": Decimal("10.00"),
        "currency": "NOK",
        "renewal_date": date(2024, 4, 1),
        "subscription_email": "me@example.com",
        "subscription_type": "normal",
        "created_at": datetime(2024, 3, 1, tzinfo=timezone.utc),
    }


class TestReloadAfterCommit:
    """A failed reload after a commit is still a RemoteWriteError."""

    def test_insert_reload_failure(self, store, test_user):
        with patch.object(store.db, "refresh", side_effect=_lost_connection()):
            with pytest.raises(RemoteWriteError) as exc_info:
                store.insert("subscriptions", _subscription_record(test_user))

        assert exc_info.value.table == "subscriptions"
        assert exc_info.value.operation == "insert"

    def test_update_reload_failure(self, store, test_user):
        subscription = store.insert("subscriptions", _subscription_record(test_user))

        with patch.object(store.db, "refresh", side_effect=_lost_connection()):
            with pytest.raises(RemoteWriteError) as exc_info:
                store.update("subscriptions", subscription.id, {"name": "Netflix Premium"})

        assert exc_info.value.operation == "update"

    def test_archive_reports_labelled_error(self, store, test_user):
        subscription = store.insert("subscriptions", _subscription_record(test_user))
        subscription_id = subscription.id

        with patch.object(store.db, "refresh", side_effect=_lost_connection()):
            with pytest.raises(ArchiveInsertError) as exc_info:
                archive_subscription(store, test_user.id, subscription_id)

        assert exc_info.value.subscription_id == subscription_id
        # The delete step never ran
        assert store.get("subscriptions", subscription_id) is not None


class TestMissingRecords:
    def test_update_missing(self, store):
        with pytest.raises(RemoteWriteError):
            store.update("subscriptions", 9999, {"name": "Ghost"})

    def test_delete_missing(self, store):
        with pytest.raises(RemoteWriteError):
            store.delete("subscriptions", 9999)

    def test_unknown_table(self, store):
        with pytest.raises(ValueError):
            store.query("categories")
