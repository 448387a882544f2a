"""Generic record store over the application tables.

The core services only talk to persistence through this small surface:
query, get, insert, update, delete and a batched upsert. Every write commits
on its own; a failed write is rolled back and reported as RemoteWriteError.
"""
import logging
from typing import Any, Optional

from sqlalchemy import asc, desc
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.errors import RemoteWriteError
from app.models.archived_subscription import ArchivedSubscription
from app.models.exchange_rate import ExchangeRate
from app.models.subscription import Subscription

logger = logging.getLogger(__name__)

TABLES = {
    "subscriptions": Subscription,
    "archived_subscriptions": ArchivedSubscription,
    "exchange_rates": ExchangeRate,
}


class RecordStore:
    def __init__(self, db: Session):
        self.db = db

    def _model(self, table: str):
        try:
            return TABLES[table]
        except KeyError:
            raise ValueError(f"Unknown table: {table}")

    def _column(self, model, name: str):
        column = getattr(model, name, None)
        if column is None:
            raise ValueError(f"Unknown column {name} on {model.__tablename__}")
        return column

    def query(
        self,
        table: str,
        filters: Optional[dict[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> list:
        """Return all rows of `table` matching the equality `filters`."""
        model = self._model(table)
        query = self.db.query(model)
        for name, value in (filters or {}).items():
            query = query.filter(self._column(model, name) == value)
        if order_by:
            column = self._column(model, order_by)
            query = query.order_by(desc(column) if descending else asc(column))
        return query.all()

    def get(self, table: str, record_id: Any, filters: Optional[dict[str, Any]] = None):
        model = self._model(table)
        primary_key = model.__mapper__.primary_key[0]
        query = self.db.query(model).filter(primary_key == record_id)
        for name, value in (filters or {}).items():
            query = query.filter(self._column(model, name) == value)
        return query.first()

    def insert(self, table: str, record: dict[str, Any]):
        model = self._model(table)
        instance = model(**record)
        try:
            self.db.add(instance)
            self.db.commit()
            self.db.refresh(instance)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Insert into {table} failed: {e}")
            raise RemoteWriteError(table, "insert", str(e)) from e
        return instance

    def update(self, table: str, record_id: Any, values: dict[str, Any]):
        instance = self.get(table, record_id)
        if instance is None:
            raise RemoteWriteError(table, "update", f"record {record_id} not found")
        try:
            for field, value in values.items():
                setattr(instance, field, value)
            self.db.commit()
            self.db.refresh(instance)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Update of {table} {record_id} failed: {e}")
            raise RemoteWriteError(table, "update", str(e)) from e
        return instance

    def delete(self, table: str, record_id: Any) -> None:
        instance = self.get(table, record_id)
        if instance is None:
            raise RemoteWriteError(table, "delete", f"record {record_id} not found")
        try:
            self.db.delete(instance)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Delete of {table} {record_id} failed: {e}")
            raise RemoteWriteError(table, "delete", str(e)) from e

    def upsert_many(self, table: str, rows: list[dict[str, Any]], key: str) -> list:
        """Insert or overwrite rows keyed by `key` in a single commit.

        Either every row is written or none is.
        """
        model = self._model(table)
        instances = []
        try:
            for row in rows:
                instance = self.get(table, row[key])
                if instance is None:
                    instance = model(**row)
                    self.db.add(instance)
                else:
                    for field, value in row.items():
                        setattr(instance, field, value)
                instances.append(instance)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Upsert into {table} failed, no rows written: {e}")
            raise RemoteWriteError(table, "upsert", str(e)) from e
        return instances
