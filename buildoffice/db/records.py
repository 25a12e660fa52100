"""
SQLAlchemy-backed RecordRepository.

Each kind maps to a table class, its pydantic model and, for records with
line items, the item table class. Table columns carry the same names as the
model fields, so conversion is by column name in both directions.

Each call runs in its own ``session_scope``; SQLAlchemy failures surface as
``RecordError``.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, Generator, List, NamedTuple, Optional, Type

from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from buildoffice.db.base import Base
from buildoffice.db.models import LINE_ITEM_FIELDS, RecordSequence
from buildoffice.db.session import as_utc, session_scope
from buildoffice.engine.errors import RecordError
from buildoffice.engine.records import RecordRepository, RecordT

logger = logging.getLogger("buildoffice.db.records")


class RecordMapping(NamedTuple):
    table: Type[Base]
    model: Type[BaseModel]
    item_table: Optional[Type[Base]] = None


def _column_value(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return dict(value)
    if isinstance(value, list):
        return list(value)
    return value


def _row_data(row: Base) -> Dict[str, Any]:
    data = {}
    for column in row.__table__.columns:
        value = getattr(row, column.key)
        data[column.key] = as_utc(value) if isinstance(value, datetime) else value
    return data


class SqlRecordRepository(RecordRepository):
    """
    RecordRepository over the tables named in ``mappings``.

    Subclasses set ``kinds`` and ``mappings``:
        class SqlFinancialRepository(SqlRecordRepository, FinancialRepository):
            mappings = {"invoice": RecordMapping(InvoiceRecord, Invoice, InvoiceItemRecord), ...}
    """

    mappings: Dict[str, RecordMapping] = {}

    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    @contextmanager
    def _scope(self, operation: str, kind: str) -> Generator[Session, None, None]:
        try:
            with session_scope(self._session_factory) as session:
                yield session
        except SQLAlchemyError as e:
            logger.error(f"{operation} {kind} failed: {e}")
            raise RecordError(
                f"Failed to {operation} {kind}: {e}",
                record_type=kind,
                operation=operation,
            ) from e

    def _mapping(self, kind: str) -> RecordMapping:
        self._check_kind(kind)
        return self.mappings[kind]

    # -- RecordRepository --------------------------------------------------

    def list(self, kind: str) -> List[BaseModel]:
        mapping = self._mapping(kind)
        with self._scope("list", kind) as session:
            rows = session.scalars(select(mapping.table).order_by(mapping.table.id)).all()
            return [self._to_model(mapping, row) for row in rows]

    def get(self, kind: str, record_id: int) -> Optional[BaseModel]:
        mapping = self._mapping(kind)
        with self._scope("get", kind) as session:
            row = session.get(mapping.table, record_id)
            return self._to_model(mapping, row) if row else None

    def add(self, kind: str, record: RecordT) -> RecordT:
        mapping = self._mapping(kind)
        with self._scope("create", kind) as session:
            row = mapping.table()
            self._apply_fields(mapping, row, record)
            session.add(row)
            session.flush()
            return self._to_model(mapping, row)

    def save(self, kind: str, record: RecordT) -> RecordT:
        mapping = self._mapping(kind)
        with self._scope("update", kind) as session:
            row = session.get(mapping.table, record.id)
            if row is None:
                raise KeyError(f"{kind} {record.id} is not stored")
            self._apply_fields(mapping, row, record)
            session.flush()
            return self._to_model(mapping, row)

    def remove(self, kind: str, record_id: int) -> bool:
        mapping = self._mapping(kind)
        with self._scope("delete", kind) as session:
            row = session.get(mapping.table, record_id)
            if row is None:
                return False
            session.delete(row)
            return True

    def next_sequence(self, kind: str) -> int:
        self._check_kind(kind)
        with self._scope("sequence", kind) as session:
            row = session.get(RecordSequence, kind)
            if row is None:
                row = RecordSequence(kind=kind, last_value=0)
                session.add(row)
            row.last_value += 1
            return row.last_value

    # -- conversion --------------------------------------------------------

    @staticmethod
    def _to_model(mapping: RecordMapping, row: Base) -> BaseModel:
        data = _row_data(row)
        if mapping.item_table is not None:
            data["items"] = [_row_data(item) for item in row.items]
        return mapping.model.model_validate(data)

    @staticmethod
    def _apply_fields(mapping: RecordMapping, row: Base, record: BaseModel) -> None:
        """Copy model fields onto ``row`` by column name; line items keep their ids."""
        for column in row.__table__.columns:
            if column.key == "id":
                continue
            setattr(row, column.key, _column_value(getattr(record, column.key)))

        if mapping.item_table is None:
            return
        existing = {item.id: item for item in row.items}
        items = []
        for position, item in enumerate(record.items):
            item_row = existing.get(item.id) if item.id is not None else None
            if item_row is None:
                item_row = mapping.item_table()
            for name in LINE_ITEM_FIELDS:
                setattr(item_row, name, getattr(item, name))
            item_row.position = position
            items.append(item_row)
        row.items = items
