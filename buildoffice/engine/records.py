"""
BuildOffice Record Store — kind-keyed persistence port for flat business records.

Financial and inventory records are plain pydantic models grouped by kind
("invoice", "product", ...). Each domain declares its kinds on a
``RecordRepository`` subclass; the in-memory store here and the SQLAlchemy
store in ``buildoffice.db.records`` implement the same calls.

Reads return deep copies, as in the document repository.
"""

from __future__ import annotations

import itertools
from abc import ABC, abstractmethod
from typing import Dict, Iterator, List, Optional, Tuple, TypeVar

from pydantic import BaseModel

RecordT = TypeVar("RecordT", bound=BaseModel)


class RecordRepository(ABC):
    """Persistence port for records keyed by kind and id."""

    kinds: Tuple[str, ...] = ()

    @abstractmethod
    def list(self, kind: str) -> List[BaseModel]:
        """All records of ``kind`` in insertion order."""

    @abstractmethod
    def get(self, kind: str, record_id: int) -> Optional[BaseModel]:
        ...

    @abstractmethod
    def add(self, kind: str, record: RecordT) -> RecordT:
        """Insert a record, assigning its id and the ids of its line items."""

    @abstractmethod
    def save(self, kind: str, record: RecordT) -> RecordT:
        """Replace a stored record; new line items (id None) get ids."""

    @abstractmethod
    def remove(self, kind: str, record_id: int) -> bool:
        ...

    @abstractmethod
    def next_sequence(self, kind: str) -> int:
        """Next document-number sequence for ``kind``; never reused after deletes."""

    def _check_kind(self, kind: str) -> None:
        if kind not in self.kinds:
            raise KeyError(f"Unknown record kind '{kind}'. Available: {list(self.kinds)}")


class InMemoryRecordRepository(RecordRepository):
    """Dict-backed store for every kind in ``kinds``."""

    def __init__(self):
        self._records: Dict[str, Dict[int, BaseModel]] = {kind: {} for kind in self.kinds}
        self._ids: Dict[str, Iterator[int]] = {kind: itertools.count(1) for kind in self.kinds}
        self._sequences: Dict[str, Iterator[int]] = {kind: itertools.count(1) for kind in self.kinds}
        self._item_ids = itertools.count(1)

    def _table(self, kind: str) -> Dict[int, BaseModel]:
        self._check_kind(kind)
        return self._records[kind]

    def list(self, kind: str) -> List[BaseModel]:
        return [r.model_copy(deep=True) for r in self._table(kind).values()]

    def get(self, kind: str, record_id: int) -> Optional[BaseModel]:
        record = self._table(kind).get(record_id)
        return record.model_copy(deep=True) if record else None

    def add(self, kind: str, record: RecordT) -> RecordT:
        table = self._table(kind)
        stored = record.model_copy(deep=True, update={"id": next(self._ids[kind])})
        self._number_items(stored)
        table[stored.id] = stored
        return stored.model_copy(deep=True)

    def save(self, kind: str, record: RecordT) -> RecordT:
        table = self._table(kind)
        if record.id not in table:
            raise KeyError(f"{kind} {record.id} is not stored")
        stored = record.model_copy(deep=True)
        self._number_items(stored)
        table[stored.id] = stored
        return stored.model_copy(deep=True)

    def remove(self, kind: str, record_id: int) -> bool:
        return self._table(kind).pop(record_id, None) is not None

    def next_sequence(self, kind: str) -> int:
        self._check_kind(kind)
        return next(self._sequences[kind])

    def _number_items(self, record: BaseModel) -> None:
        for item in getattr(record, "items", []):
            if item.id is None:
                item.id = next(self._item_ids)
