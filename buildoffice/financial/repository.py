"""
Financial record repository interface and the in-memory implementation.

Records are grouped by kind ("quotation", "purchase_order", "invoice",
"payment"). The SQLAlchemy implementation lives in
``buildoffice.financial.sql_repository``.
"""

from __future__ import annotations

from buildoffice.engine.records import InMemoryRecordRepository, RecordRepository

RECORD_KINDS = ("quotation", "purchase_order", "invoice", "payment")


class FinancialRepository(RecordRepository):
    """Persistence port for financial records, keyed by kind and id."""

    kinds = RECORD_KINDS


class InMemoryFinancialRepository(InMemoryRecordRepository, FinancialRepository):
    pass
