"""SQLAlchemy-backed FinancialRepository."""

from __future__ import annotations

from buildoffice.db.models import (
    InvoiceItemRecord,
    InvoiceRecord,
    PaymentRecord,
    PurchaseOrderItemRecord,
    PurchaseOrderRecord,
    QuotationItemRecord,
    QuotationRecord,
)
from buildoffice.db.records import RecordMapping, SqlRecordRepository
from buildoffice.financial.models import Invoice, Payment, PurchaseOrder, Quotation
from buildoffice.financial.repository import FinancialRepository


class SqlFinancialRepository(SqlRecordRepository, FinancialRepository):
    """
    FinancialRepository over the quotation, purchase order, invoice and
    payment tables.

    Usage:
        factory = init_db(get_config().database, create_tables=True)
        finance = FinancialService(SqlFinancialRepository(factory))
    """

    mappings = {
        "quotation": RecordMapping(QuotationRecord, Quotation, QuotationItemRecord),
        "purchase_order": RecordMapping(PurchaseOrderRecord, PurchaseOrder, PurchaseOrderItemRecord),
        "invoice": RecordMapping(InvoiceRecord, Invoice, InvoiceItemRecord),
        "payment": RecordMapping(PaymentRecord, Payment),
    }
