"""
BuildOffice Financial — quotations, purchase orders, invoices, payments, reminders.

Usage:
    from buildoffice.financial import FinancialService, QuotationCreate, LineItemInput

    finance = FinancialService()
    quote = finance.create_quotation(QuotationCreate(customer_id=7, items=[...]), created_by=1)
"""

from buildoffice.financial.models import (
    Invoice,
    InvoiceCreate,
    InvoiceStatus,
    InvoiceUpdate,
    LineItem,
    LineItemInput,
    Payment,
    PaymentCreate,
    PaymentStatus,
    PurchaseOrder,
    PurchaseOrderCreate,
    PurchaseOrderStatus,
    PurchaseOrderUpdate,
    Quotation,
    QuotationCreate,
    QuotationStatus,
    QuotationUpdate,
)
from buildoffice.financial.repository import FinancialRepository, InMemoryFinancialRepository
from buildoffice.financial.service import FinancialService
from buildoffice.financial.totals import Totals, compute_totals

__all__ = [
    "FinancialRepository",
    "FinancialService",
    "InMemoryFinancialRepository",
    "Invoice",
    "InvoiceCreate",
    "InvoiceStatus",
    "InvoiceUpdate",
    "LineItem",
    "LineItemInput",
    "Payment",
    "PaymentCreate",
    "PaymentStatus",
    "PurchaseOrder",
    "PurchaseOrderCreate",
    "PurchaseOrderStatus",
    "PurchaseOrderUpdate",
    "Quotation",
    "QuotationCreate",
    "QuotationStatus",
    "QuotationUpdate",
    "Totals",
    "compute_totals",
]
