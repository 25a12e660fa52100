"""
BuildOffice Financial Service — quotations, purchase orders, invoices, payments.

Handles:
- Numbered record creation (QUO-/PO-/INV-<year>-<NNN>) with computed totals
- Explicit update commands (fields in ``model_fields_set`` only)
- Payment recording and the resulting invoice status (Paid / Partial)
- Reminder selection and overdue marking

Totals are recomputed from all line items whenever items or the discount
change.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import List, Optional

from buildoffice.engine.config import FinancialConfig
from buildoffice.engine.errors import NotFoundError
from buildoffice.engine.logging import log, log_financial_event
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
from buildoffice.financial.reminders import invoices_needing_reminders, is_past_due
from buildoffice.financial.repository import FinancialRepository, InMemoryFinancialRepository
from buildoffice.financial.totals import Totals, compute_totals

logger = logging.getLogger("buildoffice.financial.service")

_LABELS = {
    "quotation": "Quotation",
    "purchase_order": "Purchase order",
    "invoice": "Invoice",
    "payment": "Payment",
}


def _not_found(kind: str, record_id: int) -> NotFoundError:
    return NotFoundError(f"{_LABELS[kind]} not found", record_type=kind, record_id=record_id)


def _now() -> datetime:
    return datetime.now(timezone.utc)


class FinancialService:
    """Financial record workflows over a FinancialRepository."""

    def __init__(
        self,
        repository: Optional[FinancialRepository] = None,
        config: Optional[FinancialConfig] = None,
    ):
        self._repo = repository or InMemoryFinancialRepository()
        self._config = config or FinancialConfig()

    # -------------------------------------------------------------------
    # Quotations
    # -------------------------------------------------------------------

    def list_quotations(self) -> List[Quotation]:
        return self._repo.list("quotation")

    def get_quotation(self, quotation_id: int) -> Optional[Quotation]:
        return self._repo.get("quotation", quotation_id)

    def create_quotation(self, data: QuotationCreate, created_by: int) -> Quotation:
        totals = self._totals(data.items, data.discount_amount)
        now = _now()
        quotation = Quotation(
            quotation_number=self._next_number("quotation", self._config.quotation_prefix, now),
            customer_id=data.customer_id,
            project_id=data.project_id,
            items=[LineItem(**item.model_dump()) for item in data.items],
            subtotal=totals.subtotal,
            tax_amount=totals.tax,
            discount_amount=totals.discount,
            total_amount=totals.total,
            status=QuotationStatus.DRAFT,
            valid_until=data.valid_until,
            notes=data.notes,
            created_by=created_by,
            created_at=now,
            updated_at=now,
        )
        quotation = self._repo.add("quotation", quotation)
        self._log_created("quotation", quotation.id, quotation.quotation_number, quotation.total_amount, created_by)
        return quotation

    def update_quotation(self, quotation_id: int, changes: QuotationUpdate) -> Quotation:
        quotation = self._require("quotation", quotation_id)
        fields = changes.model_fields_set
        for name in ("notes", "valid_until"):
            if name in fields:
                setattr(quotation, name, getattr(changes, name))
        if "status" in fields and changes.status is not None:
            quotation.status = changes.status
        if "discount_amount" in fields and changes.discount_amount is not None:
            quotation.discount_amount = changes.discount_amount
            self._apply_totals(quotation)
        quotation.updated_at = _now()
        quotation = self._repo.save("quotation", quotation)
        self._log_updated("quotation", quotation_id, quotation.status.value)
        return quotation

    def delete_quotation(self, quotation_id: int) -> None:
        if not self._repo.remove("quotation", quotation_id):
            raise _not_found("quotation", quotation_id)
        logger.info(f"Deleted quotation {quotation_id}")
        log(log_financial_event("deleted", "quotation", quotation_id))

    def add_quotation_item(self, quotation_id: int, item: LineItemInput) -> LineItem:
        """Append a line item and recompute subtotal, tax and total from all items."""
        quotation = self._require("quotation", quotation_id)
        quotation.items.append(LineItem(**item.model_dump()))
        self._apply_totals(quotation)
        quotation.updated_at = _now()
        quotation = self._repo.save("quotation", quotation)
        logger.info(
            f"Added item to quotation {quotation.quotation_number}: total now {quotation.total_amount}"
        )
        log(log_financial_event(
            "item_added", "quotation", quotation_id,
            number=quotation.quotation_number, amount=quotation.total_amount,
        ))
        return quotation.items[-1]

    # -------------------------------------------------------------------
    # Purchase orders
    # -------------------------------------------------------------------

    def list_purchase_orders(self) -> List[PurchaseOrder]:
        return self._repo.list("purchase_order")

    def get_purchase_order(self, purchase_order_id: int) -> Optional[PurchaseOrder]:
        return self._repo.get("purchase_order", purchase_order_id)

    def create_purchase_order(self, data: PurchaseOrderCreate, created_by: int) -> PurchaseOrder:
        if data.quotation_id is not None:
            self._require("quotation", data.quotation_id)
        now = _now()
        order = PurchaseOrder(
            purchase_order_number=self._next_number(
                "purchase_order", self._config.purchase_order_prefix, now
            ),
            supplier_id=data.supplier_id,
            quotation_id=data.quotation_id,
            items=[LineItem(**item.model_dump()) for item in data.items],
            status=PurchaseOrderStatus.PENDING,
            order_date=data.order_date,
            expected_delivery_date=data.expected_delivery_date,
            notes=data.notes,
            created_by=created_by,
            created_at=now,
            updated_at=now,
        )
        self._apply_totals(order)
        order = self._repo.add("purchase_order", order)
        self._log_created(
            "purchase_order", order.id, order.purchase_order_number, order.total_amount, created_by
        )
        return order

    def update_purchase_order(self, purchase_order_id: int, changes: PurchaseOrderUpdate) -> PurchaseOrder:
        order = self._require("purchase_order", purchase_order_id)
        fields = changes.model_fields_set
        for name in ("expected_delivery_date", "actual_delivery_date", "notes"):
            if name in fields:
                setattr(order, name, getattr(changes, name))
        if "status" in fields and changes.status is not None:
            order.status = changes.status
        order.updated_at = _now()
        order = self._repo.save("purchase_order", order)
        self._log_updated("purchase_order", purchase_order_id, order.status.value)
        return order

    # -------------------------------------------------------------------
    # Invoices
    # -------------------------------------------------------------------

    def list_invoices(self) -> List[Invoice]:
        return self._repo.list("invoice")

    def get_invoice(self, invoice_id: int) -> Optional[Invoice]:
        return self._repo.get("invoice", invoice_id)

    def create_invoice(self, data: InvoiceCreate, created_by: int) -> Invoice:
        if data.purchase_order_id is not None:
            self._require("purchase_order", data.purchase_order_id)
        totals = self._totals(data.items, data.discount_amount)
        now = _now()
        invoice = Invoice(
            invoice_number=self._next_number("invoice", self._config.invoice_prefix, now),
            customer_id=data.customer_id,
            purchase_order_id=data.purchase_order_id,
            items=[LineItem(**item.model_dump()) for item in data.items],
            subtotal=totals.subtotal,
            tax_amount=totals.tax,
            discount_amount=totals.discount,
            total_amount=totals.total,
            status=InvoiceStatus.DRAFT,
            issue_date=data.issue_date,
            due_date=data.due_date,
            notes=data.notes,
            created_by=created_by,
            created_at=now,
            updated_at=now,
        )
        invoice = self._repo.add("invoice", invoice)
        self._log_created("invoice", invoice.id, invoice.invoice_number, invoice.total_amount, created_by)
        return invoice

    def update_invoice(self, invoice_id: int, changes: InvoiceUpdate) -> Invoice:
        invoice = self._require("invoice", invoice_id)
        fields = changes.model_fields_set
        if "notes" in fields:
            invoice.notes = changes.notes
        if "due_date" in fields and changes.due_date is not None:
            invoice.due_date = changes.due_date
        if "status" in fields and changes.status is not None:
            invoice.status = changes.status
        if "discount_amount" in fields and changes.discount_amount is not None:
            invoice.discount_amount = changes.discount_amount
            self._apply_totals(invoice)
        invoice.updated_at = _now()
        invoice = self._repo.save("invoice", invoice)
        self._log_updated("invoice", invoice_id, invoice.status.value)
        return invoice

    # -------------------------------------------------------------------
    # Payments
    # -------------------------------------------------------------------

    def list_payments(self, invoice_id: Optional[int] = None) -> List[Payment]:
        payments = self._repo.list("payment")
        if invoice_id is not None:
            payments = [p for p in payments if p.invoice_id == invoice_id]
        return payments

    def paid_amount(self, invoice_id: int) -> Decimal:
        return sum(
            (p.amount for p in self.list_payments(invoice_id) if p.status == PaymentStatus.PAID),
            Decimal("0"),
        )

    def create_payment(self, data: PaymentCreate, created_by: int) -> Payment:
        """
        Record a payment against an invoice.

        The payment is stored as Paid. The invoice then becomes Paid (with
        ``paid_date`` set to the payment date) once the paid sum reaches its
        total, or Partial while some but not all of it is paid.
        """
        invoice = self._require("invoice", data.invoice_id)
        payment = self._repo.add(
            "payment",
            Payment(
                **data.model_dump(),
                status=PaymentStatus.PAID,
                created_by=created_by,
                created_at=_now(),
            ),
        )

        paid = self.paid_amount(invoice.id)
        if paid >= invoice.total_amount:
            invoice.status = InvoiceStatus.PAID
            invoice.paid_date = data.payment_date
        elif paid > 0:
            invoice.status = InvoiceStatus.PARTIAL
        invoice.updated_at = _now()
        self._repo.save("invoice", invoice)

        logger.info(
            f"Payment {payment.id} of {payment.amount} on {invoice.invoice_number}: "
            f"paid {paid} of {invoice.total_amount}, status {invoice.status.value}"
        )
        log(log_financial_event(
            "recorded", "payment", payment.id,
            user_id=created_by, number=invoice.invoice_number,
            amount=payment.amount, status=invoice.status.value,
        ))
        return payment

    # -------------------------------------------------------------------
    # Reminders
    # -------------------------------------------------------------------

    def invoices_needing_reminders(self, today: Optional[date] = None) -> List[Invoice]:
        today = today or date.today()
        return invoices_needing_reminders(self.list_invoices(), today, self._config.due_soon_days)

    def mark_overdue(self, today: Optional[date] = None) -> List[Invoice]:
        """Flip Sent/Partial invoices past their due date to Overdue. Returns the flipped invoices."""
        today = today or date.today()
        flipped = []
        for invoice in self.list_invoices():
            if not is_past_due(invoice, today):
                continue
            invoice.status = InvoiceStatus.OVERDUE
            invoice.updated_at = _now()
            flipped.append(self._repo.save("invoice", invoice))
            log(log_financial_event(
                "marked_overdue", "invoice", invoice.id,
                number=invoice.invoice_number, status=InvoiceStatus.OVERDUE.value,
            ))
        if flipped:
            logger.info(f"Marked {len(flipped)} invoice(s) overdue")
        return flipped

    # -------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------

    def _require(self, kind: str, record_id: int):
        record = self._repo.get(kind, record_id)
        if record is None:
            raise _not_found(kind, record_id)
        return record

    def _next_number(self, kind: str, prefix: str, now: datetime) -> str:
        return f"{prefix}-{now.year}-{self._repo.next_sequence(kind):03d}"

    def _totals(self, items, discount: Decimal = Decimal("0")) -> Totals:
        return compute_totals(items, tax_rate=self._config.tax_rate, discount=discount)

    def _apply_totals(self, record) -> None:
        """Recompute totals from all items and the discount on ``record``."""
        totals = self._totals(record.items, getattr(record, "discount_amount", Decimal("0")))
        record.subtotal = totals.subtotal
        record.tax_amount = totals.tax
        record.total_amount = totals.total
        if hasattr(record, "discount_amount"):
            record.discount_amount = totals.discount

    def _log_created(self, kind: str, record_id: int, number: str, amount: Decimal, created_by: int) -> None:
        logger.info(f"Created {kind} {number} (total {amount})")
        log(log_financial_event("created", kind, record_id, user_id=created_by, number=number, amount=amount))

    def _log_updated(self, kind: str, record_id: int, status: str) -> None:
        logger.info(f"Updated {kind} {record_id}: status {status}")
        log(log_financial_event("updated", kind, record_id, status=status))

    def __repr__(self) -> str:
        return f"<FinancialService repo={type(self._repo).__name__}>"
