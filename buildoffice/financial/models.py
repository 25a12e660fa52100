"""
BuildOffice Financial Models — quotations, purchase orders, invoices, payments.

Amounts are Decimal throughout. Stored totals are quantized to two places;
line item ``total_price`` is derived from quantity and unit price.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, computed_field


class QuotationStatus(str, Enum):
    DRAFT = "Draft"
    SENT = "Sent"
    APPROVED = "Approved"
    REJECTED = "Rejected"
    EXPIRED = "Expired"


class PurchaseOrderStatus(str, Enum):
    PENDING = "Pending"
    APPROVED = "Approved"
    DELIVERED = "Delivered"
    COMPLETED = "Completed"


class InvoiceStatus(str, Enum):
    DRAFT = "Draft"
    SENT = "Sent"
    PAID = "Paid"
    PARTIAL = "Partial"
    OVERDUE = "Overdue"


class PaymentStatus(str, Enum):
    PENDING = "Pending"
    PAID = "Paid"
    PARTIAL = "Partial"
    OVERDUE = "Overdue"
    CANCELLED = "Cancelled"


# ---------------------------------------------------------------------------
# Line items
# ---------------------------------------------------------------------------

class LineItemInput(BaseModel):
    product_id: Optional[int] = None
    quantity: Decimal = Field(gt=0)
    unit_price: Decimal = Field(ge=0)
    description: Optional[str] = None


class LineItem(LineItemInput):
    id: Optional[int] = None

    @computed_field  # type: ignore[misc]
    @property
    def total_price(self) -> Decimal:
        return self.quantity * self.unit_price


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------

class Quotation(BaseModel):
    id: Optional[int] = None
    quotation_number: str
    customer_id: int
    project_id: Optional[int] = None
    items: List[LineItem] = Field(default_factory=list)
    subtotal: Decimal = Decimal("0.00")
    tax_amount: Decimal = Decimal("0.00")
    discount_amount: Decimal = Decimal("0.00")
    total_amount: Decimal = Decimal("0.00")
    status: QuotationStatus = QuotationStatus.DRAFT
    valid_until: Optional[date] = None
    notes: Optional[str] = None
    created_by: int
    created_at: datetime
    updated_at: datetime


class PurchaseOrder(BaseModel):
    id: Optional[int] = None
    purchase_order_number: str
    supplier_id: int
    quotation_id: Optional[int] = None
    items: List[LineItem] = Field(default_factory=list)
    subtotal: Decimal = Decimal("0.00")
    tax_amount: Decimal = Decimal("0.00")
    total_amount: Decimal = Decimal("0.00")
    status: PurchaseOrderStatus = PurchaseOrderStatus.PENDING
    order_date: date
    expected_delivery_date: Optional[date] = None
    actual_delivery_date: Optional[date] = None
    notes: Optional[str] = None
    created_by: int
    created_at: datetime
    updated_at: datetime


class Invoice(BaseModel):
    id: Optional[int] = None
    invoice_number: str
    customer_id: int
    purchase_order_id: Optional[int] = None
    items: List[LineItem] = Field(default_factory=list)
    subtotal: Decimal = Decimal("0.00")
    tax_amount: Decimal = Decimal("0.00")
    discount_amount: Decimal = Decimal("0.00")
    total_amount: Decimal = Decimal("0.00")
    status: InvoiceStatus = InvoiceStatus.DRAFT
    issue_date: date
    due_date: date
    paid_date: Optional[date] = None
    notes: Optional[str] = None
    created_by: int
    created_at: datetime
    updated_at: datetime


class Payment(BaseModel):
    id: Optional[int] = None
    invoice_id: int
    amount: Decimal = Field(gt=0)
    payment_method: str
    payment_date: date
    status: PaymentStatus = PaymentStatus.PAID
    transaction_id: Optional[str] = None
    notes: Optional[str] = None
    created_by: int
    created_at: datetime


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

class QuotationCreate(BaseModel):
    customer_id: int
    project_id: Optional[int] = None
    valid_until: Optional[date] = None
    notes: Optional[str] = None
    discount_amount: Decimal = Field(default=Decimal("0"), ge=0)
    items: List[LineItemInput] = Field(default_factory=list)


class QuotationUpdate(BaseModel):
    """Only fields present in ``model_fields_set`` are applied."""
    status: Optional[QuotationStatus] = None
    notes: Optional[str] = None
    valid_until: Optional[date] = None
    discount_amount: Optional[Decimal] = Field(default=None, ge=0)


class PurchaseOrderCreate(BaseModel):
    supplier_id: int
    quotation_id: Optional[int] = None
    order_date: date
    expected_delivery_date: Optional[date] = None
    notes: Optional[str] = None
    items: List[LineItemInput] = Field(default_factory=list)


class PurchaseOrderUpdate(BaseModel):
    """Only fields present in ``model_fields_set`` are applied."""
    status: Optional[PurchaseOrderStatus] = None
    expected_delivery_date: Optional[date] = None
    actual_delivery_date: Optional[date] = None
    notes: Optional[str] = None


class InvoiceCreate(BaseModel):
    customer_id: int
    purchase_order_id: Optional[int] = None
    issue_date: date
    due_date: date
    notes: Optional[str] = None
    discount_amount: Decimal = Field(default=Decimal("0"), ge=0)
    items: List[LineItemInput] = Field(default_factory=list)


class InvoiceUpdate(BaseModel):
    """Only fields present in ``model_fields_set`` are applied."""
    status: Optional[InvoiceStatus] = None
    due_date: Optional[date] = None
    notes: Optional[str] = None
    discount_amount: Optional[Decimal] = Field(default=None, ge=0)


class PaymentCreate(BaseModel):
    invoice_id: int
    amount: Decimal = Field(gt=0)
    payment_method: str = Field(min_length=1)
    payment_date: date
    transaction_id: Optional[str] = None
    notes: Optional[str] = None
