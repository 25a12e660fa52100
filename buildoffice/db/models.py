"""
BuildOffice Tables — SQLAlchemy models for documents, financial records and inventory.

Tables defined here:
1. document_folders    — Folder tree (self-referencing parent_id)
2. document_tags       — Tag catalogue
3. documents           — Document metadata (current file name/size)
4. document_versions   — Append-only version history
5. document_tag_links  — Document ↔ Tag junction, ordered by position
6. record_sequences    — Last issued number per record kind
7. quotations, quotation_items
8. purchase_orders, purchase_order_items
9. invoices, invoice_items, payments
10. suppliers, products, stock_movements
"""

from __future__ import annotations

from sqlalchemy import (
    JSON,
    BigInteger,
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from buildoffice.db.base import Base, TimestampMixin


# ---------------------------------------------------------------------------
# 1. Folders
# ---------------------------------------------------------------------------

class FolderRecord(Base, TimestampMixin):
    __tablename__ = "document_folders"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    parent_id = Column(Integer, ForeignKey("document_folders.id"), nullable=True, index=True)
    path = Column(String(1000), nullable=False)

    def __repr__(self) -> str:
        return f"<FolderRecord(id={self.id}, path='{self.path}')>"


# ---------------------------------------------------------------------------
# 2. Tags
# ---------------------------------------------------------------------------

class TagRecord(Base):
    __tablename__ = "document_tags"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    color = Column(String(7), nullable=False)

    def __repr__(self) -> str:
        return f"<TagRecord(id={self.id}, name='{self.name}')>"


# ---------------------------------------------------------------------------
# 3. Documents
# ---------------------------------------------------------------------------

class DocumentRecord(Base):
    __tablename__ = "documents"

    id = Column(Integer, primary_key=True, autoincrement=True)
    file_name = Column(String(500), nullable=False)
    original_name = Column(String(500), nullable=False)
    file_size = Column(BigInteger, nullable=False)
    file_type = Column(String(20), nullable=False)
    mime_type = Column(String(100), nullable=False)
    category = Column(String(50), nullable=False, index=True)
    status = Column(String(20), default="Active", nullable=False, index=True)
    description = Column(Text, nullable=True)
    folder_id = Column(Integer, ForeignKey("document_folders.id"), nullable=True, index=True)
    project_id = Column(Integer, nullable=True, index=True)
    uploaded_by = Column(Integer, nullable=False)
    uploaded_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)
    download_url = Column(String(500), default="", nullable=False)
    preview_url = Column(String(500), nullable=True)
    thumbnail_url = Column(String(500), nullable=True)
    # "metadata" is reserved on declarative classes
    extra_metadata = Column("metadata", JSON, default=dict, nullable=False)

    versions = relationship(
        "DocumentVersionRecord",
        back_populates="document",
        cascade="all, delete-orphan",
        order_by="DocumentVersionRecord.id",
        lazy="selectin",
    )
    tag_links = relationship(
        "DocumentTagLink",
        cascade="all, delete-orphan",
        order_by="DocumentTagLink.position",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<DocumentRecord(id={self.id}, file_name='{self.file_name}')>"


# ---------------------------------------------------------------------------
# 4. Document versions
# ---------------------------------------------------------------------------

class DocumentVersionRecord(Base):
    __tablename__ = "document_versions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    document_id = Column(Integer, ForeignKey("documents.id", ondelete="CASCADE"), nullable=False)
    version = Column(String(20), nullable=False)
    file_name = Column(String(500), nullable=False)
    file_size = Column(BigInteger, nullable=False)
    uploaded_by = Column(Integer, nullable=False)
    uploaded_at = Column(DateTime(timezone=True), nullable=False)
    change_log = Column(String(1000), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    document = relationship("DocumentRecord", back_populates="versions")

    __table_args__ = (
        UniqueConstraint("document_id", "version", name="uq_document_version"),
        Index("idx_document_versions_active", "document_id", "is_active"),
    )


# ---------------------------------------------------------------------------
# 5. Document ↔ Tag junction
# ---------------------------------------------------------------------------

class DocumentTagLink(Base):
    __tablename__ = "document_tag_links"

    document_id = Column(Integer, ForeignKey("documents.id", ondelete="CASCADE"), primary_key=True)
    tag_id = Column(Integer, ForeignKey("document_tags.id", ondelete="CASCADE"), primary_key=True)
    position = Column(Integer, default=0, nullable=False)

    tag = relationship("TagRecord", lazy="selectin")


# ---------------------------------------------------------------------------
# 6. Record sequences (quotation / purchase order / invoice numbers)
# ---------------------------------------------------------------------------

class RecordSequence(Base):
    __tablename__ = "record_sequences"

    kind = Column(String(50), primary_key=True)
    last_value = Column(Integer, default=0, nullable=False)


# Line item columns copied to and from LineItem records
LINE_ITEM_FIELDS = ("product_id", "quantity", "unit_price", "description")


class LineItemMixin:
    id = Column(Integer, primary_key=True, autoincrement=True)
    product_id = Column(Integer, nullable=True)
    quantity = Column(Numeric(14, 4), nullable=False)
    unit_price = Column(Numeric(14, 4), nullable=False)
    description = Column(Text, nullable=True)
    position = Column(Integer, default=0, nullable=False)


# ---------------------------------------------------------------------------
# 7. Quotations
# ---------------------------------------------------------------------------

class QuotationRecord(Base, TimestampMixin):
    __tablename__ = "quotations"

    id = Column(Integer, primary_key=True, autoincrement=True)
    quotation_number = Column(String(50), unique=True, nullable=False)
    customer_id = Column(Integer, nullable=False, index=True)
    project_id = Column(Integer, nullable=True, index=True)
    subtotal = Column(Numeric(14, 2), default=0, nullable=False)
    tax_amount = Column(Numeric(14, 2), default=0, nullable=False)
    discount_amount = Column(Numeric(14, 2), default=0, nullable=False)
    total_amount = Column(Numeric(14, 2), default=0, nullable=False)
    status = Column(String(20), default="Draft", nullable=False, index=True)
    valid_until = Column(Date, nullable=True)
    notes = Column(Text, nullable=True)
    created_by = Column(Integer, nullable=False)

    items = relationship(
        "QuotationItemRecord",
        cascade="all, delete-orphan",
        order_by="QuotationItemRecord.position",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<QuotationRecord(id={self.id}, number='{self.quotation_number}')>"


class QuotationItemRecord(Base, LineItemMixin):
    __tablename__ = "quotation_items"

    quotation_id = Column(Integer, ForeignKey("quotations.id", ondelete="CASCADE"), nullable=False, index=True)


# ---------------------------------------------------------------------------
# 8. Purchase orders
# ---------------------------------------------------------------------------

class PurchaseOrderRecord(Base, TimestampMixin):
    __tablename__ = "purchase_orders"

    id = Column(Integer, primary_key=True, autoincrement=True)
    purchase_order_number = Column(String(50), unique=True, nullable=False)
    supplier_id = Column(Integer, nullable=False, index=True)
    quotation_id = Column(Integer, ForeignKey("quotations.id", ondelete="SET NULL"), nullable=True)
    subtotal = Column(Numeric(14, 2), default=0, nullable=False)
    tax_amount = Column(Numeric(14, 2), default=0, nullable=False)
    total_amount = Column(Numeric(14, 2), default=0, nullable=False)
    status = Column(String(20), default="Pending", nullable=False, index=True)
    order_date = Column(Date, nullable=False)
    expected_delivery_date = Column(Date, nullable=True)
    actual_delivery_date = Column(Date, nullable=True)
    notes = Column(Text, nullable=True)
    created_by = Column(Integer, nullable=False)

    items = relationship(
        "PurchaseOrderItemRecord",
        cascade="all, delete-orphan",
        order_by="PurchaseOrderItemRecord.position",
        lazy="selectin",
    )


class PurchaseOrderItemRecord(Base, LineItemMixin):
    __tablename__ = "purchase_order_items"

    purchase_order_id = Column(
        Integer, ForeignKey("purchase_orders.id", ondelete="CASCADE"), nullable=False, index=True
    )


# ---------------------------------------------------------------------------
# 9. Invoices and payments
# ---------------------------------------------------------------------------

class InvoiceRecord(Base, TimestampMixin):
    __tablename__ = "invoices"

    id = Column(Integer, primary_key=True, autoincrement=True)
    invoice_number = Column(String(50), unique=True, nullable=False)
    customer_id = Column(Integer, nullable=False, index=True)
    purchase_order_id = Column(Integer, ForeignKey("purchase_orders.id", ondelete="SET NULL"), nullable=True)
    subtotal = Column(Numeric(14, 2), default=0, nullable=False)
    tax_amount = Column(Numeric(14, 2), default=0, nullable=False)
    discount_amount = Column(Numeric(14, 2), default=0, nullable=False)
    total_amount = Column(Numeric(14, 2), default=0, nullable=False)
    status = Column(String(20), default="Draft", nullable=False, index=True)
    issue_date = Column(Date, nullable=False)
    due_date = Column(Date, nullable=False, index=True)
    paid_date = Column(Date, nullable=True)
    notes = Column(Text, nullable=True)
    created_by = Column(Integer, nullable=False)

    items = relationship(
        "InvoiceItemRecord",
        cascade="all, delete-orphan",
        order_by="InvoiceItemRecord.position",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<InvoiceRecord(id={self.id}, number='{self.invoice_number}')>"


class InvoiceItemRecord(Base, LineItemMixin):
    __tablename__ = "invoice_items"

    invoice_id = Column(Integer, ForeignKey("invoices.id", ondelete="CASCADE"), nullable=False, index=True)


class PaymentRecord(Base):
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    invoice_id = Column(Integer, ForeignKey("invoices.id", ondelete="CASCADE"), nullable=False, index=True)
    amount = Column(Numeric(14, 2), nullable=False)
    payment_method = Column(String(50), nullable=False)
    payment_date = Column(Date, nullable=False)
    status = Column(String(20), default="Paid", nullable=False)
    transaction_id = Column(String(100), nullable=True)
    notes = Column(Text, nullable=True)
    created_by = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)


# ---------------------------------------------------------------------------
# 10. Inventory: suppliers, products, stock movements
# ---------------------------------------------------------------------------

class SupplierRecord(Base, TimestampMixin):
    __tablename__ = "suppliers"

    id = Column(Integer, primary_key=True, autoincrement=True)
    company_name = Column(String(255), nullable=False)
    contact_person = Column(String(255), nullable=True)
    email = Column(String(255), nullable=True)
    phone = Column(String(20), nullable=True)
    address = Column(Text, nullable=True)
    tax_number = Column(String(50), nullable=True)
    payment_terms = Column(String(100), nullable=True)
    rating = Column(Numeric(3, 2), default=0, nullable=False, index=True)
    status = Column(String(20), default="Active", nullable=False, index=True)

    def __repr__(self) -> str:
        return f"<SupplierRecord(id={self.id}, company_name='{self.company_name}')>"


class ProductRecord(Base, TimestampMixin):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, autoincrement=True)
    category_id = Column(Integer, nullable=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    sku = Column(String(100), unique=True, nullable=True)
    unit_price = Column(Numeric(14, 2), nullable=False)
    stock_quantity = Column(Integer, default=0, nullable=False)
    minimum_stock = Column(Integer, default=0, nullable=False)
    unit_of_measure = Column(String(50), nullable=True)
    supplier_id = Column(Integer, ForeignKey("suppliers.id", ondelete="SET NULL"), nullable=True, index=True)
    image_urls = Column(JSON, default=list, nullable=False)
    specifications = Column(JSON, default=dict, nullable=False)
    status = Column(String(20), default="Active", nullable=False, index=True)

    def __repr__(self) -> str:
        return f"<ProductRecord(id={self.id}, name='{self.name}')>"


class StockMovementRecord(Base):
    __tablename__ = "stock_movements"

    id = Column(Integer, primary_key=True, autoincrement=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)
    movement_type = Column(String(20), nullable=False)
    quantity = Column(Integer, nullable=False)
    reason = Column(String(500), nullable=True)
    reference_id = Column(Integer, nullable=True)
    reference_type = Column(String(50), nullable=True)
    created_by = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)
