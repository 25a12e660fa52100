"""
BuildOffice Inventory Models — suppliers, products and stock movements.

``Product.is_low_stock`` is derived: stock at or below the minimum.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, computed_field


class InventoryStatus(str, Enum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"


class MovementType(str, Enum):
    IN = "IN"
    OUT = "OUT"
    ADJUSTMENT = "ADJUSTMENT"


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------

class Supplier(BaseModel):
    id: Optional[int] = None
    company_name: str
    contact_person: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    tax_number: Optional[str] = None
    payment_terms: Optional[str] = None
    rating: Decimal = Field(default=Decimal("0"), ge=0, le=5)
    status: InventoryStatus = InventoryStatus.ACTIVE
    created_at: datetime
    updated_at: datetime


class Product(BaseModel):
    id: Optional[int] = None
    category_id: Optional[int] = None
    name: str
    description: Optional[str] = None
    sku: Optional[str] = None
    unit_price: Decimal = Field(ge=0)
    stock_quantity: int = Field(default=0, ge=0)
    minimum_stock: int = Field(default=0, ge=0)
    unit_of_measure: Optional[str] = None
    supplier_id: Optional[int] = None
    image_urls: List[str] = Field(default_factory=list)
    specifications: Dict[str, Any] = Field(default_factory=dict)
    status: InventoryStatus = InventoryStatus.ACTIVE
    created_at: datetime
    updated_at: datetime

    @computed_field  # type: ignore[misc]
    @property
    def is_low_stock(self) -> bool:
        return self.stock_quantity <= self.minimum_stock


class StockMovement(BaseModel):
    id: Optional[int] = None
    product_id: int
    movement_type: MovementType
    quantity: int
    reason: Optional[str] = None
    reference_id: Optional[int] = None
    reference_type: Optional[str] = None
    created_by: int
    created_at: datetime


class InventoryStats(BaseModel):
    total_products: int
    low_stock_count: int
    total_value: Decimal
    active_suppliers: int


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

class SupplierCreate(BaseModel):
    company_name: str = Field(min_length=1)
    contact_person: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    tax_number: Optional[str] = None
    payment_terms: Optional[str] = None


class SupplierUpdate(BaseModel):
    """Only fields present in ``model_fields_set`` are applied."""
    company_name: Optional[str] = Field(default=None, min_length=1)
    contact_person: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    tax_number: Optional[str] = None
    payment_terms: Optional[str] = None
    rating: Optional[Decimal] = Field(default=None, ge=0, le=5)
    status: Optional[InventoryStatus] = None


class ProductCreate(BaseModel):
    category_id: Optional[int] = None
    name: str = Field(min_length=1)
    description: Optional[str] = None
    sku: Optional[str] = None
    unit_price: Decimal = Field(ge=0)
    stock_quantity: int = Field(default=0, ge=0)
    minimum_stock: int = Field(default=0, ge=0)
    unit_of_measure: Optional[str] = None
    supplier_id: Optional[int] = None
    image_urls: List[str] = Field(default_factory=list)
    specifications: Dict[str, Any] = Field(default_factory=dict)


class ProductUpdate(BaseModel):
    """Only fields present in ``model_fields_set`` are applied. Stock changes go through movements."""
    category_id: Optional[int] = None
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    sku: Optional[str] = None
    unit_price: Optional[Decimal] = Field(default=None, ge=0)
    minimum_stock: Optional[int] = Field(default=None, ge=0)
    unit_of_measure: Optional[str] = None
    supplier_id: Optional[int] = None
    image_urls: Optional[List[str]] = None
    specifications: Optional[Dict[str, Any]] = None
    status: Optional[InventoryStatus] = None


class ProductFilters(BaseModel):
    search: Optional[str] = None
    category_id: Optional[int] = None
    supplier_id: Optional[int] = None
    status: Optional[InventoryStatus] = None
    low_stock: bool = False


class StockMovementCreate(BaseModel):
    """
    IN adds ``quantity`` and OUT removes it (both must be positive).
    ADJUSTMENT applies ``quantity`` as a signed correction.
    """
    product_id: int
    movement_type: MovementType
    quantity: int
    reason: Optional[str] = None
    reference_id: Optional[int] = None
    reference_type: Optional[str] = None
