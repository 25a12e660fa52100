"""
BuildOffice Inventory Service — suppliers, product catalogue and stock.

Handles:
- Supplier and product records with explicit update commands
- Product search (name/SKU/description substring) and filters
- Stock movements: IN/OUT/ADJUSTMENT change a product's stock, never below zero
- Low-stock listing and catalogue statistics
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional

from buildoffice.engine.errors import NotFoundError, ValidationError
from buildoffice.engine.logging import log, log_inventory_event
from buildoffice.inventory.models import (
    InventoryStats,
    InventoryStatus,
    MovementType,
    Product,
    ProductCreate,
    ProductFilters,
    ProductUpdate,
    StockMovement,
    StockMovementCreate,
    Supplier,
    SupplierCreate,
    SupplierUpdate,
)
from buildoffice.inventory.repository import InMemoryInventoryRepository, InventoryRepository

logger = logging.getLogger("buildoffice.inventory.service")


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _contains(value: Optional[str], needle: str) -> bool:
    return value is not None and needle in value.lower()


class InventoryService:
    """Supplier, product and stock workflows over an InventoryRepository."""

    def __init__(self, repository: Optional[InventoryRepository] = None):
        self._repo = repository or InMemoryInventoryRepository()

    # -------------------------------------------------------------------
    # Suppliers
    # -------------------------------------------------------------------

    def list_suppliers(
        self, search: Optional[str] = None, status: Optional[InventoryStatus] = None
    ) -> List[Supplier]:
        suppliers = self._repo.list("supplier")
        if search:
            needle = search.lower()
            suppliers = [
                s for s in suppliers
                if _contains(s.company_name, needle)
                or _contains(s.contact_person, needle)
                or _contains(s.email, needle)
            ]
        if status is not None:
            suppliers = [s for s in suppliers if s.status == status]
        return suppliers

    def get_supplier(self, supplier_id: int) -> Optional[Supplier]:
        return self._repo.get("supplier", supplier_id)

    def create_supplier(self, data: SupplierCreate) -> Supplier:
        now = _now()
        supplier = self._repo.add(
            "supplier",
            Supplier(**data.model_dump(), status=InventoryStatus.ACTIVE, created_at=now, updated_at=now),
        )
        logger.info(f"Created supplier {supplier.id} '{supplier.company_name}'")
        log(log_inventory_event("created", "supplier", supplier.id))
        return supplier

    def update_supplier(self, supplier_id: int, changes: SupplierUpdate) -> Supplier:
        supplier = self._require_supplier(supplier_id)
        fields = changes.model_fields_set
        for name in fields:
            value = getattr(changes, name)
            if value is None and name in ("company_name", "rating", "status"):
                continue
            setattr(supplier, name, value)
        supplier.updated_at = _now()
        supplier = self._repo.save("supplier", supplier)
        logger.info(f"Updated supplier {supplier_id}: {sorted(fields)}")
        log(log_inventory_event("updated", "supplier", supplier_id))
        return supplier

    # -------------------------------------------------------------------
    # Products
    # -------------------------------------------------------------------

    def list_products(self, filters: Optional[ProductFilters] = None) -> List[Product]:
        products = self._repo.list("product")
        if filters is None:
            return products
        if filters.search:
            needle = filters.search.lower()
            products = [
                p for p in products
                if _contains(p.name, needle) or _contains(p.sku, needle) or _contains(p.description, needle)
            ]
        if filters.category_id is not None:
            products = [p for p in products if p.category_id == filters.category_id]
        if filters.supplier_id is not None:
            products = [p for p in products if p.supplier_id == filters.supplier_id]
        if filters.status is not None:
            products = [p for p in products if p.status == filters.status]
        if filters.low_stock:
            products = [p for p in products if p.is_low_stock]
        return products

    def get_product(self, product_id: int) -> Optional[Product]:
        return self._repo.get("product", product_id)

    def create_product(self, data: ProductCreate) -> Product:
        if data.supplier_id is not None:
            self._require_supplier(data.supplier_id)
        now = _now()
        product = self._repo.add(
            "product",
            Product(**data.model_dump(), status=InventoryStatus.ACTIVE, created_at=now, updated_at=now),
        )
        logger.info(f"Created product {product.id} '{product.name}' (stock {product.stock_quantity})")
        log(log_inventory_event("created", "product", product.id, stock=product.stock_quantity))
        return product

    def update_product(self, product_id: int, changes: ProductUpdate) -> Product:
        product = self._require_product(product_id)
        fields = changes.model_fields_set
        if "supplier_id" in fields and changes.supplier_id is not None:
            self._require_supplier(changes.supplier_id)
        for name in ("category_id", "description", "sku", "unit_of_measure", "supplier_id"):
            if name in fields:
                setattr(product, name, getattr(changes, name))
        for name in ("name", "unit_price", "minimum_stock", "image_urls", "specifications", "status"):
            if name in fields and getattr(changes, name) is not None:
                setattr(product, name, getattr(changes, name))
        product.updated_at = _now()
        product = self._repo.save("product", product)
        logger.info(f"Updated product {product_id}: {sorted(fields)}")
        log(log_inventory_event("updated", "product", product_id))
        return product

    def delete_product(self, product_id: int) -> None:
        """Delete a product together with its stock movement history."""
        self._require_product(product_id)
        for movement in self.list_stock_movements(product_id):
            self._repo.remove("stock_movement", movement.id)
        self._repo.remove("product", product_id)
        logger.info(f"Deleted product {product_id}")
        log(log_inventory_event("deleted", "product", product_id))

    def low_stock_products(self) -> List[Product]:
        return [p for p in self._repo.list("product") if p.is_low_stock]

    # -------------------------------------------------------------------
    # Stock movements
    # -------------------------------------------------------------------

    def list_stock_movements(self, product_id: Optional[int] = None) -> List[StockMovement]:
        """Movements newest first, optionally for one product."""
        movements = self._repo.list("stock_movement")
        if product_id is not None:
            movements = [m for m in movements if m.product_id == product_id]
        return sorted(movements, key=lambda m: (m.created_at, m.id), reverse=True)

    def record_stock_movement(self, data: StockMovementCreate, created_by: int) -> StockMovement:
        """
        Record a movement and apply it to the product's stock.

        Raises:
            NotFoundError:   unknown product.
            ValidationError: non-positive IN/OUT quantity, zero adjustment, or
                             a result below zero stock.
        """
        product = self._require_product(data.product_id)
        delta = self._stock_delta(data)
        new_stock = product.stock_quantity + delta
        if new_stock < 0:
            raise ValidationError(
                f"Not enough stock for product {product.id}: {product.stock_quantity} on hand, "
                f"movement of {delta}",
                object_ref=f"inventory.product.{product.id}",
                validation_errors=[{"field": "quantity", "error": "insufficient stock"}],
            )

        movement = self._repo.add(
            "stock_movement",
            StockMovement(**data.model_dump(), created_by=created_by, created_at=_now()),
        )
        product.stock_quantity = new_stock
        product.updated_at = _now()
        self._repo.save("product", product)

        logger.info(
            f"Stock {data.movement_type.value} {delta:+d} on product {product.id}: now {new_stock}"
        )
        log(log_inventory_event(
            "stock_moved", "product", product.id, user_id=created_by, quantity=delta, stock=new_stock,
        ))
        return movement

    @staticmethod
    def _stock_delta(data: StockMovementCreate) -> int:
        if data.movement_type == MovementType.ADJUSTMENT:
            if data.quantity == 0:
                raise ValidationError(
                    "Adjustment quantity must not be zero",
                    object_ref="inventory.stock_movement",
                    validation_errors=[{"field": "quantity", "error": "zero"}],
                )
            return data.quantity
        if data.quantity <= 0:
            raise ValidationError(
                f"{data.movement_type.value} quantity must be positive",
                object_ref="inventory.stock_movement",
                validation_errors=[{"field": "quantity", "error": "not positive"}],
            )
        return data.quantity if data.movement_type == MovementType.IN else -data.quantity

    # -------------------------------------------------------------------
    # Statistics
    # -------------------------------------------------------------------

    def stats(self) -> InventoryStats:
        products = self._repo.list("product")
        return InventoryStats(
            total_products=len(products),
            low_stock_count=sum(1 for p in products if p.is_low_stock),
            total_value=sum((p.unit_price * p.stock_quantity for p in products), Decimal("0")),
            active_suppliers=sum(
                1 for s in self._repo.list("supplier") if s.status == InventoryStatus.ACTIVE
            ),
        )

    # -------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------

    def _require_supplier(self, supplier_id: int) -> Supplier:
        supplier = self._repo.get("supplier", supplier_id)
        if supplier is None:
            raise NotFoundError("Supplier not found", record_type="supplier", record_id=supplier_id)
        return supplier

    def _require_product(self, product_id: int) -> Product:
        product = self._repo.get("product", product_id)
        if product is None:
            raise NotFoundError("Product not found", record_type="product", record_id=product_id)
        return product

    def __repr__(self) -> str:
        return f"<InventoryService repo={type(self._repo).__name__}>"
