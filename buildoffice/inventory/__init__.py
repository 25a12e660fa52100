"""
BuildOffice Inventory — suppliers, product catalogue and stock movements.

Usage:
    from buildoffice.inventory import InventoryService, ProductCreate

    inventory = InventoryService()
    cement = inventory.create_product(ProductCreate(name="Cement 50kg", unit_price=Decimal("12.50")))
"""

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
from buildoffice.inventory.service import InventoryService

__all__ = [
    "InMemoryInventoryRepository",
    "InventoryRepository",
    "InventoryService",
    "InventoryStats",
    "InventoryStatus",
    "MovementType",
    "Product",
    "ProductCreate",
    "ProductFilters",
    "ProductUpdate",
    "StockMovement",
    "StockMovementCreate",
    "Supplier",
    "SupplierCreate",
    "SupplierUpdate",
]
