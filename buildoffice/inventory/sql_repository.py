"""SQLAlchemy-backed InventoryRepository."""

from __future__ import annotations

from buildoffice.db.models import ProductRecord, StockMovementRecord, SupplierRecord
from buildoffice.db.records import RecordMapping, SqlRecordRepository
from buildoffice.inventory.models import Product, StockMovement, Supplier
from buildoffice.inventory.repository import InventoryRepository


class SqlInventoryRepository(SqlRecordRepository, InventoryRepository):
    mappings = {
        "supplier": RecordMapping(SupplierRecord, Supplier),
        "product": RecordMapping(ProductRecord, Product),
        "stock_movement": RecordMapping(StockMovementRecord, StockMovement),
    }
