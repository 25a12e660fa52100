"""
Inventory repository interface and the in-memory implementation.

Records are grouped by kind ("supplier", "product", "stock_movement"). The
SQLAlchemy implementation lives in ``buildoffice.inventory.sql_repository``.
"""

from __future__ import annotations

from buildoffice.engine.records import InMemoryRecordRepository, RecordRepository

INVENTORY_KINDS = ("supplier", "product", "stock_movement")


class InventoryRepository(RecordRepository):
    """Persistence port for suppliers, products and stock movements."""

    kinds = INVENTORY_KINDS


class InMemoryInventoryRepository(InMemoryRecordRepository, InventoryRepository):
    pass
