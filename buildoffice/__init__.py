"""
BuildOffice — Construction back-office backend.

Subpackages:
    engine     — configuration, errors, audit logging
    db         — SQLAlchemy base, engine registry, table definitions
    documents  — folders, tags, documents and version history
    financial  — quotations, purchase orders, invoices, payments, reminders
"""

__version__ = "1.0.0"
__all__ = ["engine", "db", "documents", "financial"]
