"""
Invoice reminder selection and overdue marking.

An invoice needs a reminder when it is:
- Sent and due within ``due_soon_days`` days (past-due Sent invoices included)
- Overdue
- Partially paid
"""

from __future__ import annotations

from datetime import date
from typing import Iterable, List

from buildoffice.financial.models import Invoice, InvoiceStatus

DEFAULT_DUE_SOON_DAYS = 3


def needs_reminder(invoice: Invoice, today: date, due_soon_days: int = DEFAULT_DUE_SOON_DAYS) -> bool:
    if invoice.status == InvoiceStatus.SENT:
        return (invoice.due_date - today).days <= due_soon_days
    return invoice.status in (InvoiceStatus.OVERDUE, InvoiceStatus.PARTIAL)


def invoices_needing_reminders(
    invoices: Iterable[Invoice],
    today: date,
    due_soon_days: int = DEFAULT_DUE_SOON_DAYS,
) -> List[Invoice]:
    return [inv for inv in invoices if needs_reminder(inv, today, due_soon_days)]


def is_past_due(invoice: Invoice, today: date) -> bool:
    """Sent or Partial invoices whose due date has passed."""
    return (
        invoice.status in (InvoiceStatus.SENT, InvoiceStatus.PARTIAL)
        and invoice.due_date < today
    )
