"""Line item totals: subtotal, tax, discount and grand total."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, NamedTuple, Union

from buildoffice.engine.errors import ValidationError
from buildoffice.financial.models import LineItemInput

CENT = Decimal("0.01")
DEFAULT_TAX_RATE = Decimal("0.10")


class Totals(NamedTuple):
    subtotal: Decimal
    tax: Decimal
    discount: Decimal
    total: Decimal


def money(value: Union[Decimal, int, str]) -> Decimal:
    """Quantize to two decimal places, half-up."""
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def compute_totals(
    items: Iterable[LineItemInput],
    tax_rate: Decimal = DEFAULT_TAX_RATE,
    discount: Decimal = Decimal("0"),
) -> Totals:
    """
    subtotal = sum(quantity * unit_price)
    tax      = subtotal * tax_rate
    total    = subtotal + tax - discount

    Each component is quantized before the total, so the shown parts add up.

    Raises:
        ValidationError: the discount exceeds subtotal + tax (total would be negative).
    """
    subtotal = money(sum((item.quantity * item.unit_price for item in items), Decimal("0")))
    tax = money(subtotal * tax_rate)
    discount = money(discount)
    if discount > subtotal + tax:
        raise ValidationError(
            f"Discount ({discount}) exceeds subtotal plus tax ({subtotal + tax})",
            object_ref="financial.totals",
            validation_errors=[{"field": "discount_amount", "error": "exceeds total"}],
        )
    return Totals(subtotal, tax, discount, subtotal + tax - discount)
