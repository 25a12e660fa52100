"""
Document version numbering.

Version numbers are decimal strings with one decimal place. Every upload
adds 0.1: "1.0" -> "1.1" ... "1.9" -> "2.0". Arithmetic is done in Decimal
so the result never depends on binary float rounding.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from buildoffice.engine.errors import ValidationError

INITIAL_VERSION = "1.0"
VERSION_STEP = Decimal("0.1")
_ONE_PLACE = Decimal("0.1")


def parse_version(version: str) -> Decimal:
    """Parse a version string into a Decimal, rejecting anything non-numeric."""
    try:
        value = Decimal(version)
    except (InvalidOperation, TypeError):
        raise ValidationError(
            f"Invalid version number: {version!r}",
            validation_errors=[{"field": "version", "error": "not a decimal number"}],
        )
    if not value.is_finite() or value < 0:
        raise ValidationError(
            f"Invalid version number: {version!r}",
            validation_errors=[{"field": "version", "error": "must be a finite, non-negative number"}],
        )
    return value


def next_version_number(current: str) -> str:
    """
    Return the version that follows ``current``.

    Inputs with more than one decimal place ("1.25") are incremented first and
    then rounded half-up to one place ("1.4"); the result is always strictly
    greater than the input.
    """
    value = parse_version(current) + VERSION_STEP
    return str(value.quantize(_ONE_PLACE, rounding=ROUND_HALF_UP))