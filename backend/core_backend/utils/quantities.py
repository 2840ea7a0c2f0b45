"""
Decimal helpers for stock quantities.

Quantities are stored with a fixed number of decimal places (see
``QUANTITY_DECIMAL_PLACES``) and need-calculations round up to whole purchase
units so a deduction never falls short.
"""

from decimal import Decimal, ROUND_HALF_UP, ROUND_CEILING

from core_backend.config import get_erp_setting

ZERO = Decimal("0")


def to_decimal(value) -> Decimal:
    """Coerce ints, floats and strings to Decimal without float artifacts."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def quantize_quantity(value) -> Decimal:
    """Round a quantity half-up to the configured number of decimal places."""
    places = get_erp_setting("QUANTITY_DECIMAL_PLACES")
    return to_decimal(value).quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


def ceil_if_fractional(value):
    """
    Round ``value`` up to the next whole number when it has a fractional part.

    Returns:
        A ``(rounded, rounded_up)`` tuple; ``rounded_up`` tells whether the
        value changed.
    """
    value = to_decimal(value)
    whole = value.to_integral_value(rounding=ROUND_CEILING)
    if value > ZERO and whole != value:
        return whole, True
    return value, False
