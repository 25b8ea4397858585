"""
Booking price derivation

The total amount is authoritative. The discount shown next to it is always
derived from the hall's base price:

    discount = clamp(base_price - total, 0, base_price)

A form may submit a total above the base price; on creation such a total
is clamped down to the base price first.
"""

from decimal import Decimal
from typing import Tuple


def derive_discount(base_price: Decimal, total: Decimal) -> Decimal:
    base_price = Decimal(base_price)
    if base_price <= 0:
        return Decimal('0')
    return min(max(base_price - Decimal(total), Decimal('0')), base_price)


def price_booking(base_price: Decimal, submitted_total: Decimal) -> Tuple[Decimal, Decimal]:
    """Return ``(total, discount)`` for a new booking."""
    base_price = Decimal(base_price)
    total = Decimal(submitted_total)
    if base_price > 0:
        total = min(total, base_price)
    return total, derive_discount(base_price, total)
