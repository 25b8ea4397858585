"""
Common Value Objects

- Money: a non-negative amount in one of the currencies halls are priced in
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from shared.domain.base import ValueObject

SUPPORTED_CURRENCIES = ('INR', 'USD', 'EUR')
CENT = Decimal('0.01')


@dataclass(frozen=True)
class Money(ValueObject):
    """
    Money value object

    Amounts are quantized to two decimal places, matching the
    ``DecimalField(decimal_places=2)`` columns they are stored in.
    """
    amount: Decimal
    currency: str = 'INR'

    def __post_init__(self):
        try:
            amount = Decimal(str(self.amount))
        except InvalidOperation:
            raise ValueError(f"Invalid amount: {self.amount!r}")
        if amount < 0:
            raise ValueError("Amount cannot be negative")
        if self.currency not in SUPPORTED_CURRENCIES:
            raise ValueError(f"Unsupported currency: {self.currency}")
        object.__setattr__(self, 'amount', amount.quantize(CENT, rounding=ROUND_HALF_UP))

    def __str__(self):
        return f"{self.amount:,.2f} {self.currency}"

    def __repr__(self):
        return f"Money({self.amount}, '{self.currency}')"
