"""Value Objects shared across the domain.

Value Objects are immutable and compared by value, not identity.
They encapsulate validation so invalid values can never exist.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_EVEN, Decimal, InvalidOperation

from invoicing.domain.exceptions import ValidationError

CENTS = Decimal("0.01")


@dataclass(frozen=True)
class Money:
    """Non-negative monetary amount.

    Uses Decimal so subtotals, tax and totals add up exactly.
    """

    amount: Decimal
    currency: str = "COP"

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            raise ValidationError(
                f"Money amount must be a Decimal, got {type(self.amount).__name__}"
            )
        if self.amount < Decimal("0"):
            raise ValidationError(
                f"Money amount cannot be negative, got {self.amount}"
            )

    # --- Arithmetic helpers ---------------------------------------------------

    def __add__(self, other: Money) -> Money:
        self._assert_same_currency(other)
        return Money(self.amount + other.amount, self.currency)

    def __mul__(self, factor: int) -> Money:
        if not isinstance(factor, int):
            raise TypeError(f"Can only multiply Money by int, got {type(factor).__name__}")
        return Money(self.amount * factor, self.currency)

    def apply_rate(self, rate: Decimal) -> Money:
        """Return ``self * rate`` rounded to cents (round half to even)."""
        value = (self.amount * rate).quantize(CENTS, rounding=ROUND_HALF_EVEN)
        return Money(value, self.currency)

    @property
    def is_zero(self) -> bool:
        return self.amount == 0

    # --- Display --------------------------------------------------------------

    def __str__(self) -> str:
        return f"${self.amount:,.2f}"

    # --- Internal helpers -----------------------------------------------------

    def _assert_same_currency(self, other: Money) -> None:
        if self.currency != other.currency:
            raise ValidationError(
                f"Cannot combine {self.currency} with {other.currency}"
            )

    # --- Factories ------------------------------------------------------------

    @staticmethod
    def of(amount: str | float | int | Decimal) -> Money:
        """Convenient factory that coerces to Decimal safely."""
        try:
            return Money(Decimal(str(amount)))
        except (InvalidOperation, ValueError) as exc:
            raise ValidationError(f"Invalid money amount: {amount!r}") from exc

    @staticmethod
    def zero() -> Money:
        return Money(Decimal("0.00"))


@dataclass(frozen=True)
class Quantity:
    """A positive integer quantity.

    An invoice line cannot bill zero or negative units.
    """

    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ValidationError(
                f"Quantity must be an integer, got {type(self.value).__name__}"
            )
        if self.value <= 0:
            raise ValidationError("Quantity must be positive")

    def __str__(self) -> str:
        return str(self.value)
