"""Product aggregate.

Products live independently of invoices. They own the sellable stock
count, which invoices reserve on creation and give back on void, delete
or edit.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from invoicing.domain.exceptions import InsufficientStockError, ValidationError
from invoicing.domain.model.value_objects import Money

LOW_STOCK_THRESHOLD = 5


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Product:
    """A product in the catalog.

    Invariants:
    - ``stock`` is never negative
    - ``price`` is always greater than zero
    """

    id: str
    code: str
    name: str
    price: Money
    stock: int
    description: str | None = None
    active: bool = True
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)
    version: int = 0

    # --- Factory (used for NEW products only) ---------------------------------

    @staticmethod
    def create(
        product_id: str,
        code: str,
        name: str,
        price: Money,
        stock: int,
        description: str | None = None,
    ) -> Product:
        if not code or not code.strip():
            raise ValidationError("Product code is required")
        if not name or not name.strip():
            raise ValidationError("Product name is required")
        if price.is_zero:
            raise ValidationError("Product price must be greater than zero")
        if isinstance(stock, bool) or not isinstance(stock, int) or stock < 0:
            raise ValidationError("Product stock cannot be negative")
        return Product(
            id=product_id,
            code=code.strip(),
            name=name.strip(),
            price=price,
            stock=stock,
            description=description,
        )

    # --- Derived state --------------------------------------------------------

    def is_low_stock(self, threshold: int = LOW_STOCK_THRESHOLD) -> bool:
        return self.stock <= threshold

    @property
    def is_out_of_stock(self) -> bool:
        return self.stock == 0

    # --- Stock operations -----------------------------------------------------

    def has_sufficient_stock(self, quantity: int) -> bool:
        return self.stock >= quantity

    def reduce_stock(self, quantity: int) -> None:
        """Take *quantity* units out of stock.

        Raises InsufficientStockError and leaves stock untouched if the
        product cannot cover the request.  Persisting the change is the
        caller's job.
        """
        if quantity <= 0:
            raise ValidationError("Quantity to reduce must be positive")
        if not self.has_sufficient_stock(quantity):
            raise InsufficientStockError(
                f"Insufficient stock for product '{self.name}'. "
                f"Available: {self.stock}, Requested: {quantity}"
            )
        self.stock -= quantity
        self.updated_at = _utcnow()

    def increase_stock(self, quantity: int) -> None:
        """Put *quantity* units back (reverses a previous reduction)."""
        if quantity <= 0:
            raise ValidationError("Quantity to add must be greater than zero")
        self.stock += quantity
        self.updated_at = _utcnow()

    # --- Catalog edits --------------------------------------------------------

    def update_price(self, new_price: Money) -> None:
        """Change the product price.

        Existing invoice lines keep the price they captured when created.
        """
        if new_price.is_zero:
            raise ValidationError("Product price must be greater than zero")
        self.price = new_price
        self.updated_at = _utcnow()

    def rename(self, name: str) -> None:
        if not name or not name.strip():
            raise ValidationError("Product name is required")
        self.name = name.strip()
        self.updated_at = _utcnow()

    def change_code(self, code: str) -> None:
        if not code or not code.strip():
            raise ValidationError("Product code is required")
        self.code = code.strip()
        self.updated_at = _utcnow()

    def set_active(self, active: bool) -> None:
        self.active = active
        self.updated_at = _utcnow()
