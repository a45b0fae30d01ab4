"""Invoice aggregate, the core of the domain.

The Invoice is an aggregate root that owns its lines.  Totals are always
derived from the lines and every status change goes through a method that
enforces the lifecycle rules.  Stock movements are coordinated by the
application layer through the stock reconciliation service.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum

from invoicing.domain.exceptions import InvalidStateError, ValidationError
from invoicing.domain.model.value_objects import Money, Quantity

TAX_RATE = Decimal("0.19")
NUMBER_PREFIX = "FAC-"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InvoiceStatus(Enum):
    PENDING = "PENDING"
    PAID = "PAID"
    VOID = "VOID"


@dataclass
class InvoiceLine:
    """One product/quantity entry of an invoice.

    ``unit_price`` is the product price at the moment the line was
    created and is never re-read from the catalog.
    """

    product_id: str
    quantity: Quantity
    unit_price: Money  # locked at line-creation time
    id: int | None = None

    @property
    def subtotal(self) -> Money:
        return self.unit_price * self.quantity.value


@dataclass
class Invoice:
    """Aggregate root for billing documents.

    Use ``Invoice.open()`` for new invoices.  The ``__init__`` stays plain
    so repositories can reconstitute persisted invoices as they are.
    """

    id: int | None
    number: str
    customer_id: str
    issued_at: datetime
    lines: list[InvoiceLine] = field(default_factory=list)
    status: InvoiceStatus = InvoiceStatus.PENDING
    subtotal: Money = field(default_factory=Money.zero)
    tax: Money = field(default_factory=Money.zero)
    total: Money = field(default_factory=Money.zero)
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)
    version: int = 0

    # --- Factory (used for NEW invoices only) ---------------------------------

    @staticmethod
    def open(customer_id: str, issued_at: datetime, number: str | None = None) -> Invoice:
        """Start a new PENDING invoice with no lines yet."""
        if not customer_id:
            raise ValidationError("Customer is required")
        return Invoice(
            id=None,
            number=number or generate_number(issued_at),
            customer_id=customer_id,
            issued_at=issued_at,
            created_at=issued_at,
            updated_at=issued_at,
        )

    # --- Lines ----------------------------------------------------------------

    def add_line(self, line: InvoiceLine) -> None:
        """Append a line and recompute totals.

        A product can appear on at most one line of the same invoice.
        """
        if any(existing.product_id == line.product_id for existing in self.lines):
            raise ValidationError(
                f"Product '{line.product_id}' already has a line on this invoice"
            )
        self.lines.append(line)
        self.calculate_totals()

    def clear_lines(self) -> list[InvoiceLine]:
        """Remove every line and return the removed ones."""
        removed = list(self.lines)
        self.lines.clear()
        self.calculate_totals()
        return removed

    def calculate_totals(self) -> None:
        subtotal = Money.zero()
        for line in self.lines:
            subtotal = subtotal + line.subtotal
        self.subtotal = subtotal
        self.tax = subtotal.apply_rate(TAX_RATE)
        self.total = subtotal + self.tax

    # --- Edits ----------------------------------------------------------------

    @property
    def is_editable(self) -> bool:
        return self.status == InvoiceStatus.PENDING

    def ensure_editable(self) -> None:
        if not self.is_editable:
            raise InvalidStateError(
                f"Only PENDING invoices can be edited, current status: {self.status.value}"
            )

    def reassign_customer(self, customer_id: str) -> None:
        self.ensure_editable()
        if not customer_id:
            raise ValidationError("Customer is required")
        self.customer_id = customer_id
        self.touch()

    def ensure_deletable(self) -> None:
        if self.status == InvoiceStatus.PAID:
            raise InvalidStateError("Cannot delete a paid invoice")

    @property
    def holds_stock(self) -> bool:
        """True while the lines' quantities are still taken out of stock."""
        return self.status != InvoiceStatus.VOID

    # --- State transitions ----------------------------------------------------

    def mark_as_paid(self) -> None:
        """Transition PENDING|PAID -> PAID."""
        if self.status == InvoiceStatus.VOID:
            raise InvalidStateError("Cannot pay a voided invoice")
        self.status = InvoiceStatus.PAID
        self.touch()

    def void(self) -> None:
        """Transition PENDING|PAID -> VOID.

        Restoring stock for the lines is the caller's job and must happen
        exactly once, which is why voiding twice is rejected.
        """
        if self.status == InvoiceStatus.VOID:
            raise InvalidStateError("Invoice is already void")
        self.status = InvoiceStatus.VOID
        self.touch()

    def reopen(self) -> None:
        """Target PENDING: only valid for an invoice that is still PENDING."""
        if self.status != InvoiceStatus.PENDING:
            raise InvalidStateError(
                f"Cannot move a {self.status.value} invoice back to PENDING"
            )
        self.touch()

    def touch(self) -> None:
        self.updated_at = _utcnow()

    # --- Internal helpers -----------------------------------------------------

    def find_line(self, line_id: int) -> InvoiceLine | None:
        for line in self.lines:
            if line.id == line_id:
                return line
        return None


def generate_number(moment: datetime) -> str:
    """Invoice number encoding the UTC creation time: FAC-YYYYMMDDHHMMSS."""
    return NUMBER_PREFIX + moment.astimezone(timezone.utc).strftime("%Y%m%d%H%M%S")
