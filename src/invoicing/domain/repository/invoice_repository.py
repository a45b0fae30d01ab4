"""Abstract repository for Invoice aggregate.

Invoices are always loaded together with their lines; removing an
invoice removes its lines.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from invoicing.domain.model.invoice import Invoice


class InvoiceRepository(ABC):

    @abstractmethod
    def get_by_id(self, invoice_id: int) -> Invoice | None:
        """Return an invoice with its lines, or None if not found."""

    @abstractmethod
    def get_by_number(self, number: str) -> Invoice | None:
        """Return an invoice by its unique number, or None."""

    @abstractmethod
    def list_all(self) -> list[Invoice]:
        """Return every invoice, newest first."""

    @abstractmethod
    def list_by_customer(self, customer_id: str) -> list[Invoice]:
        """Return a customer's invoices, newest first."""

    def list_issued_in(self, year: int) -> list[Invoice]:
        return [inv for inv in self.list_all() if inv.issued_at.year == year]

    def references_product(self, product_id: str) -> bool:
        """True if any invoice line points at the product."""
        return any(
            line.product_id == product_id
            for inv in self.list_all()
            for line in inv.lines
        )

    @abstractmethod
    def add(self, invoice: Invoice) -> None:
        """Stage a new invoice and assign its ID."""

    @abstractmethod
    def update(self, invoice: Invoice) -> None:
        """Stage changes to a loaded invoice, lines included."""

    @abstractmethod
    def remove(self, invoice: Invoice) -> None:
        """Stage the deletion of an invoice and its lines."""
