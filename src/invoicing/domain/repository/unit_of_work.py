"""Unit of work contract.

A use case opens one unit of work, loads and stages changes through its
repositories, and calls ``commit()`` once.  Leaving the ``with`` block
without committing discards every staged change.

Implementations must make ``commit()`` all-or-nothing and must refuse
(``StaleEntityError``) to overwrite a product or invoice that another
unit of work committed after it was loaded here.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from invoicing.domain.repository.customer_repository import CustomerRepository
from invoicing.domain.repository.invoice_repository import InvoiceRepository
from invoicing.domain.repository.product_repository import ProductRepository


class UnitOfWork(ABC):

    customers: CustomerRepository
    products: ProductRepository
    invoices: InvoiceRepository

    def __enter__(self) -> UnitOfWork:
        self.begin()
        return self

    def __exit__(self, *args: object) -> None:
        self.rollback()

    @abstractmethod
    def begin(self) -> None:
        """Start with an empty set of staged changes."""

    @abstractmethod
    def commit(self) -> None:
        """Persist every staged change atomically."""

    @abstractmethod
    def rollback(self) -> None:
        """Discard every staged change."""
