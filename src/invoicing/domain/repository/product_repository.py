"""Abstract repository for Product aggregate.

Defined in the domain layer so the domain never depends on
infrastructure.  Concrete implementations live in the infrastructure
layer and stage their changes in a unit of work.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from invoicing.domain.model.product import Product


class ProductRepository(ABC):

    @abstractmethod
    def next_id(self) -> str:
        """Generate the next unique product ID."""

    @abstractmethod
    def get_by_id(self, product_id: str) -> Product | None:
        """Return a product by its ID, or None if not found."""

    @abstractmethod
    def get_by_code(self, code: str) -> Product | None:
        """Return a product by its SKU code (case-insensitive), or None."""

    @abstractmethod
    def list_all(self) -> list[Product]:
        """Return every product in the catalog."""

    @abstractmethod
    def list_low_stock(self, threshold: int) -> list[Product]:
        """Return products with ``stock <= threshold``, lowest stock first."""

    @abstractmethod
    def add(self, product: Product) -> None:
        """Stage a new product."""

    @abstractmethod
    def update(self, product: Product) -> None:
        """Stage changes to a loaded product (stock, price, ...)."""

    @abstractmethod
    def remove(self, product: Product) -> None:
        """Stage the deletion of a product."""
