"""Abstract repository for Customer aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from invoicing.domain.model.customer import Customer


class CustomerRepository(ABC):

    @abstractmethod
    def next_id(self) -> str:
        """Generate the next unique customer ID."""

    @abstractmethod
    def get_by_id(self, customer_id: str) -> Customer | None:
        """Return a customer by its ID, or None if not found."""

    @abstractmethod
    def get_by_email(self, email: str) -> Customer | None:
        """Return a customer by email (case-insensitive), or None."""

    def exists(self, customer_id: str) -> bool:
        return self.get_by_id(customer_id) is not None

    @abstractmethod
    def list_all(self) -> list[Customer]:
        """Return every customer."""

    @abstractmethod
    def add(self, customer: Customer) -> None:
        """Stage a new customer."""

    @abstractmethod
    def update(self, customer: Customer) -> None:
        """Stage changes to a loaded customer."""

    @abstractmethod
    def remove(self, customer: Customer) -> None:
        """Stage the deletion of a customer."""
