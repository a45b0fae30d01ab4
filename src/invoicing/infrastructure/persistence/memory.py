"""In-memory unit of work and repositories.

Committed state lives in an ``InMemoryStore`` shared by every unit of
work opened on it.  A unit of work hands out deep copies of committed
entities (an identity map per unit of work), so mutating a loaded product
or invoice changes nothing until ``commit()``.  Commit checks optimistic
versions under the store lock and then swaps in the new state in one
step.
"""

from __future__ import annotations

import copy
import logging
import threading
from collections.abc import Callable, Iterable
from typing import Generic, TypeVar

from invoicing.domain.exceptions import ConflictError, StaleEntityError
from invoicing.domain.model.customer import Customer
from invoicing.domain.model.invoice import Invoice
from invoicing.domain.model.product import Product
from invoicing.domain.repository.customer_repository import CustomerRepository
from invoicing.domain.repository.invoice_repository import InvoiceRepository
from invoicing.domain.repository.product_repository import ProductRepository
from invoicing.domain.repository.unit_of_work import UnitOfWork

LOGGER = logging.getLogger(__name__)

K = TypeVar("K")
E = TypeVar("E")


class InMemoryStore:
    """Committed state: one dict per aggregate, keyed by ID."""

    def __init__(
        self,
        customers: Iterable[Customer] = (),
        products: Iterable[Product] = (),
        invoices: Iterable[Invoice] = (),
    ) -> None:
        self.lock = threading.RLock()
        self.customers: dict[str, Customer] = {}
        self.products: dict[str, Product] = {}
        self.invoices: dict[int, Invoice] = {}
        self.replace(
            {c.id: c for c in customers},
            {p.id: p for p in products},
            {i.id: i for i in invoices},  # type: ignore[misc]
        )

    def replace(
        self,
        customers: dict[str, Customer],
        products: dict[str, Product],
        invoices: dict[int, Invoice],
    ) -> None:
        self.customers = customers
        self.products = products
        self.invoices = invoices


class _Staging(Generic[K, E]):
    """Identity map plus pending adds, updates and removals of one aggregate."""

    def __init__(self, committed: Callable[[], dict[K, E]]) -> None:
        self._committed = committed
        self.reset()

    def reset(self) -> None:
        self.loaded: dict[K, E] = {}
        self.added: dict[K, E] = {}
        self.dirty: dict[K, E] = {}
        self.removed: dict[K, E] = {}

    @property
    def has_changes(self) -> bool:
        return bool(self.added or self.dirty or self.removed)

    def keys(self) -> set[K]:
        return (set(self._committed()) | set(self.added)) - set(self.removed)

    def get(self, key: K) -> E | None:
        if key in self.removed:
            return None
        if key in self.added:
            return self.added[key]
        if key not in self.loaded:
            entity = self._committed().get(key)
            if entity is None:
                return None
            self.loaded[key] = copy.deepcopy(entity)
        return self.loaded[key]

    def all(self) -> list[E]:
        keys = [k for k in self._committed() if k not in self.removed]
        entities = [self.get(k) for k in keys]
        entities.extend(e for k, e in self.added.items() if k not in self.removed)
        return entities  # type: ignore[return-value]

    def add(self, key: K, entity: E) -> None:
        self.removed.pop(key, None)
        self.added[key] = entity

    def update(self, key: K, entity: E) -> None:
        if key in self.added:
            self.added[key] = entity
            return
        self.loaded[key] = entity
        self.dirty[key] = entity

    def remove(self, key: K, entity: E) -> None:
        if self.added.pop(key, None) is not None:
            return
        self.dirty.pop(key, None)
        self.removed[key] = entity

    def pending(self) -> list[E]:
        return list(self.dirty.values()) + list(self.added.values())

    def check(self, committed: dict[K, E], label: str) -> None:
        """Refuse to commit over changes made by another unit of work."""
        for key in self.added:
            if key in committed:
                raise StaleEntityError(f"{label} '{key}' was created concurrently")
        for key, entity in list(self.dirty.items()) + list(self.removed.items()):
            current = committed.get(key)
            if current is None:
                raise StaleEntityError(f"{label} '{key}' was deleted concurrently")
            if getattr(current, "version", 0) != getattr(entity, "version", 0):
                raise StaleEntityError(
                    f"{label} '{key}' was modified concurrently; retry the operation"
                )

    def merged(self, committed: dict[K, E]) -> dict[K, E]:
        """Committed state with this staging applied (versions bumped)."""
        result = dict(committed)
        for key in self.removed:
            result.pop(key, None)
        for key, entity in list(self.dirty.items()) + list(self.added.items()):
            stored = copy.deepcopy(entity)
            if hasattr(stored, "version"):
                stored.version += 1  # type: ignore[attr-defined]
            result[key] = stored
        return result


def _next_numeric_id(keys: Iterable[str]) -> str:
    numeric = [int(k) for k in keys if str(k).isdigit()]
    return str(max(numeric, default=0) + 1)


class InMemoryCustomerRepository(CustomerRepository):

    def __init__(self, staging: _Staging[str, Customer]) -> None:
        self._staging = staging

    def next_id(self) -> str:
        return _next_numeric_id(self._staging.keys())

    def get_by_id(self, customer_id: str) -> Customer | None:
        return self._staging.get(customer_id)

    def get_by_email(self, email: str) -> Customer | None:
        for customer in self._staging.all():
            if customer.email.lower() == email.lower():
                return customer
        return None

    def list_all(self) -> list[Customer]:
        return self._staging.all()

    def add(self, customer: Customer) -> None:
        self._staging.add(customer.id, customer)

    def update(self, customer: Customer) -> None:
        self._staging.update(customer.id, customer)

    def remove(self, customer: Customer) -> None:
        self._staging.remove(customer.id, customer)


class InMemoryProductRepository(ProductRepository):

    def __init__(self, staging: _Staging[str, Product]) -> None:
        self._staging = staging

    def next_id(self) -> str:
        return _next_numeric_id(self._staging.keys())

    def get_by_id(self, product_id: str) -> Product | None:
        return self._staging.get(product_id)

    def get_by_code(self, code: str) -> Product | None:
        for product in self._staging.all():
            if product.code.lower() == code.lower():
                return product
        return None

    def list_all(self) -> list[Product]:
        return self._staging.all()

    def list_low_stock(self, threshold: int) -> list[Product]:
        low = [p for p in self._staging.all() if p.stock <= threshold]
        low.sort(key=lambda p: (p.stock, p.name.lower()))
        return low

    def add(self, product: Product) -> None:
        self._staging.add(product.id, product)

    def update(self, product: Product) -> None:
        self._staging.update(product.id, product)

    def remove(self, product: Product) -> None:
        self._staging.remove(product.id, product)


class InMemoryInvoiceRepository(InvoiceRepository):

    def __init__(self, staging: _Staging[int, Invoice]) -> None:
        self._staging = staging

    def get_by_id(self, invoice_id: int) -> Invoice | None:
        return self._staging.get(invoice_id)

    def get_by_number(self, number: str) -> Invoice | None:
        for invoice in self._staging.all():
            if invoice.number == number:
                return invoice
        return None

    def list_all(self) -> list[Invoice]:
        return _newest_first(self._staging.all())

    def list_by_customer(self, customer_id: str) -> list[Invoice]:
        return _newest_first(
            inv for inv in self._staging.all() if inv.customer_id == customer_id
        )

    def add(self, invoice: Invoice) -> None:
        if invoice.id is None:
            invoice.id = max(self._staging.keys(), default=0) + 1
        self._staging.add(invoice.id, invoice)

    def update(self, invoice: Invoice) -> None:
        self._staging.update(invoice.id, invoice)  # type: ignore[arg-type]

    def remove(self, invoice: Invoice) -> None:
        self._staging.remove(invoice.id, invoice)  # type: ignore[arg-type]


def _newest_first(invoices: Iterable[Invoice]) -> list[Invoice]:
    return sorted(invoices, key=lambda inv: (inv.issued_at, inv.id or 0), reverse=True)


class InMemoryUnitOfWork(UnitOfWork):

    def __init__(self, store: InMemoryStore | None = None) -> None:
        self._store = store if store is not None else InMemoryStore()
        self._customers: _Staging[str, Customer] = _Staging(lambda: self._store.customers)
        self._products: _Staging[str, Product] = _Staging(lambda: self._store.products)
        self._invoices: _Staging[int, Invoice] = _Staging(lambda: self._store.invoices)
        self.customers = InMemoryCustomerRepository(self._customers)
        self.products = InMemoryProductRepository(self._products)
        self.invoices = InMemoryInvoiceRepository(self._invoices)

    @property
    def store(self) -> InMemoryStore:
        return self._store

    # --- UnitOfWork interface -------------------------------------------------

    def begin(self) -> None:
        with self._store.lock:
            self._refresh()
        self._reset()

    def commit(self) -> None:
        stagings = (self._customers, self._products, self._invoices)
        if not any(s.has_changes for s in stagings):
            self._reset()
            return

        with self._store.lock:
            self._refresh()
            self._customers.check(self._store.customers, "Customer")
            self._products.check(self._store.products, "Product")
            self._invoices.check(self._store.invoices, "Invoice")
            self._check_invoice_numbers()
            self._assign_line_ids()

            customers = self._customers.merged(self._store.customers)
            products = self._products.merged(self._store.products)
            invoices = self._invoices.merged(self._store.invoices)

            self._persist(customers, products, invoices)
            self._store.replace(customers, products, invoices)

        LOGGER.debug(
            "Committed %d customer, %d product and %d invoice changes",
            *(len(s.added) + len(s.dirty) + len(s.removed) for s in stagings),
        )
        self._reset()

    def rollback(self) -> None:
        self._reset()

    # --- Hooks for durable subclasses -----------------------------------------

    def _refresh(self) -> None:
        """Reload committed state from the backing medium (no-op in memory)."""

    def _persist(
        self,
        customers: dict[str, Customer],
        products: dict[str, Product],
        invoices: dict[int, Invoice],
    ) -> None:
        """Write the new committed state (no-op in memory)."""

    # --- Internal helpers -----------------------------------------------------

    def _reset(self) -> None:
        self._customers.reset()
        self._products.reset()
        self._invoices.reset()

    def _check_invoice_numbers(self) -> None:
        taken = {
            inv.number
            for key, inv in self._store.invoices.items()
            if key not in self._invoices.removed
        }
        for invoice in self._invoices.added.values():
            if invoice.number in taken:
                raise ConflictError(f"Invoice number {invoice.number} already exists")

    def _assign_line_ids(self) -> None:
        staged = self._invoices.pending()
        used = {
            line.id
            for inv in list(self._store.invoices.values()) + staged
            for line in inv.lines
            if line.id is not None
        }
        next_id = max(used, default=0) + 1
        for invoice in staged:
            for line in invoice.lines:
                if line.id is None:
                    line.id = next_id
                    next_id += 1
