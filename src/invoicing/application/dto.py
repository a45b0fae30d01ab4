"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data between the presentation and application layers without
exposing domain internals.  Money values are pre-formatted strings.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class LineSpec:
    """Input: one requested invoice line.

    ``line_id`` ties an edited line to its previous record; None means a
    new line.
    """

    product_id: str
    quantity: int
    line_id: int | None = None


@dataclass(frozen=True)
class InvoiceLineDTO:
    id: int | None
    product_id: str
    product_code: str
    product_name: str
    quantity: int
    unit_price: str  # formatted, e.g. "$100.00"
    subtotal: str


@dataclass(frozen=True)
class InvoiceDTO:
    id: int
    number: str
    customer_id: str
    customer_name: str
    issued_at: str
    status: str
    lines: list[InvoiceLineDTO]
    subtotal: str
    tax: str
    total: str


@dataclass(frozen=True)
class ProductDTO:
    id: str
    code: str
    name: str
    price: str
    stock: int
    active: bool
    low_stock: bool


@dataclass(frozen=True)
class CustomerDTO:
    id: str
    full_name: str
    email: str
    birth_date: str
    phone: str | None
    address: str | None
    active: bool


@dataclass(frozen=True)
class ProductSalesDTO:
    product_id: str
    code: str
    name: str
    quantity: int
    amount: str
    invoice_count: int


@dataclass(frozen=True)
class NextPurchaseDTO:
    customer_id: str
    customer_name: str
    purchase_count: int
    last_purchase: str
    average_days_between: int
    estimated_next_purchase: str
    outlook: str  # VENCIDA | PRÓXIMA | FUTURA


@dataclass(frozen=True)
class CustomerPurchasesDTO:
    customer_id: str
    full_name: str
    email: str
    age: int
    purchase_count: int
