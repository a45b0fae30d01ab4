"""Domain service: sales analytics.

Pure functions over already-loaded invoices.  VOID invoices never count
as sales.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from enum import Enum

from invoicing.domain.exceptions import InsufficientHistoryError, ValidationError
from invoicing.domain.model.customer import Customer
from invoicing.domain.model.invoice import Invoice, InvoiceStatus
from invoicing.domain.model.product import Product
from invoicing.domain.model.value_objects import Money

DUE_SOON_WINDOW = timedelta(days=7)
MIN_PURCHASES_FOR_ESTIMATE = 2


class PurchaseOutlook(Enum):
    OVERDUE = "VENCIDA"
    DUE_SOON = "PRÓXIMA"
    UPCOMING = "FUTURA"


@dataclass(frozen=True)
class ProductSales:
    product_id: str
    code: str
    name: str
    quantity: int
    amount: Money
    invoice_count: int


@dataclass(frozen=True)
class CustomerPurchases:
    customer: Customer
    age: int
    purchase_count: int


@dataclass(frozen=True)
class PurchaseEstimate:
    purchase_count: int
    last_purchase: datetime
    mean_gap_days: float
    estimated_next: datetime

    @property
    def average_days(self) -> int:
        """Mean gap rounded to the nearest whole day (for display)."""
        return round(self.mean_gap_days)


def sales_by_product(
    invoices: Iterable[Invoice],
    products: Mapping[str, Product],
    year: int,
) -> list[ProductSales]:
    """Aggregate non-VOID lines issued in *year*, biggest amount first."""
    quantities: dict[str, int] = {}
    amounts: dict[str, Money] = {}
    invoice_ids: dict[str, set[int | None]] = {}

    for invoice in invoices:
        if invoice.status == InvoiceStatus.VOID or invoice.issued_at.year != year:
            continue
        for line in invoice.lines:
            pid = line.product_id
            quantities[pid] = quantities.get(pid, 0) + line.quantity.value
            amounts[pid] = amounts.get(pid, Money.zero()) + line.subtotal
            invoice_ids.setdefault(pid, set()).add(invoice.id)

    rows = []
    for pid, qty in quantities.items():
        product = products.get(pid)
        rows.append(
            ProductSales(
                product_id=pid,
                code=product.code if product else "",
                name=product.name if product else "",
                quantity=qty,
                amount=amounts[pid],
                invoice_count=len(invoice_ids[pid]),
            )
        )
    rows.sort(key=lambda r: r.amount.amount, reverse=True)
    return rows


def estimate_next_purchase(invoices: Iterable[Invoice]) -> PurchaseEstimate:
    """Project the next purchase from the mean gap between past ones.

    Raises InsufficientHistoryError with fewer than two non-VOID invoices.
    """
    dates = sorted(
        inv.issued_at for inv in invoices if inv.status != InvoiceStatus.VOID
    )
    if len(dates) < MIN_PURCHASES_FOR_ESTIMATE:
        raise InsufficientHistoryError(
            "Customer needs at least 2 purchases to estimate the next one"
        )

    gaps = [
        (later - earlier).total_seconds() / 86400
        for earlier, later in zip(dates, dates[1:])
    ]
    mean_gap = sum(gaps) / len(gaps)
    last = dates[-1]
    return PurchaseEstimate(
        purchase_count=len(dates),
        last_purchase=last,
        mean_gap_days=mean_gap,
        estimated_next=last + timedelta(days=mean_gap),
    )


def classify_outlook(estimated_next: datetime, today: date) -> PurchaseOutlook:
    start_of_today = datetime.combine(today, time.min, tzinfo=estimated_next.tzinfo)
    if estimated_next < start_of_today:
        return PurchaseOutlook.OVERDUE
    if estimated_next <= start_of_today + DUE_SOON_WINDOW:
        return PurchaseOutlook.DUE_SOON
    return PurchaseOutlook.UPCOMING


def customers_by_age_and_purchases(
    customers: Iterable[Customer],
    invoices: Iterable[Invoice],
    max_age: int,
    date_from: date,
    date_to: date,
    today: date,
) -> list[CustomerPurchases]:
    """Customers no older than *max_age* who bought between the two dates.

    Both dates are inclusive and compared with the UTC issue date.  Only
    non-VOID invoices count as purchases.  Oldest customers come first.
    """
    if max_age < 0:
        raise ValidationError("Maximum age cannot be negative")
    if date_from > date_to:
        raise ValidationError("Start date must not be after end date")

    counts: dict[str, int] = {}
    for invoice in invoices:
        if invoice.status == InvoiceStatus.VOID:
            continue
        if date_from <= invoice.issued_at.date() <= date_to:
            counts[invoice.customer_id] = counts.get(invoice.customer_id, 0) + 1

    rows = [
        CustomerPurchases(customer=c, age=c.age(today), purchase_count=counts[c.id])
        for c in customers
        if c.id in counts and c.age(today) <= max_age
    ]
    rows.sort(key=lambda r: (r.customer.birth_date, r.customer.id))
    return rows
