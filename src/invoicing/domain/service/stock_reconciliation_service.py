"""Domain service: Stock Reconciliation.

Coordinates the cross-aggregate rule that an invoice holds stock for its
lines: creating or editing an invoice takes stock out of the products,
voiding, deleting or editing it puts stock back.  Every product it
touches is staged on the product repository; nothing is committed here.
"""

from __future__ import annotations

import logging

from invoicing.domain.exceptions import EntityNotFoundError, InsufficientStockError
from invoicing.domain.model.invoice import Invoice, InvoiceLine
from invoicing.domain.model.value_objects import Quantity
from invoicing.domain.repository.product_repository import ProductRepository

LOGGER = logging.getLogger(__name__)


class StockReconciliationService:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def reserve_line(
        self,
        invoice: Invoice,
        product_id: str,
        quantity: int,
        line_id: int | None = None,
    ) -> InvoiceLine:
        """Add a line for *product_id* to the invoice and take its stock.

        The line captures the product's current price.  Raises
        EntityNotFoundError or InsufficientStockError before anything is
        mutated for this line.
        """
        qty = Quantity(quantity)
        product = self._product_repo.get_by_id(product_id)
        if product is None:
            raise EntityNotFoundError(f"Product with ID '{product_id}' not found")
        if not product.has_sufficient_stock(qty.value):
            raise InsufficientStockError(
                f"Insufficient stock for product '{product.name}'. "
                f"Available: {product.stock}, Requested: {qty.value}"
            )

        line = InvoiceLine(
            product_id=product.id,
            quantity=qty,
            unit_price=product.price,  # <-- price snapshot
            id=line_id,
        )
        invoice.add_line(line)

        product.reduce_stock(qty.value)
        self._product_repo.update(product)
        LOGGER.debug(
            "Reserved %d of product %s for invoice %s (stock now %d)",
            qty.value, product.id, invoice.number, product.stock,
        )
        return line

    def restore_for_invoice(self, invoice: Invoice) -> None:
        """Give back the stock held by every line of the invoice.

        Lines whose product no longer exists are skipped.
        """
        for line in invoice.lines:
            product = self._product_repo.get_by_id(line.product_id)
            if product is None:
                LOGGER.warning(
                    "Product %s of invoice %s no longer exists; stock not restored",
                    line.product_id, invoice.number,
                )
                continue
            product.increase_stock(line.quantity.value)
            self._product_repo.update(product)
            LOGGER.debug(
                "Restored %d of product %s from invoice %s (stock now %d)",
                line.quantity.value, product.id, invoice.number, product.stock,
            )
