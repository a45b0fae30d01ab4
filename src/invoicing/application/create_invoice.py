"""Application service: Create Invoice use case.

Orchestrates customer lookup, per-line stock reservation and the invoice
aggregate inside one unit of work.  If any line fails, nothing is
committed: earlier stock reductions only ever existed in the unit of
work's copies of the products.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timezone

from invoicing.application.cancellation import CancellationToken, check_cancelled
from invoicing.application.dto import InvoiceDTO, LineSpec
from invoicing.application.mapping import invoice_to_dto
from invoicing.application.result import Result
from invoicing.domain.exceptions import DomainException, EntityNotFoundError, ValidationError
from invoicing.domain.model.invoice import Invoice, generate_number
from invoicing.domain.repository.invoice_repository import InvoiceRepository
from invoicing.domain.repository.unit_of_work import UnitOfWork
from invoicing.domain.service.stock_reconciliation_service import (
    StockReconciliationService,
)

LOGGER = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def validate_line_specs(line_specs: list[LineSpec]) -> None:
    """Reject an empty line list or the same product requested twice."""
    if not line_specs:
        raise ValidationError("Invoice must contain at least one line")
    seen: set[str] = set()
    for spec in line_specs:
        if spec.product_id in seen:
            raise ValidationError(
                f"Product '{spec.product_id}' appears more than once"
            )
        seen.add(spec.product_id)


def unique_number(invoices: InvoiceRepository, moment: datetime) -> str:
    """Timestamp-based number, suffixed when that second is already used."""
    base = generate_number(moment)
    number, n = base, 1
    while invoices.get_by_number(number) is not None:
        n += 1
        number = f"{base}-{n}"
    return number


class CreateInvoiceHandler:

    def __init__(
        self,
        uow: UnitOfWork,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._uow = uow
        self._clock = clock

    def handle(
        self,
        customer_id: str,
        line_specs: list[LineSpec],
        cancel: CancellationToken | None = None,
    ) -> Result[InvoiceDTO]:
        """Create a new PENDING invoice.

        Steps:
        1. Validate the request and make sure the customer exists.
        2. For each line, in order: load the product, check stock, snapshot
           the price and reduce stock.
        3. Compute totals and commit everything at once.
        4. Return the reloaded invoice.
        """
        LOGGER.info("Creating invoice for customer %s", customer_id)
        try:
            with self._uow:
                invoice = self._build(customer_id, line_specs)
                check_cancelled(cancel)
                self._uow.commit()
                created = self._uow.invoices.get_by_id(invoice.id)  # type: ignore[arg-type]
                dto = invoice_to_dto(created, self._uow)  # type: ignore[arg-type]
        except DomainException as exc:
            LOGGER.warning("Could not create invoice for customer %s: %s", customer_id, exc)
            return Result.from_exception(exc)

        LOGGER.info("Invoice %s created (total %s)", dto.number, dto.total)
        return Result.success(dto)

    def _build(self, customer_id: str, line_specs: list[LineSpec]) -> Invoice:
        validate_line_specs(line_specs)

        if not self._uow.customers.exists(customer_id):
            raise EntityNotFoundError(f"Customer with ID '{customer_id}' not found")

        now = self._clock()
        invoice = Invoice.open(
            customer_id=customer_id,
            issued_at=now,
            number=unique_number(self._uow.invoices, now),
        )

        stock = StockReconciliationService(self._uow.products)
        for spec in line_specs:
            stock.reserve_line(invoice, spec.product_id, spec.quantity)

        invoice.calculate_totals()
        self._uow.invoices.add(invoice)
        return invoice
