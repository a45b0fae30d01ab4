"""Application service: Update Invoice use case.

Edits use a restore-then-reapply strategy: all stock held by the current
lines is given back, the lines are dropped, and the requested lines are
reserved again from the restored stock.  Any edit (add, remove or resize
lines) becomes the same two passes, and re-submitting the current lines
nets out to no stock change.
"""

from __future__ import annotations

import logging

from invoicing.application.cancellation import CancellationToken, check_cancelled
from invoicing.application.create_invoice import validate_line_specs
from invoicing.application.dto import InvoiceDTO, LineSpec
from invoicing.application.mapping import invoice_to_dto
from invoicing.application.result import Result
from invoicing.domain.exceptions import DomainException, EntityNotFoundError, ValidationError
from invoicing.domain.model.invoice import Invoice
from invoicing.domain.repository.unit_of_work import UnitOfWork
from invoicing.domain.service.stock_reconciliation_service import (
    StockReconciliationService,
)

LOGGER = logging.getLogger(__name__)


class UpdateInvoiceHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        invoice_id: int,
        customer_id: str,
        line_specs: list[LineSpec],
        cancel: CancellationToken | None = None,
    ) -> Result[InvoiceDTO]:
        LOGGER.info("Updating invoice %s", invoice_id)
        try:
            with self._uow:
                self._apply(invoice_id, customer_id, line_specs)
                check_cancelled(cancel)
                self._uow.commit()
                updated = self._uow.invoices.get_by_id(invoice_id)
                dto = invoice_to_dto(updated, self._uow)  # type: ignore[arg-type]
        except DomainException as exc:
            LOGGER.warning("Could not update invoice %s: %s", invoice_id, exc)
            return Result.from_exception(exc)

        LOGGER.info("Invoice %s updated (total %s)", dto.number, dto.total)
        return Result.success(dto)

    def _apply(self, invoice_id: int, customer_id: str, line_specs: list[LineSpec]) -> Invoice:
        invoice = self._uow.invoices.get_by_id(invoice_id)
        if invoice is None:
            raise EntityNotFoundError(f"Invoice #{invoice_id} not found")

        invoice.ensure_editable()

        if not self._uow.customers.exists(customer_id):
            raise EntityNotFoundError(f"Customer with ID '{customer_id}' not found")

        validate_line_specs(line_specs)
        known_line_ids = {line.id for line in invoice.lines}
        seen_line_ids: set[int] = set()
        for spec in line_specs:
            if spec.line_id is None:
                continue
            if spec.line_id not in known_line_ids:
                raise ValidationError(
                    f"Line #{spec.line_id} does not belong to invoice #{invoice_id}"
                )
            if spec.line_id in seen_line_ids:
                raise ValidationError(f"Line #{spec.line_id} appears more than once")
            seen_line_ids.add(spec.line_id)

        stock = StockReconciliationService(self._uow.products)

        # 1. Give back everything the current lines hold
        stock.restore_for_invoice(invoice)

        # 2. Drop the current lines
        invoice.clear_lines()

        # 3. Customer
        invoice.reassign_customer(customer_id)

        # 4. Reserve the requested lines against the restored stock
        for spec in line_specs:
            stock.reserve_line(invoice, spec.product_id, spec.quantity, line_id=spec.line_id)

        invoice.calculate_totals()
        invoice.touch()
        self._uow.invoices.update(invoice)
        return invoice
