"""Application service: Delete Invoice use case.

PAID invoices cannot be deleted.  A PENDING invoice still holds stock,
which is restored before the invoice and its lines are removed; a VOID
invoice already gave its stock back.
"""

from __future__ import annotations

import logging

from invoicing.application.cancellation import CancellationToken, check_cancelled
from invoicing.application.result import Result
from invoicing.domain.exceptions import DomainException, EntityNotFoundError
from invoicing.domain.repository.unit_of_work import UnitOfWork
from invoicing.domain.service.stock_reconciliation_service import (
    StockReconciliationService,
)

LOGGER = logging.getLogger(__name__)


class DeleteInvoiceHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, invoice_id: int, cancel: CancellationToken | None = None) -> Result[None]:
        LOGGER.info("Deleting invoice %s", invoice_id)
        try:
            with self._uow:
                invoice = self._uow.invoices.get_by_id(invoice_id)
                if invoice is None:
                    raise EntityNotFoundError(f"Invoice #{invoice_id} not found")

                invoice.ensure_deletable()
                if invoice.holds_stock:
                    StockReconciliationService(self._uow.products).restore_for_invoice(invoice)

                self._uow.invoices.remove(invoice)
                check_cancelled(cancel)
                self._uow.commit()
        except DomainException as exc:
            LOGGER.warning("Could not delete invoice %s: %s", invoice_id, exc)
            return Result.from_exception(exc)

        LOGGER.info("Invoice %s deleted", invoice_id)
        return Result.success(None)
