"""Application service: Change Invoice Status use case.

Every target status goes through the aggregate:

- PAID    -> ``mark_as_paid()``
- VOID    -> ``void()``, then the lines' stock is restored (from PENDING
             or PAID; voiding twice is rejected so stock comes back once)
- PENDING -> ``reopen()``, accepted only when the invoice is PENDING
"""

from __future__ import annotations

import logging

from invoicing.application.cancellation import CancellationToken, check_cancelled
from invoicing.application.dto import InvoiceDTO
from invoicing.application.mapping import invoice_to_dto
from invoicing.application.result import Result
from invoicing.domain.exceptions import DomainException, EntityNotFoundError, ValidationError
from invoicing.domain.model.invoice import InvoiceStatus
from invoicing.domain.repository.unit_of_work import UnitOfWork
from invoicing.domain.service.stock_reconciliation_service import (
    StockReconciliationService,
)

LOGGER = logging.getLogger(__name__)


def parse_status(raw: str | InvoiceStatus) -> InvoiceStatus:
    if isinstance(raw, InvoiceStatus):
        return raw
    try:
        return InvoiceStatus(raw.strip().upper())
    except ValueError:
        valid = ", ".join(s.value for s in InvoiceStatus)
        raise ValidationError(f"Invalid status '{raw}'. Expected one of: {valid}")


class ChangeInvoiceStatusHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        invoice_id: int,
        status: str | InvoiceStatus,
        cancel: CancellationToken | None = None,
    ) -> Result[InvoiceDTO]:
        LOGGER.info("Changing status of invoice %s to %s", invoice_id, status)
        try:
            target = parse_status(status)
            with self._uow:
                invoice = self._uow.invoices.get_by_id(invoice_id)
                if invoice is None:
                    raise EntityNotFoundError(f"Invoice #{invoice_id} not found")

                if target == InvoiceStatus.PAID:
                    invoice.mark_as_paid()
                elif target == InvoiceStatus.VOID:
                    invoice.void()
                    StockReconciliationService(self._uow.products).restore_for_invoice(invoice)
                else:
                    invoice.reopen()

                self._uow.invoices.update(invoice)
                check_cancelled(cancel)
                self._uow.commit()
                dto = invoice_to_dto(self._uow.invoices.get_by_id(invoice_id), self._uow)  # type: ignore[arg-type]
        except DomainException as exc:
            LOGGER.warning("Could not change status of invoice %s: %s", invoice_id, exc)
            return Result.from_exception(exc)

        LOGGER.info("Invoice %s is now %s", dto.number, dto.status)
        return Result.success(dto)
