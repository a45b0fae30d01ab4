"""Application service: Show / List Invoices use cases (queries)."""

from __future__ import annotations

from invoicing.application.dto import InvoiceDTO
from invoicing.application.mapping import invoice_to_dto
from invoicing.application.result import ErrorKind, Result
from invoicing.domain.repository.unit_of_work import UnitOfWork


class ShowInvoiceHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, invoice_id: int) -> Result[InvoiceDTO]:
        with self._uow:
            invoice = self._uow.invoices.get_by_id(invoice_id)
            if invoice is None:
                return Result.failure(ErrorKind.NOT_FOUND, f"Invoice #{invoice_id} not found")
            return Result.success(invoice_to_dto(invoice, self._uow))


class ListInvoicesHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, customer_id: str | None = None) -> Result[list[InvoiceDTO]]:
        """All invoices, or one customer's, newest first."""
        with self._uow:
            if customer_id is None:
                invoices = self._uow.invoices.list_all()
            elif not self._uow.customers.exists(customer_id):
                return Result.failure(
                    ErrorKind.NOT_FOUND, f"Customer with ID '{customer_id}' not found"
                )
            else:
                invoices = self._uow.invoices.list_by_customer(customer_id)
            return Result.success([invoice_to_dto(inv, self._uow) for inv in invoices])
