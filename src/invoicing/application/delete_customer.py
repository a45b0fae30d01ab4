"""Application service: Delete Customer use case."""

from __future__ import annotations

import logging

from invoicing.application.result import Result
from invoicing.domain.exceptions import DomainException, EntityNotFoundError, InvalidStateError
from invoicing.domain.repository.unit_of_work import UnitOfWork

LOGGER = logging.getLogger(__name__)


class DeleteCustomerHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, customer_id: str) -> Result[None]:
        LOGGER.info("Deleting customer %s", customer_id)
        try:
            with self._uow:
                customer = self._uow.customers.get_by_id(customer_id)
                if customer is None:
                    raise EntityNotFoundError(f"Customer with ID '{customer_id}' not found")
                invoices = self._uow.invoices.list_by_customer(customer_id)
                if invoices:
                    raise InvalidStateError(
                        f"Cannot delete customer: it has {len(invoices)} invoice(s)"
                    )
                self._uow.customers.remove(customer)
                self._uow.commit()
        except DomainException as exc:
            LOGGER.warning("Could not delete customer %s: %s", customer_id, exc)
            return Result.from_exception(exc)

        return Result.success(None)
