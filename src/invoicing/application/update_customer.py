"""Application service: Update Customer use case."""

from __future__ import annotations

import logging
from datetime import date

from invoicing.application.dto import CustomerDTO
from invoicing.application.mapping import customer_to_dto
from invoicing.application.result import Result
from invoicing.domain.exceptions import ConflictError, DomainException, EntityNotFoundError
from invoicing.domain.repository.unit_of_work import UnitOfWork

LOGGER = logging.getLogger(__name__)


class UpdateCustomerHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        customer_id: str,
        first_name: str | None = None,
        last_name: str | None = None,
        email: str | None = None,
        birth_date: date | None = None,
        phone: str | None = None,
        address: str | None = None,
    ) -> Result[CustomerDTO]:
        """Update the given fields of a customer.

        The email must stay unique; reusing the customer's own email, in
        any case, is fine.
        """
        LOGGER.info("Updating customer %s", customer_id)
        try:
            with self._uow:
                customer = self._uow.customers.get_by_id(customer_id)
                if customer is None:
                    raise EntityNotFoundError(f"Customer with ID '{customer_id}' not found")

                if email is not None:
                    other = self._uow.customers.get_by_email(email.strip())
                    if other is not None and other.id != customer.id:
                        raise ConflictError(f"Email '{email}' is already in use")

                customer.update_details(
                    first_name=first_name,
                    last_name=last_name,
                    email=email,
                    birth_date=birth_date,
                    phone=phone,
                    address=address,
                )
                self._uow.customers.update(customer)
                self._uow.commit()
        except DomainException as exc:
            LOGGER.warning("Could not update customer %s: %s", customer_id, exc)
            return Result.from_exception(exc)

        LOGGER.info("Customer %s updated", customer_id)
        return Result.success(customer_to_dto(customer))
