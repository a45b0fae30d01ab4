"""Application service: Add Customer use case."""

from __future__ import annotations

import logging
from datetime import date

from invoicing.application.dto import CustomerDTO
from invoicing.application.mapping import customer_to_dto
from invoicing.application.result import Result
from invoicing.domain.exceptions import ConflictError, DomainException
from invoicing.domain.model.customer import Customer
from invoicing.domain.repository.unit_of_work import UnitOfWork

LOGGER = logging.getLogger(__name__)


class AddCustomerHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        first_name: str,
        last_name: str,
        email: str,
        birth_date: date,
        phone: str | None = None,
        address: str | None = None,
    ) -> Result[CustomerDTO]:
        """Register a customer; emails are unique regardless of case."""
        LOGGER.info("Adding customer %s", email)
        try:
            with self._uow:
                if self._uow.customers.get_by_email(email.strip()) is not None:
                    raise ConflictError(f"Email '{email}' is already registered")

                customer = Customer.create(
                    customer_id=self._uow.customers.next_id(),
                    first_name=first_name,
                    last_name=last_name,
                    email=email,
                    birth_date=birth_date,
                    phone=phone,
                    address=address,
                )
                self._uow.customers.add(customer)
                self._uow.commit()
        except DomainException as exc:
            LOGGER.warning("Could not add customer %s: %s", email, exc)
            return Result.from_exception(exc)

        LOGGER.info("Customer %s added with ID %s", customer.email, customer.id)
        return Result.success(customer_to_dto(customer))
