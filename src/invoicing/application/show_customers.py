"""Application service: Show / List Customers use cases (queries)."""

from __future__ import annotations

from invoicing.application.dto import CustomerDTO
from invoicing.application.mapping import customer_to_dto
from invoicing.application.result import ErrorKind, Result
from invoicing.domain.repository.unit_of_work import UnitOfWork


class ShowCustomerHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, customer_id: str) -> Result[CustomerDTO]:
        with self._uow:
            customer = self._uow.customers.get_by_id(customer_id)
        if customer is None:
            return Result.failure(
                ErrorKind.NOT_FOUND, f"Customer with ID '{customer_id}' not found"
            )
        return Result.success(customer_to_dto(customer))


class ListCustomersHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self) -> Result[list[CustomerDTO]]:
        with self._uow:
            customers = self._uow.customers.list_all()
        customers.sort(key=lambda c: (c.last_name.lower(), c.first_name.lower()))
        return Result.success([customer_to_dto(c) for c in customers])
