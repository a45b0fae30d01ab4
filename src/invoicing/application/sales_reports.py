"""Application service: sales analytics queries.

- Sales by product for a calendar year
- Next purchase estimate for a customer
- Customers up to an age who bought within a date range
"""

from __future__ import annotations

import logging
from datetime import date

from invoicing.application.dto import CustomerPurchasesDTO, NextPurchaseDTO, ProductSalesDTO
from invoicing.application.mapping import DATETIME_FORMAT
from invoicing.application.result import Result
from invoicing.domain.exceptions import DomainException, EntityNotFoundError
from invoicing.domain.repository.unit_of_work import UnitOfWork
from invoicing.domain.service.sales_analytics import (
    classify_outlook,
    customers_by_age_and_purchases,
    estimate_next_purchase,
    sales_by_product,
)

LOGGER = logging.getLogger(__name__)


class SalesByProductHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, year: int) -> Result[list[ProductSalesDTO]]:
        LOGGER.info("Building sales by product report for %d", year)
        with self._uow:
            products = {p.id: p for p in self._uow.products.list_all()}
            rows = sales_by_product(self._uow.invoices.list_issued_in(year), products, year)

        LOGGER.info("Sales report for %d has %d products", year, len(rows))
        return Result.success([
            ProductSalesDTO(
                product_id=r.product_id,
                code=r.code,
                name=r.name,
                quantity=r.quantity,
                amount=str(r.amount),
                invoice_count=r.invoice_count,
            )
            for r in rows
        ])


class NextPurchaseEstimateHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, customer_id: str, today: date | None = None) -> Result[NextPurchaseDTO]:
        LOGGER.info("Estimating next purchase for customer %s", customer_id)
        today = today or date.today()
        try:
            with self._uow:
                customer = self._uow.customers.get_by_id(customer_id)
                if customer is None:
                    raise EntityNotFoundError(f"Customer with ID '{customer_id}' not found")
                estimate = estimate_next_purchase(self._uow.invoices.list_by_customer(customer_id))
        except DomainException as exc:
            LOGGER.warning("No estimate for customer %s: %s", customer_id, exc)
            return Result.from_exception(exc)

        outlook = classify_outlook(estimate.estimated_next, today)
        LOGGER.info(
            "Next purchase for customer %s estimated at %s (%s)",
            customer_id, estimate.estimated_next.isoformat(), outlook.value,
        )
        return Result.success(
            NextPurchaseDTO(
                customer_id=customer.id,
                customer_name=customer.full_name,
                purchase_count=estimate.purchase_count,
                last_purchase=estimate.last_purchase.strftime(DATETIME_FORMAT),
                average_days_between=estimate.average_days,
                estimated_next_purchase=estimate.estimated_next.strftime(DATETIME_FORMAT),
                outlook=outlook.value,
            )
        )


class CustomersByAgeAndPurchaseHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        max_age: int,
        date_from: date,
        date_to: date,
        today: date | None = None,
    ) -> Result[list[CustomerPurchasesDTO]]:
        LOGGER.info(
            "Looking for customers aged <= %d who bought between %s and %s",
            max_age, date_from, date_to,
        )
        today = today or date.today()
        try:
            with self._uow:
                rows = customers_by_age_and_purchases(
                    self._uow.customers.list_all(),
                    self._uow.invoices.list_all(),
                    max_age,
                    date_from,
                    date_to,
                    today,
                )
        except DomainException as exc:
            LOGGER.warning("Invalid customer report request: %s", exc)
            return Result.from_exception(exc)

        LOGGER.info("Found %d customers", len(rows))
        return Result.success([
            CustomerPurchasesDTO(
                customer_id=r.customer.id,
                full_name=r.customer.full_name,
                email=r.customer.email,
                age=r.age,
                purchase_count=r.purchase_count,
            )
            for r in rows
        ])
