"""Application service: Update Product use case."""

from __future__ import annotations

import logging

from invoicing.application.dto import ProductDTO
from invoicing.application.mapping import product_to_dto
from invoicing.application.result import Result
from invoicing.domain.exceptions import ConflictError, DomainException, EntityNotFoundError
from invoicing.domain.model.product import LOW_STOCK_THRESHOLD
from invoicing.domain.model.value_objects import Money
from invoicing.domain.repository.unit_of_work import UnitOfWork

LOGGER = logging.getLogger(__name__)


class UpdateProductHandler:

    def __init__(self, uow: UnitOfWork, low_stock_threshold: int = LOW_STOCK_THRESHOLD) -> None:
        self._uow = uow
        self._threshold = low_stock_threshold

    def handle(
        self,
        product_id: str,
        name: str | None = None,
        price: str | None = None,
        code: str | None = None,
        active: bool | None = None,
    ) -> Result[ProductDTO]:
        """Update catalog fields of a product.

        A price change does NOT affect existing invoices; their lines
        captured a price snapshot when they were created.
        """
        LOGGER.info("Updating product %s", product_id)
        try:
            with self._uow:
                product = self._uow.products.get_by_id(product_id)
                if product is None:
                    raise EntityNotFoundError(f"Product with ID '{product_id}' not found")

                if code is not None and code.strip().lower() != product.code.lower():
                    other = self._uow.products.get_by_code(code.strip())
                    if other is not None and other.id != product.id:
                        raise ConflictError(f"Product code '{code}' is already in use")
                    product.change_code(code)
                if name is not None:
                    product.rename(name)
                if price is not None:
                    product.update_price(Money.of(price))
                if active is not None:
                    product.set_active(active)

                self._uow.products.update(product)
                self._uow.commit()
        except DomainException as exc:
            LOGGER.warning("Could not update product %s: %s", product_id, exc)
            return Result.from_exception(exc)

        return Result.success(product_to_dto(product, self._threshold))
