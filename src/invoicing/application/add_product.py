"""Application service: Add Product use case."""

from __future__ import annotations

import logging

from invoicing.application.dto import ProductDTO
from invoicing.application.mapping import product_to_dto
from invoicing.application.result import Result
from invoicing.domain.exceptions import ConflictError, DomainException
from invoicing.domain.model.product import LOW_STOCK_THRESHOLD, Product
from invoicing.domain.model.value_objects import Money
from invoicing.domain.repository.unit_of_work import UnitOfWork

LOGGER = logging.getLogger(__name__)


class AddProductHandler:

    def __init__(self, uow: UnitOfWork, low_stock_threshold: int = LOW_STOCK_THRESHOLD) -> None:
        self._uow = uow
        self._threshold = low_stock_threshold

    def handle(
        self,
        code: str,
        name: str,
        price: str,
        stock: int,
        description: str | None = None,
    ) -> Result[ProductDTO]:
        """Add a new product to the catalog; SKU codes are unique."""
        LOGGER.info("Adding product %s", code)
        try:
            with self._uow:
                if self._uow.products.get_by_code(code.strip()) is not None:
                    raise ConflictError(f"Product code '{code}' is already registered")

                product = Product.create(
                    product_id=self._uow.products.next_id(),
                    code=code,
                    name=name,
                    price=Money.of(price),
                    stock=stock,
                    description=description,
                )
                self._uow.products.add(product)
                self._uow.commit()
        except DomainException as exc:
            LOGGER.warning("Could not add product %s: %s", code, exc)
            return Result.from_exception(exc)

        LOGGER.info("Product %s added with ID %s", product.code, product.id)
        return Result.success(product_to_dto(product, self._threshold))
