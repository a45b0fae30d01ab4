"""Application service: Restock Product use case."""

from __future__ import annotations

import logging

from invoicing.application.dto import ProductDTO
from invoicing.application.mapping import product_to_dto
from invoicing.application.result import Result
from invoicing.domain.exceptions import DomainException, EntityNotFoundError
from invoicing.domain.model.product import LOW_STOCK_THRESHOLD
from invoicing.domain.repository.unit_of_work import UnitOfWork

LOGGER = logging.getLogger(__name__)


class RestockProductHandler:

    def __init__(self, uow: UnitOfWork, low_stock_threshold: int = LOW_STOCK_THRESHOLD) -> None:
        self._uow = uow
        self._threshold = low_stock_threshold

    def handle(self, product_id: str, quantity: int) -> Result[ProductDTO]:
        """Add *quantity* units to a product's stock."""
        try:
            with self._uow:
                product = self._uow.products.get_by_id(product_id)
                if product is None:
                    raise EntityNotFoundError(f"Product with ID '{product_id}' not found")
                product.increase_stock(quantity)
                self._uow.products.update(product)
                self._uow.commit()
        except DomainException as exc:
            LOGGER.warning("Could not restock product %s: %s", product_id, exc)
            return Result.from_exception(exc)

        LOGGER.info("Product %s restocked by %d (stock %d)", product_id, quantity, product.stock)
        return Result.success(product_to_dto(product, self._threshold))
