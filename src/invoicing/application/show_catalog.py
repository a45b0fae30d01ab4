"""Application service: catalog queries.

- Single product lookup
- Product list
- Low-stock alert (stock at or below a threshold)
- Price list of active products

Every handler flags ``low_stock`` against the same threshold the
low-stock report uses.
"""

from __future__ import annotations

import logging

from invoicing.application.dto import ProductDTO
from invoicing.application.mapping import product_to_dto
from invoicing.application.result import ErrorKind, Result
from invoicing.domain.model.product import LOW_STOCK_THRESHOLD
from invoicing.domain.repository.unit_of_work import UnitOfWork

LOGGER = logging.getLogger(__name__)


class ShowProductHandler:

    def __init__(self, uow: UnitOfWork, low_stock_threshold: int = LOW_STOCK_THRESHOLD) -> None:
        self._uow = uow
        self._threshold = low_stock_threshold

    def handle(self, product_id: str) -> Result[ProductDTO]:
        with self._uow:
            product = self._uow.products.get_by_id(product_id)
        if product is None:
            return Result.failure(
                ErrorKind.NOT_FOUND, f"Product with ID '{product_id}' not found"
            )
        return Result.success(product_to_dto(product, self._threshold))


class ListProductsHandler:

    def __init__(self, uow: UnitOfWork, low_stock_threshold: int = LOW_STOCK_THRESHOLD) -> None:
        self._uow = uow
        self._threshold = low_stock_threshold

    def handle(self) -> Result[list[ProductDTO]]:
        with self._uow:
            products = self._uow.products.list_all()
        return Result.success([product_to_dto(p, self._threshold) for p in products])


class LowStockReportHandler:

    def __init__(self, uow: UnitOfWork, low_stock_threshold: int = LOW_STOCK_THRESHOLD) -> None:
        self._uow = uow
        self._threshold = low_stock_threshold

    def handle(self, threshold: int | None = None) -> Result[list[ProductDTO]]:
        """Products with stock <= *threshold* (the handler's default if None)."""
        if threshold is None:
            threshold = self._threshold
        with self._uow:
            products = self._uow.products.list_low_stock(threshold)
        LOGGER.info("%d products with stock <= %d", len(products), threshold)
        return Result.success([product_to_dto(p, threshold) for p in products])


class PriceListHandler:

    def __init__(self, uow: UnitOfWork, low_stock_threshold: int = LOW_STOCK_THRESHOLD) -> None:
        self._uow = uow
        self._threshold = low_stock_threshold

    def handle(self) -> Result[list[ProductDTO]]:
        with self._uow:
            products = [p for p in self._uow.products.list_all() if p.active]
        products.sort(key=lambda p: p.name.lower())
        return Result.success([product_to_dto(p, self._threshold) for p in products])
