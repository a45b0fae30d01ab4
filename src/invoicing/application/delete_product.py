"""Application service: Delete Product use case.

A product that appears on any invoice line is part of the sales history
and cannot be deleted; deactivate it instead.
"""

from __future__ import annotations

import logging

from invoicing.application.result import Result
from invoicing.domain.exceptions import DomainException, EntityNotFoundError, InvalidStateError
from invoicing.domain.repository.unit_of_work import UnitOfWork

LOGGER = logging.getLogger(__name__)


class DeleteProductHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, product_id: str) -> Result[None]:
        LOGGER.info("Deleting product %s", product_id)
        try:
            with self._uow:
                product = self._uow.products.get_by_id(product_id)
                if product is None:
                    raise EntityNotFoundError(f"Product with ID '{product_id}' not found")
                if self._uow.invoices.references_product(product_id):
                    raise InvalidStateError(
                        f"Cannot delete product '{product.name}': it has associated sales"
                    )
                self._uow.products.remove(product)
                self._uow.commit()
        except DomainException as exc:
            LOGGER.warning("Could not delete product %s: %s", product_id, exc)
            return Result.from_exception(exc)

        return Result.success(None)
