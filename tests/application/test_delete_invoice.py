"""Integration tests for the DeleteInvoice use case."""

from datetime import datetime, timezone

import pytest

from invoicing.application.cancellation import CancellationToken, OperationCancelled
from invoicing.application.change_invoice_status import ChangeInvoiceStatusHandler
from invoicing.application.create_invoice import CreateInvoiceHandler
from invoicing.application.delete_invoice import DeleteInvoiceHandler
from invoicing.application.dto import LineSpec
from invoicing.application.result import ErrorKind
from tests.fakes import FakeUnitOfWork, make_customer, make_product

NOW = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


def _setup() -> tuple[DeleteInvoiceHandler, FakeUnitOfWork, int]:
    uow = FakeUnitOfWork(
        customers=[make_customer("1")],
        products=[
            make_product("1", price="100.00", stock=10),
            make_product("2", price="50.00", stock=5),
        ],
    )
    created = CreateInvoiceHandler(uow, clock=lambda: NOW).handle(
        "1", [LineSpec("1", 3), LineSpec("2", 2)]
    )
    return DeleteInvoiceHandler(uow), uow, created.value.id


class TestDeleteInvoice:

    def test_create_then_delete_conserves_stock(self):
        handler, uow, inv_id = _setup()
        result = handler.handle(inv_id)

        assert result.is_success
        assert uow.committed_invoice(inv_id) is None
        assert uow.stock_of("1") == 10
        assert uow.stock_of("2") == 5

    def test_void_invoice_is_deleted_without_restoring_again(self):
        handler, uow, inv_id = _setup()
        ChangeInvoiceStatusHandler(uow).handle(inv_id, "VOID")

        assert handler.handle(inv_id).is_success
        assert uow.stock_of("1") == 10
        assert uow.stock_of("2") == 5

    def test_paid_invoice_cannot_be_deleted(self):
        handler, uow, inv_id = _setup()
        ChangeInvoiceStatusHandler(uow).handle(inv_id, "PAID")

        result = handler.handle(inv_id)
        assert result.kind == ErrorKind.INVALID_STATE
        assert result.error == "Cannot delete a paid invoice"
        assert uow.committed_invoice(inv_id) is not None
        assert uow.stock_of("1") == 7
        assert uow.stock_of("2") == 3

    def test_unknown_invoice(self):
        handler, _, _ = _setup()
        result = handler.handle(99)
        assert result.kind == ErrorKind.NOT_FOUND

    def test_deleting_twice(self):
        handler, uow, inv_id = _setup()
        handler.handle(inv_id)
        assert handler.handle(inv_id).kind == ErrorKind.NOT_FOUND
        assert uow.stock_of("1") == 10

    def test_cancelled_delete_keeps_invoice(self):
        handler, uow, inv_id = _setup()
        token = CancellationToken()
        token.cancel()
        with pytest.raises(OperationCancelled):
            handler.handle(inv_id, cancel=token)
        assert uow.committed_invoice(inv_id) is not None
        assert uow.stock_of("1") == 7
