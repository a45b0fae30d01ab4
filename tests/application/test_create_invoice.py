"""Integration tests for the CreateInvoice use case.

Uses the in-memory unit of work; no file I/O.
"""

from datetime import datetime, timezone

import pytest

from invoicing.application.cancellation import CancellationToken, OperationCancelled
from invoicing.application.create_invoice import CreateInvoiceHandler
from invoicing.application.dto import LineSpec
from invoicing.application.result import ErrorKind
from invoicing.domain.model.invoice import InvoiceStatus
from tests.fakes import BrokenStorageUnitOfWork, FakeUnitOfWork, make_customer, make_product

NOW = datetime(2024, 3, 1, 12, 30, 45, tzinfo=timezone.utc)


def _setup(uow_class=FakeUnitOfWork) -> tuple[CreateInvoiceHandler, FakeUnitOfWork]:
    """Customer 1 plus P1 (stock 10, $100) and P2 (stock 5, $50)."""
    uow = uow_class(
        customers=[make_customer("1")],
        products=[
            make_product("1", name="Widget", price="100.00", stock=10),
            make_product("2", name="Gadget", price="50.00", stock=5),
        ],
    )
    return CreateInvoiceHandler(uow, clock=lambda: NOW), uow


class TestCreateInvoiceHappyPath:

    def test_totals_and_stock(self):
        handler, uow = _setup()
        result = handler.handle("1", [LineSpec("1", 3), LineSpec("2", 2)])

        assert result.is_success
        dto = result.value
        assert dto.subtotal == "$400.00"
        assert dto.tax == "$76.00"
        assert dto.total == "$476.00"
        assert dto.status == "PENDING"
        assert uow.stock_of("1") == 7
        assert uow.stock_of("2") == 3

    def test_returns_reloaded_invoice(self):
        handler, _ = _setup()
        dto = handler.handle("1", [LineSpec("1", 3), LineSpec("2", 2)]).value

        assert dto.id == 1
        assert dto.number == "FAC-20240301123045"
        assert dto.customer_name == "Ana Gómez"
        assert dto.issued_at == "2024-03-01 12:30 UTC"
        assert [line.product_name for line in dto.lines] == ["Widget", "Gadget"]
        assert [line.product_code for line in dto.lines] == ["SKU-1", "SKU-2"]
        assert all(line.id is not None for line in dto.lines)
        assert dto.lines[0].unit_price == "$100.00"
        assert dto.lines[0].subtotal == "$300.00"

    def test_commits_once(self):
        handler, uow = _setup()
        handler.handle("1", [LineSpec("1", 1)])
        assert uow.commits == 1
        assert uow.committed_invoice(1).status == InvoiceStatus.PENDING

    def test_same_second_gets_suffixed_number(self):
        handler, _ = _setup()
        first = handler.handle("1", [LineSpec("1", 1)]).value
        second = handler.handle("1", [LineSpec("2", 1)]).value
        assert first.number == "FAC-20240301123045"
        assert second.number == "FAC-20240301123045-2"
        assert second.id == 2

    def test_can_take_the_last_unit(self):
        handler, uow = _setup()
        assert handler.handle("1", [LineSpec("2", 5)]).is_success
        assert uow.stock_of("2") == 0


class TestPriceSnapshot:

    def test_later_price_change_does_not_touch_invoice(self):
        handler, uow = _setup()
        dto = handler.handle("1", [LineSpec("1", 2)]).value

        with uow:
            product = uow.products.get_by_id("1")
            product.update_price(uow.products.get_by_id("1").price * 3)
            uow.products.update(product)
            uow.commit()

        invoice = uow.committed_invoice(dto.id)
        assert str(invoice.lines[0].unit_price) == "$100.00"
        assert str(invoice.total) == "$238.00"


class TestCreateInvoiceFailures:

    def test_insufficient_stock_persists_nothing(self):
        handler, uow = _setup()
        result = handler.handle("1", [LineSpec("2", 20)])

        assert not result.is_success
        assert result.kind == ErrorKind.INSUFFICIENT_STOCK
        assert "Available: 5, Requested: 20" in result.error
        assert uow.stock_of("2") == 5
        assert uow.store.invoices == {}
        assert uow.commits == 0

    def test_failure_on_later_line_rolls_back_earlier_lines(self):
        handler, uow = _setup()
        result = handler.handle("1", [LineSpec("1", 3), LineSpec("2", 6)])

        assert result.kind == ErrorKind.INSUFFICIENT_STOCK
        assert uow.stock_of("1") == 10
        assert uow.store.invoices == {}

    def test_unknown_product(self):
        handler, uow = _setup()
        result = handler.handle("1", [LineSpec("1", 1), LineSpec("99", 1)])
        assert result.kind == ErrorKind.NOT_FOUND
        assert result.error == "Product with ID '99' not found"
        assert uow.stock_of("1") == 10

    def test_unknown_customer(self):
        handler, uow = _setup()
        result = handler.handle("42", [LineSpec("1", 1)])
        assert result.kind == ErrorKind.NOT_FOUND
        assert result.error == "Customer with ID '42' not found"
        assert uow.stock_of("1") == 10

    def test_empty_lines(self):
        handler, _ = _setup()
        result = handler.handle("1", [])
        assert result.kind == ErrorKind.VALIDATION
        assert result.error == "Invoice must contain at least one line"

    def test_duplicate_product(self):
        handler, uow = _setup()
        result = handler.handle("1", [LineSpec("1", 1), LineSpec("1", 2)])
        assert result.kind == ErrorKind.VALIDATION
        assert uow.stock_of("1") == 10

    @pytest.mark.parametrize("qty", [0, -1])
    def test_non_positive_quantity(self, qty):
        handler, uow = _setup()
        result = handler.handle("1", [LineSpec("1", qty)])
        assert result.kind == ErrorKind.VALIDATION
        assert uow.stock_of("1") == 10


class TestCreateInvoiceAbort:

    def test_cancelled_before_commit(self):
        handler, uow = _setup()
        token = CancellationToken()
        token.cancel()

        with pytest.raises(OperationCancelled):
            handler.handle("1", [LineSpec("1", 3)], cancel=token)
        assert uow.stock_of("1") == 10
        assert uow.store.invoices == {}

    def test_storage_failure_propagates(self):
        handler, uow = _setup(BrokenStorageUnitOfWork)

        with pytest.raises(OSError, match="storage unavailable"):
            handler.handle("1", [LineSpec("1", 3)])
        assert uow.stock_of("1") == 10
        assert uow.store.invoices == {}
