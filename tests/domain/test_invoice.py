"""Unit tests for the Invoice aggregate: totals, edit guards and lifecycle."""

from datetime import datetime, timedelta, timezone

import pytest

from invoicing.domain.exceptions import InvalidStateError, ValidationError
from invoicing.domain.model.invoice import (
    Invoice,
    InvoiceLine,
    InvoiceStatus,
    generate_number,
)
from invoicing.domain.model.value_objects import Money, Quantity
from tests.fakes import make_invoice

ISSUED = datetime(2024, 3, 1, 12, 30, 45, tzinfo=timezone.utc)


def _line(product_id: str, qty: int, price: str) -> InvoiceLine:
    return InvoiceLine(product_id=product_id, quantity=Quantity(qty), unit_price=Money.of(price))


class TestOpen:

    def test_new_invoice_is_pending_and_empty(self):
        inv = Invoice.open("1", ISSUED)
        assert inv.status == InvoiceStatus.PENDING
        assert inv.lines == []
        assert inv.total == Money.zero()
        assert inv.id is None

    def test_number_encodes_utc_timestamp(self):
        assert Invoice.open("1", ISSUED).number == "FAC-20240301123045"

    def test_number_can_be_given(self):
        assert Invoice.open("1", ISSUED, number="FAC-X").number == "FAC-X"

    def test_generate_number_converts_to_utc(self):
        bogota = timezone(timedelta(hours=-5))
        moment = datetime(2024, 3, 1, 7, 30, 45, tzinfo=bogota)
        assert generate_number(moment) == "FAC-20240301123045"

    def test_customer_required(self):
        with pytest.raises(ValidationError):
            Invoice.open("", ISSUED)


class TestTotals:

    def test_totals_from_lines(self):
        inv = Invoice.open("1", ISSUED)
        inv.add_line(_line("1", 3, "100.00"))
        inv.add_line(_line("2", 2, "50.00"))
        assert inv.subtotal == Money.of("400.00")
        assert inv.tax == Money.of("76.00")
        assert inv.total == Money.of("476.00")

    def test_totals_invariant_holds_after_every_change(self):
        inv = Invoice.open("1", ISSUED)
        for n, price in enumerate(["0.50", "1.50", "19.99"], start=1):
            inv.add_line(_line(str(n), n, price))
            line_sum = Money.zero()
            for line in inv.lines:
                line_sum = line_sum + line.subtotal
            assert inv.subtotal == line_sum
            assert inv.total == inv.subtotal + inv.tax

    def test_tax_rounds_half_to_even(self):
        inv = Invoice.open("1", ISSUED)
        inv.add_line(_line("1", 1, "1.50"))
        assert inv.tax == Money.of("0.28")
        assert inv.total == Money.of("1.78")

    def test_calculate_totals_is_idempotent(self):
        inv = make_invoice(1, lines=[("1", 3, "33.33")])
        first = (inv.subtotal, inv.tax, inv.total)
        inv.calculate_totals()
        inv.calculate_totals()
        assert (inv.subtotal, inv.tax, inv.total) == first

    def test_clear_lines_resets_totals(self):
        inv = make_invoice(1, lines=[("1", 2, "10.00")])
        removed = inv.clear_lines()
        assert len(removed) == 1
        assert inv.lines == []
        assert inv.total.is_zero


class TestLines:

    def test_same_product_twice_rejected(self):
        inv = Invoice.open("1", ISSUED)
        inv.add_line(_line("1", 1, "10.00"))
        with pytest.raises(ValidationError, match="already has a line"):
            inv.add_line(_line("1", 2, "10.00"))
        assert len(inv.lines) == 1

    def test_line_subtotal(self):
        assert _line("1", 4, "2.25").subtotal == Money.of("9.00")

    def test_find_line(self):
        inv = make_invoice(7, lines=[("1", 1, "10.00"), ("2", 1, "5.00")])
        assert inv.find_line(702).product_id == "2"
        assert inv.find_line(999) is None


class TestEditGuards:

    def test_pending_is_editable(self):
        inv = make_invoice(1)
        inv.ensure_editable()
        inv.reassign_customer("2")
        assert inv.customer_id == "2"

    @pytest.mark.parametrize("status", [InvoiceStatus.PAID, InvoiceStatus.VOID])
    def test_non_pending_not_editable(self, status):
        inv = make_invoice(1, status=status)
        with pytest.raises(InvalidStateError) as exc_info:
            inv.reassign_customer("2")
        assert str(exc_info.value) == (
            f"Only PENDING invoices can be edited, current status: {status.value}"
        )
        assert inv.customer_id == "1"

    def test_paid_cannot_be_deleted(self):
        with pytest.raises(InvalidStateError, match="Cannot delete a paid invoice"):
            make_invoice(1, status=InvoiceStatus.PAID).ensure_deletable()

    @pytest.mark.parametrize("status", [InvoiceStatus.PENDING, InvoiceStatus.VOID])
    def test_pending_and_void_can_be_deleted(self, status):
        make_invoice(1, status=status).ensure_deletable()

    def test_only_void_releases_stock(self):
        assert make_invoice(1).holds_stock
        assert make_invoice(1, status=InvoiceStatus.PAID).holds_stock
        assert not make_invoice(1, status=InvoiceStatus.VOID).holds_stock


class TestLifecycle:

    def test_pending_to_paid(self):
        inv = make_invoice(1)
        inv.mark_as_paid()
        assert inv.status == InvoiceStatus.PAID

    def test_paid_to_paid_is_allowed(self):
        inv = make_invoice(1, status=InvoiceStatus.PAID)
        inv.mark_as_paid()
        assert inv.status == InvoiceStatus.PAID

    def test_void_cannot_be_paid(self):
        inv = make_invoice(1, status=InvoiceStatus.VOID)
        with pytest.raises(InvalidStateError, match="Cannot pay a voided invoice"):
            inv.mark_as_paid()
        assert inv.status == InvoiceStatus.VOID

    @pytest.mark.parametrize("status", [InvoiceStatus.PENDING, InvoiceStatus.PAID])
    def test_void_from_pending_or_paid(self, status):
        inv = make_invoice(1, status=status)
        inv.void()
        assert inv.status == InvoiceStatus.VOID

    def test_void_twice_rejected(self):
        inv = make_invoice(1, status=InvoiceStatus.VOID)
        with pytest.raises(InvalidStateError, match="already void"):
            inv.void()

    def test_reopen_pending_is_a_no_op(self):
        inv = make_invoice(1)
        inv.reopen()
        assert inv.status == InvoiceStatus.PENDING

    @pytest.mark.parametrize("status", [InvoiceStatus.PAID, InvoiceStatus.VOID])
    def test_reopen_rejected_for_paid_and_void(self, status):
        inv = make_invoice(1, status=status)
        with pytest.raises(InvalidStateError, match="back to PENDING"):
            inv.reopen()
        assert inv.status == status

    def test_transitions_touch_updated_at(self):
        inv = make_invoice(1)
        inv.updated_at = datetime(2000, 1, 1, tzinfo=timezone.utc)
        inv.mark_as_paid()
        assert inv.updated_at.year > 2000
