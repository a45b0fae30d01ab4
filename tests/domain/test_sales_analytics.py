"""Unit tests for the sales analytics domain service."""

from datetime import date, datetime, timedelta, timezone

import pytest

from invoicing.domain.exceptions import InsufficientHistoryError, ValidationError
from invoicing.domain.model.invoice import InvoiceStatus
from invoicing.domain.model.value_objects import Money
from invoicing.domain.service.sales_analytics import (
    PurchaseOutlook,
    classify_outlook,
    customers_by_age_and_purchases,
    estimate_next_purchase,
    sales_by_product,
)
from tests.fakes import make_customer, make_invoice, make_product

DAY0 = datetime(2024, 1, 1, 10, 0, tzinfo=timezone.utc)


def _on_day(invoice_id: int, day: int, status=InvoiceStatus.PENDING):
    return make_invoice(invoice_id, issued_at=DAY0 + timedelta(days=day), status=status)


class TestSalesByProduct:

    @pytest.fixture
    def products(self):
        return {
            "1": make_product("1", name="Widget"),
            "2": make_product("2", name="Gadget"),
        }

    def test_groups_and_sorts_by_amount(self, products):
        invoices = [
            make_invoice(1, lines=[("1", 1, "100.00"), ("2", 2, "50.00")]),
            make_invoice(2, lines=[("2", 4, "50.00")], status=InvoiceStatus.PAID),
        ]
        rows = sales_by_product(invoices, products, 2024)

        assert [r.product_id for r in rows] == ["2", "1"]
        gadget = rows[0]
        assert gadget.name == "Gadget"
        assert gadget.quantity == 6
        assert gadget.amount == Money.of("300.00")
        assert gadget.invoice_count == 2

    def test_void_invoices_do_not_count(self, products):
        invoices = [
            make_invoice(1, lines=[("1", 1, "100.00")]),
            make_invoice(2, lines=[("1", 9, "100.00")], status=InvoiceStatus.VOID),
        ]
        (row,) = sales_by_product(invoices, products, 2024)
        assert row.quantity == 1
        assert row.invoice_count == 1

    def test_other_years_excluded(self, products):
        invoices = [
            make_invoice(1, issued_at=datetime(2023, 12, 31, 23, 59, tzinfo=timezone.utc)),
        ]
        assert sales_by_product(invoices, products, 2024) == []

    def test_line_amount_uses_snapshot_price(self, products):
        products["1"].update_price(Money.of("999.00"))
        (row,) = sales_by_product([make_invoice(1, lines=[("1", 2, "100.00")])], products, 2024)
        assert row.amount == Money.of("200.00")


class TestEstimateNextPurchase:

    def test_mean_gap_and_estimate(self):
        estimate = estimate_next_purchase([_on_day(3, 20), _on_day(1, 0), _on_day(2, 10)])
        assert estimate.purchase_count == 3
        assert estimate.mean_gap_days == pytest.approx(10.0)
        assert estimate.average_days == 10
        assert estimate.last_purchase == DAY0 + timedelta(days=20)
        assert estimate.estimated_next == DAY0 + timedelta(days=30)

    def test_fractional_gaps(self):
        estimate = estimate_next_purchase([_on_day(1, 0), _on_day(2, 3), _on_day(3, 10)])
        assert estimate.mean_gap_days == pytest.approx(5.0)
        estimate = estimate_next_purchase([_on_day(1, 0), _on_day(2, 3), _on_day(3, 8)])
        assert estimate.average_days == 4

    def test_void_invoices_ignored(self):
        with pytest.raises(InsufficientHistoryError, match="at least 2 purchases"):
            estimate_next_purchase([_on_day(1, 0), _on_day(2, 10, InvoiceStatus.VOID)])

    def test_no_history(self):
        with pytest.raises(InsufficientHistoryError):
            estimate_next_purchase([])


class TestClassifyOutlook:

    ESTIMATE = datetime(2024, 1, 31, 10, 0, tzinfo=timezone.utc)

    def test_due_soon_within_window(self):
        assert classify_outlook(self.ESTIMATE, date(2024, 1, 29)) == PurchaseOutlook.DUE_SOON
        assert PurchaseOutlook.DUE_SOON.value == "PRÓXIMA"

    def test_estimate_today_is_due_soon(self):
        assert classify_outlook(self.ESTIMATE, date(2024, 1, 31)) == PurchaseOutlook.DUE_SOON

    def test_overdue(self):
        assert classify_outlook(self.ESTIMATE, date(2024, 2, 1)) == PurchaseOutlook.OVERDUE

    def test_upcoming(self):
        assert classify_outlook(self.ESTIMATE, date(2024, 1, 20)) == PurchaseOutlook.UPCOMING


class TestCustomersByAgeAndPurchases:

    TODAY = date(2024, 6, 1)
    MARCH = (date(2024, 3, 1), date(2024, 3, 31))

    @pytest.fixture
    def customers(self):
        return [
            make_customer("1", birth_date=date(1990, 5, 17)),  # 34
            make_customer("2", birth_date=date(2000, 6, 2)),  # 23, birthday tomorrow
            make_customer("3", birth_date=date(1960, 1, 1)),  # 64
        ]

    @staticmethod
    def _bought(invoice_id, customer_id, when, status=InvoiceStatus.PENDING):
        return make_invoice(invoice_id, customer_id=customer_id, issued_at=when, status=status)

    def test_filters_by_age_and_counts_purchases(self, customers):
        invoices = [
            self._bought(1, "1", datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)),
            self._bought(2, "2", datetime(2024, 3, 5, 9, 0, tzinfo=timezone.utc)),
            self._bought(3, "2", datetime(2024, 3, 10, 9, 0, tzinfo=timezone.utc)),
            self._bought(4, "3", datetime(2024, 3, 2, 9, 0, tzinfo=timezone.utc)),
        ]
        rows = customers_by_age_and_purchases(customers, invoices, 40, *self.MARCH, self.TODAY)

        assert [(r.customer.id, r.age, r.purchase_count) for r in rows] == [
            ("1", 34, 1),
            ("2", 23, 2),
        ]

    def test_age_limit_is_inclusive(self, customers):
        invoices = [
            self._bought(1, "1", datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)),
            self._bought(2, "2", datetime(2024, 3, 5, 9, 0, tzinfo=timezone.utc)),
        ]
        rows = customers_by_age_and_purchases(customers, invoices, 23, *self.MARCH, self.TODAY)
        assert [r.customer.id for r in rows] == ["2"]

    def test_date_range_is_inclusive(self, customers):
        invoices = [
            self._bought(1, "1", datetime(2024, 3, 31, 23, 0, tzinfo=timezone.utc)),
            self._bought(2, "2", datetime(2024, 4, 1, 0, 0, tzinfo=timezone.utc)),
            self._bought(3, "3", datetime(2024, 2, 29, 23, 59, tzinfo=timezone.utc)),
        ]
        rows = customers_by_age_and_purchases(customers, invoices, 99, *self.MARCH, self.TODAY)
        assert [r.customer.id for r in rows] == ["1"]

    def test_void_invoices_are_not_purchases(self, customers):
        invoices = [
            self._bought(1, "1", datetime(2024, 3, 3, tzinfo=timezone.utc), InvoiceStatus.VOID),
            self._bought(2, "2", datetime(2024, 3, 3, tzinfo=timezone.utc), InvoiceStatus.PAID),
        ]
        rows = customers_by_age_and_purchases(customers, invoices, 99, *self.MARCH, self.TODAY)
        assert [r.customer.id for r in rows] == ["2"]

    def test_reversed_range_rejected(self, customers):
        with pytest.raises(ValidationError, match="Start date"):
            customers_by_age_and_purchases(
                customers, [], 40, date(2024, 3, 31), date(2024, 3, 1), self.TODAY
            )

    def test_negative_age_rejected(self, customers):
        with pytest.raises(ValidationError, match="negative"):
            customers_by_age_and_purchases(customers, [], -1, *self.MARCH, self.TODAY)
