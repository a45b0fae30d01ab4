"""JSON-file-backed unit of work.

The whole committed state (customers, products, invoices with their
lines) lives in one JSON document.  Each unit of work re-reads the file
when it begins and again, under the store lock, right before committing;
the new document is written to a temporary file and moved into place with
``os.replace`` so a commit is either fully on disk or not at all.
"""

from __future__ import annotations

import json
import os
from datetime import date, datetime
from decimal import Decimal
from pathlib import Path

from invoicing.domain.model.customer import Customer
from invoicing.domain.model.invoice import Invoice, InvoiceLine, InvoiceStatus
from invoicing.domain.model.product import Product
from invoicing.domain.model.value_objects import Money, Quantity
from invoicing.infrastructure.persistence.memory import InMemoryStore, InMemoryUnitOfWork

_EMPTY_DOCUMENT = {"customers": [], "products": [], "invoices": []}


class JsonUnitOfWork(InMemoryUnitOfWork):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._ensure_file()
        super().__init__(InMemoryStore())

    # --- Hooks ----------------------------------------------------------------

    def _refresh(self) -> None:
        raw = json.loads(self._file_path.read_text(encoding="utf-8"))
        self._store.replace(
            {c["id"]: self._customer_to_domain(c) for c in raw.get("customers", [])},
            {p["id"]: self._product_to_domain(p) for p in raw.get("products", [])},
            {i["id"]: self._invoice_to_domain(i) for i in raw.get("invoices", [])},
        )

    def _persist(
        self,
        customers: dict[str, Customer],
        products: dict[str, Product],
        invoices: dict[int, Invoice],
    ) -> None:
        document = {
            "customers": [self._customer_to_raw(c) for c in customers.values()],
            "products": [self._product_to_raw(p) for p in products.values()],
            "invoices": [self._invoice_to_raw(i) for i in sorted(invoices.values(), key=lambda i: i.id)],
        }
        tmp_path = self._file_path.with_suffix(self._file_path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(document, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
        os.replace(tmp_path, self._file_path)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _customer_to_raw(customer: Customer) -> dict:
        return {
            "id": customer.id,
            "first_name": customer.first_name,
            "last_name": customer.last_name,
            "email": customer.email,
            "birth_date": customer.birth_date.isoformat(),
            "phone": customer.phone,
            "address": customer.address,
            "active": customer.active,
            "created_at": customer.created_at.isoformat(),
            "updated_at": customer.updated_at.isoformat(),
        }

    @staticmethod
    def _customer_to_domain(raw: dict) -> Customer:
        return Customer(
            id=raw["id"],
            first_name=raw["first_name"],
            last_name=raw["last_name"],
            email=raw["email"],
            birth_date=date.fromisoformat(raw["birth_date"]),
            phone=raw.get("phone"),
            address=raw.get("address"),
            active=raw.get("active", True),
            created_at=datetime.fromisoformat(raw["created_at"]),
            updated_at=datetime.fromisoformat(raw["updated_at"]),
        )

    @staticmethod
    def _product_to_raw(product: Product) -> dict:
        return {
            "id": product.id,
            "code": product.code,
            "name": product.name,
            "description": product.description,
            "price": str(product.price.amount),
            "currency": product.price.currency,
            "stock": product.stock,
            "active": product.active,
            "created_at": product.created_at.isoformat(),
            "updated_at": product.updated_at.isoformat(),
            "version": product.version,
        }

    @staticmethod
    def _product_to_domain(raw: dict) -> Product:
        return Product(
            id=raw["id"],
            code=raw["code"],
            name=raw["name"],
            description=raw.get("description"),
            price=Money(Decimal(raw["price"]), raw.get("currency", "COP")),
            stock=raw["stock"],
            active=raw.get("active", True),
            created_at=datetime.fromisoformat(raw["created_at"]),
            updated_at=datetime.fromisoformat(raw["updated_at"]),
            version=raw.get("version", 0),
        )

    @staticmethod
    def _invoice_to_raw(invoice: Invoice) -> dict:
        return {
            "id": invoice.id,
            "number": invoice.number,
            "customer_id": invoice.customer_id,
            "issued_at": invoice.issued_at.isoformat(),
            "status": invoice.status.value,
            "created_at": invoice.created_at.isoformat(),
            "updated_at": invoice.updated_at.isoformat(),
            "version": invoice.version,
            "lines": [
                {
                    "id": line.id,
                    "product_id": line.product_id,
                    "quantity": line.quantity.value,
                    "unit_price": str(line.unit_price.amount),
                    "currency": line.unit_price.currency,
                }
                for line in invoice.lines
            ],
        }

    @staticmethod
    def _invoice_to_domain(raw: dict) -> Invoice:
        lines = [
            InvoiceLine(
                id=item["id"],
                product_id=item["product_id"],
                quantity=Quantity(item["quantity"]),
                unit_price=Money(Decimal(item["unit_price"]), item.get("currency", "COP")),
            )
            for item in raw["lines"]
        ]
        invoice = Invoice(
            id=raw["id"],
            number=raw["number"],
            customer_id=raw["customer_id"],
            issued_at=datetime.fromisoformat(raw["issued_at"]),
            lines=lines,
            status=InvoiceStatus(raw["status"]),
            created_at=datetime.fromisoformat(raw["created_at"]),
            updated_at=datetime.fromisoformat(raw["updated_at"]),
            version=raw.get("version", 0),
        )
        # Totals are derived, never stored
        invoice.calculate_totals()
        return invoice

    # --- File helpers ---------------------------------------------------------

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text(json.dumps(_EMPTY_DOCUMENT) + "\n", encoding="utf-8")
