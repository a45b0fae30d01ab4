"""Domain -> DTO mapping shared by the handlers."""

from __future__ import annotations

from invoicing.application.dto import CustomerDTO, InvoiceDTO, InvoiceLineDTO, ProductDTO
from invoicing.domain.model.customer import Customer
from invoicing.domain.model.invoice import Invoice
from invoicing.domain.model.product import LOW_STOCK_THRESHOLD, Product
from invoicing.domain.repository.unit_of_work import UnitOfWork

DATETIME_FORMAT = "%Y-%m-%d %H:%M UTC"


def invoice_to_dto(invoice: Invoice, uow: UnitOfWork) -> InvoiceDTO:
    """Resolve customer and product names through the unit of work."""
    customer = uow.customers.get_by_id(invoice.customer_id)
    lines = []
    for line in invoice.lines:
        product = uow.products.get_by_id(line.product_id)
        lines.append(
            InvoiceLineDTO(
                id=line.id,
                product_id=line.product_id,
                product_code=product.code if product else "",
                product_name=product.name if product else "",
                quantity=line.quantity.value,
                unit_price=str(line.unit_price),
                subtotal=str(line.subtotal),
            )
        )
    return InvoiceDTO(
        id=invoice.id,  # type: ignore[arg-type]
        number=invoice.number,
        customer_id=invoice.customer_id,
        customer_name=customer.full_name if customer else "",
        issued_at=invoice.issued_at.strftime(DATETIME_FORMAT),
        status=invoice.status.value,
        lines=lines,
        subtotal=str(invoice.subtotal),
        tax=str(invoice.tax),
        total=str(invoice.total),
    )


def product_to_dto(product: Product, low_stock_threshold: int = LOW_STOCK_THRESHOLD) -> ProductDTO:
    """``low_stock`` is judged against *low_stock_threshold*."""
    return ProductDTO(
        id=product.id,
        code=product.code,
        name=product.name,
        price=str(product.price),
        stock=product.stock,
        active=product.active,
        low_stock=product.is_low_stock(low_stock_threshold),
    )


def customer_to_dto(customer: Customer) -> CustomerDTO:
    return CustomerDTO(
        id=customer.id,
        full_name=customer.full_name,
        email=customer.email,
        birth_date=customer.birth_date.isoformat(),
        phone=customer.phone,
        address=customer.address,
        active=customer.active,
    )
