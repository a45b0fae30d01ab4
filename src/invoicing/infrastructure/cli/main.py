import click

from invoicing.infrastructure.bootstrap import settings
from invoicing.infrastructure.cli.customer_commands import (
    customer_add,
    customer_delete,
    customer_list,
    customer_show,
    customer_update,
)
from invoicing.infrastructure.cli.invoice_commands import (
    invoice_create,
    invoice_delete,
    invoice_list,
    invoice_show,
    invoice_status,
    invoice_update,
)
from invoicing.infrastructure.cli.product_commands import (
    product_add,
    product_delete,
    product_list,
    product_low_stock,
    product_prices,
    product_restock,
    product_show,
    product_update,
)
from invoicing.infrastructure.cli.report_commands import (
    report_customers_by_age,
    report_next_purchase,
    report_sales,
)
from invoicing.infrastructure.config import LOG_LEVELS, configure_logging


@click.group()
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Override INVOICING_LOG_LEVEL.",
)
def cli(log_level: str | None) -> None:
    """Invoicing: customers, products and invoices"""
    try:
        current = settings()
    except ValueError as exc:
        raise click.UsageError(str(exc))
    configure_logging(log_level or current.log_level)


@cli.group()
def invoice() -> None:
    """Manage invoices."""


@cli.group()
def product() -> None:
    """Manage products."""


@cli.group()
def customer() -> None:
    """Manage customers."""


@cli.group()
def report() -> None:
    """Sales analytics."""


# Register subcommands
invoice.add_command(invoice_create)
invoice.add_command(invoice_delete)
invoice.add_command(invoice_list)
invoice.add_command(invoice_show)
invoice.add_command(invoice_status)
invoice.add_command(invoice_update)
product.add_command(product_add)
product.add_command(product_delete)
product.add_command(product_list)
product.add_command(product_low_stock)
product.add_command(product_prices)
product.add_command(product_restock)
product.add_command(product_show)
product.add_command(product_update)
customer.add_command(customer_add)
customer.add_command(customer_delete)
customer.add_command(customer_list)
customer.add_command(customer_show)
customer.add_command(customer_update)
report.add_command(report_customers_by_age)
report.add_command(report_next_purchase)
report.add_command(report_sales)
