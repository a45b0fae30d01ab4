"""CLI commands for the Customer aggregate."""

from __future__ import annotations

from datetime import datetime

import click

from invoicing.application.add_customer import AddCustomerHandler
from invoicing.application.delete_customer import DeleteCustomerHandler
from invoicing.application.dto import CustomerDTO
from invoicing.application.show_customers import ListCustomersHandler, ShowCustomerHandler
from invoicing.application.update_customer import UpdateCustomerHandler
from invoicing.infrastructure.bootstrap import unit_of_work
from invoicing.infrastructure.cli.common import unwrap

_DATE = click.DateTime(formats=["%Y-%m-%d"])


def _display_customer(dto: CustomerDTO) -> None:
    click.echo(f"Customer #{dto.id}  {dto.full_name}")
    click.echo(f"Email:      {dto.email}")
    click.echo(f"Birth date: {dto.birth_date}")
    click.echo(f"Phone:      {dto.phone or '-'}")
    click.echo(f"Address:    {dto.address or '-'}")


@click.command("add")
@click.option("--first-name", required=True)
@click.option("--last-name", required=True)
@click.option("--email", required=True)
@click.option("--birth-date", required=True, type=_DATE)
@click.option("--phone", default=None)
@click.option("--address", default=None)
def customer_add(
    first_name: str,
    last_name: str,
    email: str,
    birth_date: datetime,
    phone: str | None,
    address: str | None,
) -> None:
    """Register a new customer."""
    handler = AddCustomerHandler(unit_of_work())
    customer = unwrap(
        handler.handle(first_name, last_name, email, birth_date.date(), phone, address)
    )
    click.echo(f"Customer #{customer.id} '{customer.full_name}' added")


@click.command("update")
@click.option("--id", "customer_id", required=True, help="Customer ID.")
@click.option("--first-name", default=None)
@click.option("--last-name", default=None)
@click.option("--email", default=None)
@click.option("--birth-date", default=None, type=_DATE)
@click.option("--phone", default=None)
@click.option("--address", default=None)
def customer_update(
    customer_id: str,
    first_name: str | None,
    last_name: str | None,
    email: str | None,
    birth_date: datetime | None,
    phone: str | None,
    address: str | None,
) -> None:
    """Update the given fields of a customer."""
    handler = UpdateCustomerHandler(unit_of_work())
    customer = unwrap(
        handler.handle(
            customer_id,
            first_name=first_name,
            last_name=last_name,
            email=email,
            birth_date=birth_date.date() if birth_date else None,
            phone=phone,
            address=address,
        )
    )
    click.echo(f"Customer #{customer.id} updated: {customer.full_name} <{customer.email}>")


@click.command("show")
@click.option("--id", "customer_id", required=True, help="Customer ID.")
def customer_show(customer_id: str) -> None:
    """Show one customer."""
    _display_customer(unwrap(ShowCustomerHandler(unit_of_work()).handle(customer_id)))


@click.command("delete")
@click.option("--id", "customer_id", required=True, help="Customer ID.")
def customer_delete(customer_id: str) -> None:
    """Delete a customer without invoices."""
    unwrap(DeleteCustomerHandler(unit_of_work()).handle(customer_id))
    click.echo(f"Customer #{customer_id} deleted.")


@click.command("list")
def customer_list() -> None:
    """List all customers."""
    customers = unwrap(ListCustomersHandler(unit_of_work()).handle())
    if not customers:
        click.echo("No customers found.")
        return

    click.echo(f"{'ID':<6} {'Name':<28} {'Email':<30}")
    click.echo("-" * 66)
    for c in customers:
        click.echo(f"{c.id:<6} {c.full_name:<28} {c.email:<30}")
