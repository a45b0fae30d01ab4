"""CLI commands for sales analytics."""

from __future__ import annotations

from datetime import datetime

import click

from invoicing.application.sales_reports import (
    CustomersByAgeAndPurchaseHandler,
    NextPurchaseEstimateHandler,
    SalesByProductHandler,
)
from invoicing.infrastructure.bootstrap import unit_of_work
from invoicing.infrastructure.cli.common import unwrap


@click.command("sales")
@click.option("--year", required=True, type=int, help="Calendar year.")
def report_sales(year: int) -> None:
    """Units and amount sold per product in a year."""
    rows = unwrap(SalesByProductHandler(unit_of_work()).handle(year))
    if not rows:
        click.echo(f"No sales in {year}.")
        return

    click.echo(f"{'Code':<10} {'Product':<24} {'Qty':>6} {'Amount':>14} {'Invoices':>9}")
    click.echo("-" * 67)
    for r in rows:
        click.echo(f"{r.code:<10} {r.name:<24} {r.quantity:>6} {r.amount:>14} {r.invoice_count:>9}")


@click.command("next-purchase")
@click.option("--customer", "customer_id", required=True, help="Customer ID.")
def report_next_purchase(customer_id: str) -> None:
    """Estimate when a customer will buy again."""
    dto = unwrap(NextPurchaseEstimateHandler(unit_of_work()).handle(customer_id))
    click.echo(f"Customer:        {dto.customer_name} ({dto.customer_id})")
    click.echo(f"Purchases:       {dto.purchase_count}")
    click.echo(f"Last purchase:   {dto.last_purchase}")
    click.echo(f"Average gap:     {dto.average_days_between} days")
    click.echo(f"Next purchase:   {dto.estimated_next_purchase}  [{dto.outlook}]")


@click.command("customers-by-age")
@click.option("--max-age", required=True, type=click.IntRange(min=0), help="Oldest age to include.")
@click.option("--from", "date_from", required=True, type=click.DateTime(formats=["%Y-%m-%d"]))
@click.option("--to", "date_to", required=True, type=click.DateTime(formats=["%Y-%m-%d"]))
def report_customers_by_age(max_age: int, date_from: datetime, date_to: datetime) -> None:
    """Customers up to an age who bought within a date range, oldest first."""
    handler = CustomersByAgeAndPurchaseHandler(unit_of_work())
    rows = unwrap(handler.handle(max_age, date_from.date(), date_to.date()))
    if not rows:
        click.echo("No matching customers.")
        return

    click.echo(f"{'ID':<6} {'Name':<28} {'Age':>4} {'Invoices':>9}")
    click.echo("-" * 50)
    for r in rows:
        click.echo(f"{r.customer_id:<6} {r.full_name:<28} {r.age:>4} {r.purchase_count:>9}")
