"""CLI commands for the Invoice aggregate."""

from __future__ import annotations

import click

from invoicing.application.change_invoice_status import ChangeInvoiceStatusHandler
from invoicing.application.create_invoice import CreateInvoiceHandler
from invoicing.application.delete_invoice import DeleteInvoiceHandler
from invoicing.application.dto import InvoiceDTO, LineSpec
from invoicing.application.show_invoice import ListInvoicesHandler, ShowInvoiceHandler
from invoicing.application.update_invoice import UpdateInvoiceHandler
from invoicing.domain.model.invoice import InvoiceStatus
from invoicing.infrastructure.bootstrap import unit_of_work
from invoicing.infrastructure.cli.common import unwrap


def _parse_lines(raw: str) -> list[LineSpec]:
    """Parse 'P1:3,P2:5' (or 'P1:3@12' to keep line #12) into LineSpecs."""
    specs: list[LineSpec] = []
    for pair in raw.split(","):
        pair = pair.strip()
        if ":" not in pair:
            raise click.BadParameter(
                f"Invalid line format '{pair}'. Expected 'ProductId:Quantity[@LineId]'."
            )
        product_id, rest = pair.rsplit(":", 1)
        qty_str, _, line_str = rest.partition("@")
        try:
            qty = int(qty_str)
            line_id = int(line_str) if line_str else None
        except ValueError:
            raise click.BadParameter(
                f"Invalid quantity or line id '{rest}' for product '{product_id}'."
            )
        specs.append(LineSpec(product_id=product_id.strip(), quantity=qty, line_id=line_id))
    return specs


def _display_invoice(dto: InvoiceDTO) -> None:
    click.echo(f"Invoice #{dto.id} {dto.number}  (status={dto.status})")
    click.echo(f"Customer: {dto.customer_name} ({dto.customer_id})")
    click.echo(f"Issued:   {dto.issued_at}")
    click.echo()
    click.echo(f"  {'Line':>5} {'Code':<10} {'Product':<20} {'Qty':>5} {'Price':>12} {'Subtotal':>12}")
    click.echo(f"  {'-'*69}")
    for line in dto.lines:
        click.echo(
            f"  {line.id or '':>5} {line.product_code:<10} {line.product_name:<20} "
            f"{line.quantity:>5} {line.unit_price:>12} {line.subtotal:>12}"
        )
    click.echo(f"  {'-'*69}")
    click.echo(f"  {'Subtotal':<44} {dto.subtotal:>24}")
    click.echo(f"  {'Tax (19%)':<44} {dto.tax:>24}")
    click.echo(f"  {'Total':<44} {dto.total:>24}")


@click.command("create")
@click.option("--customer", "customer_id", required=True, help="Customer ID.")
@click.option("--lines", required=True, help="Lines as 'ProductId:Qty,ProductId:Qty'.")
def invoice_create(customer_id: str, lines: str) -> None:
    """Create a new invoice (takes the products out of stock)."""
    handler = CreateInvoiceHandler(unit_of_work())
    dto = unwrap(handler.handle(customer_id, _parse_lines(lines)))
    _display_invoice(dto)


@click.command("update")
@click.option("--id", "invoice_id", required=True, type=int, help="Invoice ID.")
@click.option("--customer", "customer_id", required=True, help="Customer ID.")
@click.option("--lines", required=True, help="Lines as 'ProductId:Qty[@LineId],...'.")
def invoice_update(invoice_id: int, customer_id: str, lines: str) -> None:
    """Replace the customer and lines of a PENDING invoice."""
    handler = UpdateInvoiceHandler(unit_of_work())
    dto = unwrap(handler.handle(invoice_id, customer_id, _parse_lines(lines)))
    _display_invoice(dto)


@click.command("status")
@click.option("--id", "invoice_id", required=True, type=int, help="Invoice ID.")
@click.argument(
    "status",
    type=click.Choice([s.value for s in InvoiceStatus], case_sensitive=False),
)
def invoice_status(invoice_id: int, status: str) -> None:
    """Change the status of an invoice (VOID gives the stock back)."""
    handler = ChangeInvoiceStatusHandler(unit_of_work())
    dto = unwrap(handler.handle(invoice_id, status))
    click.echo(f"Invoice #{dto.id} {dto.number} is now {dto.status}.")


@click.command("delete")
@click.option("--id", "invoice_id", required=True, type=int, help="Invoice ID.")
def invoice_delete(invoice_id: int) -> None:
    """Delete an invoice that is not PAID."""
    unwrap(DeleteInvoiceHandler(unit_of_work()).handle(invoice_id))
    click.echo(f"Invoice #{invoice_id} deleted.")


@click.command("show")
@click.option("--id", "invoice_id", required=True, type=int, help="Invoice ID to display.")
def invoice_show(invoice_id: int) -> None:
    """Show details of an existing invoice."""
    _display_invoice(unwrap(ShowInvoiceHandler(unit_of_work()).handle(invoice_id)))


@click.command("list")
@click.option("--customer", "customer_id", default=None, help="Only this customer's invoices.")
def invoice_list(customer_id: str | None) -> None:
    """List invoices, newest first."""
    invoices = unwrap(ListInvoicesHandler(unit_of_work()).handle(customer_id))
    if not invoices:
        click.echo("No invoices found.")
        return

    click.echo(f"{'ID':<6} {'Number':<22} {'Customer':<24} {'Status':<8} {'Total':>14}")
    click.echo("-" * 78)
    for inv in invoices:
        click.echo(
            f"{inv.id:<6} {inv.number:<22} {inv.customer_name:<24} {inv.status:<8} {inv.total:>14}"
        )
