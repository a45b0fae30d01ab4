"""CLI commands for the Product aggregate."""

from __future__ import annotations

import click

from invoicing.application.add_product import AddProductHandler
from invoicing.application.delete_product import DeleteProductHandler
from invoicing.application.dto import ProductDTO
from invoicing.application.restock_product import RestockProductHandler
from invoicing.application.show_catalog import (
    ListProductsHandler,
    LowStockReportHandler,
    PriceListHandler,
    ShowProductHandler,
)
from invoicing.application.update_product import UpdateProductHandler
from invoicing.infrastructure.bootstrap import settings, unit_of_work
from invoicing.infrastructure.cli.common import unwrap


def _threshold() -> int:
    return settings().low_stock_threshold


def _display_products(products: list[ProductDTO]) -> None:
    if not products:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<6} {'Code':<10} {'Name':<24} {'Price':>12} {'Stock':>7}")
    click.echo("-" * 63)
    for p in products:
        flag = " !" if p.low_stock else ""
        click.echo(f"{p.id:<6} {p.code:<10} {p.name:<24} {p.price:>12} {p.stock:>7}{flag}")


@click.command("add")
@click.option("--code", required=True, help="Unique SKU code.")
@click.option("--name", required=True, help="Product name.")
@click.option("--price", required=True, help="Price (e.g. 15.00).")
@click.option("--stock", required=True, type=int, help="Initial stock.")
@click.option("--description", default=None, help="Optional description.")
def product_add(code: str, name: str, price: str, stock: int, description: str | None) -> None:
    """Add a new product to the catalog."""
    handler = AddProductHandler(unit_of_work(), _threshold())
    product = unwrap(handler.handle(code, name, price, stock, description))
    click.echo(f"Product #{product.id} '{product.name}' added at {product.price}")


@click.command("update")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.option("--name", default=None, help="New name.")
@click.option("--price", default=None, help="New price (e.g. 29.99).")
@click.option("--code", default=None, help="New SKU code.")
@click.option("--active/--inactive", default=None, help="Activate or deactivate.")
def product_update(
    product_id: str,
    name: str | None,
    price: str | None,
    code: str | None,
    active: bool | None,
) -> None:
    """Update catalog fields of a product."""
    handler = UpdateProductHandler(unit_of_work(), _threshold())
    product = unwrap(handler.handle(product_id, name=name, price=price, code=code, active=active))
    click.echo(f"Product #{product.id} updated: {product.name} {product.price}")


@click.command("restock")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.option("--quantity", required=True, type=int, help="Units to add.")
def product_restock(product_id: str, quantity: int) -> None:
    """Add units to a product's stock."""
    product = unwrap(RestockProductHandler(unit_of_work(), _threshold()).handle(product_id, quantity))
    click.echo(f"Product #{product.id} stock is now {product.stock}")


@click.command("delete")
@click.option("--id", "product_id", required=True, help="Product ID.")
def product_delete(product_id: str) -> None:
    """Delete a product that was never invoiced."""
    unwrap(DeleteProductHandler(unit_of_work()).handle(product_id))
    click.echo(f"Product #{product_id} deleted.")


@click.command("show")
@click.option("--id", "product_id", required=True, help="Product ID.")
def product_show(product_id: str) -> None:
    """Show one product."""
    p = unwrap(ShowProductHandler(unit_of_work(), _threshold()).handle(product_id))
    click.echo(f"Product #{p.id}  {p.code}  {p.name}")
    click.echo(f"Price:  {p.price}")
    click.echo(f"Stock:  {p.stock}" + ("  (low)" if p.low_stock else ""))
    click.echo(f"Active: {'yes' if p.active else 'no'}")


@click.command("list")
def product_list() -> None:
    """List all products in the catalog."""
    _display_products(unwrap(ListProductsHandler(unit_of_work(), _threshold()).handle()))


@click.command("low-stock")
@click.option("--threshold", type=int, default=None, help="Stock at or below this value.")
def product_low_stock(threshold: int | None) -> None:
    """List products running out of stock."""
    handler = LowStockReportHandler(unit_of_work(), _threshold())
    _display_products(unwrap(handler.handle(threshold)))


@click.command("prices")
def product_prices() -> None:
    """Price list of active products, by name."""
    _display_products(unwrap(PriceListHandler(unit_of_work(), _threshold()).handle()))
