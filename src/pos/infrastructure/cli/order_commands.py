"""CLI commands for checkout and order history."""

from __future__ import annotations

import click

from pos.application.dto import OrderDTO
from pos.application.show_order import ListOrdersHandler, ShowOrderHandler
from pos.domain.exceptions import DomainException, StoreError
from pos.infrastructure.bootstrap import checkout_coordinator, inventory_store, order_repository
from pos.infrastructure.cli.cart_commands import display_cart, open_cart, shopper_option


def _display_order(dto: OrderDTO) -> None:
    """Shared formatting for displaying an order."""
    click.echo(f"Order {dto.id}  (status={dto.status})")
    click.echo(f"Shopper:  {dto.shopper_id or '-'}")
    click.echo(f"Created:  {dto.created_at}")
    click.echo()
    click.echo(f"  {'Product':<20} {'Qty':>5} {'Price':>10} {'Total':>10}")
    click.echo(f"  {'-'*47}")
    for item in dto.items:
        click.echo(
            f"  {item.product_name:<20} {item.quantity:>5} {item.unit_price:>10} {item.line_total:>10}"
        )
    click.echo(f"  {'-'*47}")
    click.echo(f"  {'Order Total':<27} {dto.total:>20}")


@click.command("checkout")
@shopper_option
def checkout(shopper: str | None) -> None:
    """Buy everything in the cart."""
    cart = open_cart(shopper)
    result = checkout_coordinator(inventory_store()).submit(cart)

    if not result.succeeded:
        display_cart(cart.to_dto())
        raise click.ClickException(result.reason or "Checkout failed")

    click.echo("Checkout complete.")
    _display_order(result.order)


@click.command("show")
@click.option("--id", "order_id", required=True, help="Order ID to display.")
def order_show(order_id: str) -> None:
    """Show details of an existing order."""
    handler = ShowOrderHandler(order_repo=order_repository())

    try:
        dto = handler.handle(order_id)
    except (DomainException, StoreError) as exc:
        raise click.ClickException(str(exc))

    _display_order(dto)


@click.command("list")
@click.option("--shopper", default=None, help="Only show this shopper's orders.")
def order_list(shopper: str | None) -> None:
    """List completed orders."""
    try:
        orders = ListOrdersHandler(order_repo=order_repository()).handle(shopper)
    except StoreError as exc:
        raise click.ClickException(str(exc))

    if not orders:
        click.echo("No orders found.")
        return

    click.echo(f"{'Order':<24} {'Shopper':<12} {'Created':<22} {'Total':>10}")
    click.echo("-" * 71)
    for dto in orders:
        click.echo(
            f"{dto.id:<24} {dto.shopper_id or '-':<12} {dto.created_at:<22} {dto.total:>10}"
        )
