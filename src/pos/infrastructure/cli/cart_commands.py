"""CLI commands for the shopper's cart.

The shopper identity comes from ``--shopper`` (or ``POS_SHOPPER``).
Without one the cart is memory-only and is gone when the command exits.
"""

from __future__ import annotations

import click

from pos.application.add_to_cart import AddToCartHandler
from pos.application.cart_session import CartSession
from pos.application.dto import CartDTO
from pos.domain.exceptions import DomainException, StoreError
from pos.infrastructure.bootstrap import (
    cart_session,
    inventory_store,
    product_repository,
    settings,
    stock_service,
)

shopper_option = click.option(
    "--shopper",
    envvar="POS_SHOPPER",
    default=None,
    help="Signed-in shopper ID (env: POS_SHOPPER).",
)


def open_cart(shopper: str | None) -> CartSession:
    if shopper is None:
        click.echo("Warning: no shopper signed in, the cart will not be saved.", err=True)
    return cart_session(shopper)


def display_cart(dto: CartDTO) -> None:
    if not dto.items:
        click.echo("Cart is empty.")
        return
    click.echo(f"  {'ID':<5} {'Product':<20} {'Qty':>5} {'Price':>10} {'Total':>10}")
    click.echo(f"  {'-'*53}")
    for item in dto.items:
        click.echo(
            f"  {item.product_id:<5} {item.product_name:<20} {item.quantity:>5} "
            f"{item.unit_price:>10} {item.line_total:>10}"
        )
    click.echo(f"  {'-'*53}")
    click.echo(f"  {'Items: ' + str(dto.item_count):<33} {dto.total:>20}")


@click.command("show")
@shopper_option
def cart_show(shopper: str | None) -> None:
    """Show the cart."""
    display_cart(open_cart(shopper).to_dto())


@click.command("add")
@shopper_option
@click.option("--product", "product_id", required=True, type=int, help="Product ID.")
@click.option("--quantity", default=1, show_default=True, type=int, help="Units to add.")
def cart_add(shopper: str | None, product_id: int, quantity: int) -> None:
    """Add a product to the cart."""
    config = settings()
    cart = open_cart(shopper)
    stock = stock_service(inventory_store(config), config)
    stock.start()
    try:
        handler = AddToCartHandler(product_repository(config), stock)
        line = handler.handle(cart, product_id, quantity)
    except (DomainException, StoreError) as exc:
        raise click.ClickException(str(exc))
    finally:
        stock.stop()

    click.echo(f"{line.product_name} x{line.quantity} in cart")
    display_cart(cart.to_dto())


@click.command("update")
@shopper_option
@click.option("--product", "product_id", required=True, type=int, help="Product ID.")
@click.option("--quantity", required=True, type=int, help="New quantity (at least 1).")
def cart_update(shopper: str | None, product_id: int, quantity: int) -> None:
    """Change the quantity of a cart line."""
    cart = open_cart(shopper)
    try:
        cart.update_quantity(product_id, quantity)
    except DomainException as exc:
        raise click.ClickException(str(exc))
    display_cart(cart.to_dto())


@click.command("remove")
@shopper_option
@click.option("--product", "product_id", required=True, type=int, help="Product ID.")
def cart_remove(shopper: str | None, product_id: int) -> None:
    """Remove a product from the cart."""
    cart = open_cart(shopper)
    cart.remove(product_id)
    display_cart(cart.to_dto())


@click.command("clear")
@shopper_option
def cart_clear(shopper: str | None) -> None:
    """Empty the cart."""
    open_cart(shopper).clear()
    click.echo("Cart cleared.")
