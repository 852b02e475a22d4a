"""CLI commands for stock levels."""

from __future__ import annotations

import click

from pos.application.show_stock import ShowStockHandler
from pos.domain.exceptions import DomainException, StoreError
from pos.infrastructure.bootstrap import (
    inventory_store,
    product_repository,
    settings,
    stock_service,
)


@click.command("show")
def stock_show() -> None:
    """Show current stock levels."""
    config = settings()
    handler = ShowStockHandler(
        store=inventory_store(config),
        product_repo=product_repository(config),
        low_threshold=config.low_stock_threshold,
        medium_threshold=config.medium_stock_threshold,
    )
    try:
        lines = handler.handle()
    except StoreError as exc:
        raise click.ClickException(str(exc))

    if not lines:
        click.echo("No stock records found.")
        return

    click.echo(f"{'ID':<6} {'Product':<20} {'Category':<10} {'On hand':>8} {'Level':>8}")
    click.echo("-" * 56)
    for line in lines:
        click.echo(
            f"{line.product_id:<6} {line.product_name:<20} {line.category:<10} "
            f"{line.quantity:>8} {line.level:>8}"
        )


@click.command("set")
@click.option("--product", "product_id", required=True, type=int, help="Product ID.")
@click.option("--quantity", required=True, type=int, help="Quantity on hand.")
def stock_set(product_id: int, quantity: int) -> None:
    """Set the quantity on hand for a product."""
    service = stock_service(inventory_store())
    try:
        service.set_level(product_id, quantity)
    except (DomainException, StoreError) as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Stock for product {product_id} set to {quantity}")


@click.command("restock")
@click.option("--product", "product_id", required=True, type=int, help="Product ID.")
@click.option("--quantity", required=True, type=int, help="Units received.")
def stock_restock(product_id: int, quantity: int) -> None:
    """Add received units to a product's stock."""
    service = stock_service(inventory_store())
    try:
        new_level = service.restock(product_id, quantity)
    except (DomainException, StoreError) as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Stock for product {product_id} is now {new_level}")


@click.command("decrement")
@click.option("--product", "product_id", required=True, type=int, help="Product ID.")
@click.option("--quantity", required=True, type=int, help="Units to write off.")
def stock_decrement(product_id: int, quantity: int) -> None:
    """Write units off a product's stock (never below zero)."""
    service = stock_service(inventory_store())
    try:
        new_level = service.decrement(product_id, quantity)
    except (DomainException, StoreError) as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Stock for product {product_id} is now {new_level}")
