"""CLI commands for browsing the product catalog."""

from __future__ import annotations

import click

from pos.domain.exceptions import StoreError
from pos.infrastructure.bootstrap import product_repository


@click.command("list")
@click.option("--category", default=None, help="Only show this category.")
def product_list(category: str | None) -> None:
    """List all products in the catalog."""
    try:
        products = product_repository().list_all()
    except StoreError as exc:
        raise click.ClickException(str(exc))

    if category is not None:
        products = [p for p in products if p.category == category]

    if not products:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<6} {'Name':<20} {'Category':<10} {'Price':>10}")
    click.echo("-" * 49)
    for p in products:
        click.echo(f"{p.id:<6} {p.name:<20} {p.category:<10} {str(p.price):>10}")
