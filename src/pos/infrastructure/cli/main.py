import click

from pos.application.stock_service import StockService
from pos.domain.exceptions import StoreError
from pos.infrastructure.bootstrap import inventory_store, product_repository, settings
from pos.infrastructure.cli.cart_commands import (
    cart_add,
    cart_clear,
    cart_remove,
    cart_show,
    cart_update,
)
from pos.infrastructure.cli.order_commands import checkout, order_list, order_show
from pos.infrastructure.cli.product_commands import product_list
from pos.infrastructure.cli.stock_commands import (
    stock_decrement,
    stock_restock,
    stock_set,
    stock_show,
)
from pos.infrastructure.logging import configure_logging
from pos.infrastructure.seed import demo_catalog, opening_stock


@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log debug output.")
def cli(verbose: bool) -> None:
    """POS: point-of-sale checkout."""
    try:
        config = settings()
    except ValueError as exc:
        raise click.ClickException(f"Invalid configuration: {exc}")
    configure_logging("DEBUG" if verbose else config.log_level)


@cli.group()
def product() -> None:
    """Browse the catalog."""


@cli.group()
def stock() -> None:
    """Manage stock levels."""


@cli.group()
def cart() -> None:
    """Manage the shopper's cart."""


@cli.group()
def order() -> None:
    """Browse completed orders."""


@cli.command("init")
def init() -> None:
    """Seed the demo catalog and opening stock if none exist."""
    config = settings()
    try:
        products = product_repository(config)
        if not products.list_all():
            for p in demo_catalog(config.currency):
                products.save(p)
            click.echo("Demo catalog created.")
        created = StockService(inventory_store(config)).ensure_initialized(opening_stock())
    except StoreError as exc:
        raise click.ClickException(str(exc))
    click.echo("Opening stock created." if created else "Stock already initialized.")


# Register subcommands
cli.add_command(checkout)
product.add_command(product_list)
stock.add_command(stock_decrement)
stock.add_command(stock_restock)
stock.add_command(stock_set)
stock.add_command(stock_show)
cart.add_command(cart_add)
cart.add_command(cart_clear)
cart.add_command(cart_remove)
cart.add_command(cart_show)
cart.add_command(cart_update)
order.add_command(order_list)
order.add_command(order_show)
