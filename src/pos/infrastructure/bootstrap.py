"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.

Settings are read on each call so an overridden ``POS_DATA_DIR`` takes
effect without re-importing.
"""

from __future__ import annotations

from pos.application.cart_session import CartSession
from pos.application.checkout import CheckoutCoordinator
from pos.application.stock_service import StockService
from pos.infrastructure.config import Settings
from pos.infrastructure.persistence.json_cart_repository import JsonCartRepository
from pos.infrastructure.persistence.json_inventory_store import JsonInventoryStore
from pos.infrastructure.persistence.json_order_repository import JsonOrderRepository
from pos.infrastructure.persistence.json_product_repository import (
    JsonProductRepository,
)


def settings() -> Settings:
    return Settings.from_env()


def inventory_store(config: Settings | None = None) -> JsonInventoryStore:
    config = config or settings()
    return JsonInventoryStore(config.data_dir, max_attempts=config.max_transaction_attempts)


def product_repository(config: Settings | None = None) -> JsonProductRepository:
    config = config or settings()
    return JsonProductRepository(config.data_dir / "products.json")


def order_repository(config: Settings | None = None) -> JsonOrderRepository:
    config = config or settings()
    return JsonOrderRepository(config.data_dir / "orders.json")


def cart_repository(config: Settings | None = None) -> JsonCartRepository:
    config = config or settings()
    return JsonCartRepository(config.data_dir / "carts.json")


def stock_service(
    store: JsonInventoryStore, config: Settings | None = None
) -> StockService:
    config = config or settings()
    return StockService(
        store,
        low_threshold=config.low_stock_threshold,
        medium_threshold=config.medium_stock_threshold,
    )


def cart_session(shopper_id: str | None, config: Settings | None = None) -> CartSession:
    return CartSession(cart_repository(config), shopper_id=shopper_id)


def checkout_coordinator(store: JsonInventoryStore) -> CheckoutCoordinator:
    return CheckoutCoordinator(store)
