"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass

from pos.domain.model.cart import Cart
from pos.domain.model.order import OrderRecord


@dataclass(frozen=True)
class LineDTO:
    """Output: a single cart or order line as displayed to the user."""

    product_id: int
    product_name: str
    quantity: int
    unit_price: str  # formatted, e.g. "฿55.00"
    line_total: str


@dataclass(frozen=True)
class CartDTO:
    shopper_id: str | None
    items: list[LineDTO]
    item_count: int
    total: str


@dataclass(frozen=True)
class OrderDTO:
    """Output: a completed order as displayed to the user."""

    id: str
    shopper_id: str | None
    status: str
    items: list[LineDTO]
    total: str
    created_at: str


@dataclass(frozen=True)
class StockLineDTO:
    product_id: int
    product_name: str
    category: str
    quantity: int
    level: str


# --- Mapping ------------------------------------------------------------------


def cart_to_dto(cart: Cart, shopper_id: str | None) -> CartDTO:
    return CartDTO(
        shopper_id=shopper_id,
        items=[
            LineDTO(
                product_id=line.product_id,
                product_name=line.product_name,
                quantity=line.quantity.value,
                unit_price=str(line.unit_price),
                line_total=str(line.line_total),
            )
            for line in cart.lines
        ],
        item_count=cart.item_count(),
        total=str(cart.total()),
    )


def order_to_dto(order: OrderRecord) -> OrderDTO:
    return OrderDTO(
        id=order.id,
        shopper_id=order.shopper_id,
        status=order.status.value,
        items=[
            LineDTO(
                product_id=line.product_id,
                product_name=line.product_name,
                quantity=line.quantity.value,
                unit_price=str(line.unit_price),
                line_total=str(line.line_total),
            )
            for line in order.lines
        ],
        total=str(order.total),
        created_at=order.created_at.strftime("%Y-%m-%d %H:%M UTC"),
    )
