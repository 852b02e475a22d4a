"""JSON-file-backed implementation of OrderRepository.

``orders.json`` is appended to by JsonInventoryStore inside checkout
transactions; this repository only reads it.  The (de)serialization
helpers are shared with the store.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from pathlib import Path

from pos.domain.model.order import OrderLine, OrderRecord, OrderStatus
from pos.domain.model.value_objects import DEFAULT_CURRENCY, Money, Quantity
from pos.domain.repository.order_repository import OrderRepository
from pos.infrastructure.persistence.json_files import load_json


class JsonOrderRepository(OrderRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path

    # --- OrderRepository interface --------------------------------------------

    def get_by_id(self, order_id: str) -> OrderRecord | None:
        for raw in load_json(self._file_path, []):
            if raw["id"] == order_id:
                return order_from_raw(raw)
        return None

    def list_all(self) -> list[OrderRecord]:
        return [order_from_raw(raw) for raw in load_json(self._file_path, [])]


# --- Serialization --------------------------------------------------------------


def order_to_raw(order: OrderRecord) -> dict:
    return {
        "id": order.id,
        "shopper_id": order.shopper_id,
        "status": order.status.value,
        "created_at": order.created_at.isoformat(),
        "total": str(order.total.amount),
        "items": [
            {
                "product_id": line.product_id,
                "product_name": line.product_name,
                "quantity": line.quantity.value,
                "unit_price": str(line.unit_price.amount),
                "currency": line.unit_price.currency,
            }
            for line in order.lines
        ],
    }


def order_from_raw(raw: dict) -> OrderRecord:
    lines = tuple(
        OrderLine(
            product_id=int(i["product_id"]),
            product_name=i["product_name"],
            quantity=Quantity(i["quantity"]),
            unit_price=Money(Decimal(i["unit_price"]), i.get("currency", DEFAULT_CURRENCY)),
        )
        for i in raw["items"]
    )
    return OrderRecord(
        id=raw["id"],
        shopper_id=raw.get("shopper_id"),
        lines=lines,
        created_at=datetime.fromisoformat(raw["created_at"]),
        status=OrderStatus(raw["status"]),
    )
