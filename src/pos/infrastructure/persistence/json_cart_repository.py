"""JSON-file-backed implementation of CartRepository.

All carts live in one ``carts.json`` document keyed by shopper identity:

    {"<shopper_id>": {"items": [...], "updated_at": "<iso timestamp>"}}

Writes hold an exclusive lock on ``.carts.lock`` next to the document.
"""

from __future__ import annotations

import threading
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path

from pos.domain.model.cart import CartLine
from pos.domain.model.value_objects import DEFAULT_CURRENCY, Money, Quantity
from pos.domain.repository.cart_repository import CartRepository
from pos.infrastructure.persistence.json_files import file_lock, load_json, write_json


class JsonCartRepository(CartRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._lock = threading.Lock()
        self._lock_path = file_path.with_name(".carts.lock")

    # --- CartRepository interface ---------------------------------------------

    def load(self, shopper_id: str) -> list[CartLine] | None:
        doc = load_json(self._file_path, {}).get(shopper_id)
        if doc is None:
            return None
        return [self._to_domain(raw) for raw in doc.get("items", [])]

    def save(self, shopper_id: str, lines: list[CartLine]) -> None:
        with self._lock, file_lock(self._lock_path):
            carts = load_json(self._file_path, {})
            carts[shopper_id] = {
                "items": [self._to_raw(line) for line in lines],
                "updated_at": datetime.now(timezone.utc).isoformat(),
            }
            write_json(self._file_path, carts)

    def delete(self, shopper_id: str) -> None:
        with self._lock, file_lock(self._lock_path):
            carts = load_json(self._file_path, {})
            if carts.pop(shopper_id, None) is not None:
                write_json(self._file_path, carts)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(line: CartLine) -> dict:
        return {
            "product_id": line.product_id,
            "product_name": line.product_name,
            "unit_price": str(line.unit_price.amount),
            "currency": line.unit_price.currency,
            "quantity": line.quantity.value,
            "image": line.image,
        }

    @staticmethod
    def _to_domain(raw: dict) -> CartLine:
        return CartLine(
            product_id=int(raw["product_id"]),
            product_name=raw["product_name"],
            unit_price=Money(Decimal(raw["unit_price"]), raw.get("currency", DEFAULT_CURRENCY)),
            quantity=Quantity(raw["quantity"]),
            image=raw.get("image", ""),
        )
