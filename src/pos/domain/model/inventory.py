"""InventoryRecord aggregate: the single shared stock document.

One record maps every product identifier to the quantity on hand.  It is
the only resource shared between shopper sessions, so every mutation of
the persisted record goes through the Inventory Store's transaction
primitive (or, for best-effort corrections, a single-field write).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from pos.domain.exceptions import ValidationError


class StockLevel(Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HEALTHY = "HEALTHY"

    @staticmethod
    def classify(quantity: int, low_threshold: int = 5, medium_threshold: int = 20) -> StockLevel:
        if quantity <= low_threshold:
            return StockLevel.LOW
        if quantity <= medium_threshold:
            return StockLevel.MEDIUM
        return StockLevel.HEALTHY


@dataclass
class InventoryRecord:
    """Aggregate root for stock on hand.

    Invariants:
    - every quantity is a non-negative integer
    - unknown products have a quantity of 0
    """

    stocks: dict[int, int] = field(default_factory=dict)
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        for product_id, quantity in self.stocks.items():
            _check_level(product_id, quantity)

    def quantity_of(self, product_id: int) -> int:
        return self.stocks.get(product_id, 0)

    def withdraw(self, product_id: int, quantity: int) -> None:
        """Remove *quantity* units, refusing to go below zero."""
        if quantity <= 0:
            raise ValidationError("Withdrawal quantity must be positive")
        on_hand = self.quantity_of(product_id)
        if quantity > on_hand:
            raise ValidationError(
                f"Cannot withdraw {quantity} of product {product_id} "
                f"- only {on_hand} on hand"
            )
        self.stocks[product_id] = on_hand - quantity

    def deduct_clamped(self, product_id: int, amount: int) -> int:
        """Subtract *amount* units, stopping at zero.  Returns the new level."""
        if amount <= 0:
            raise ValidationError("Deduction amount must be positive")
        new_level = max(0, self.quantity_of(product_id) - amount)
        self.stocks[product_id] = new_level
        return new_level

    def set_quantity(self, product_id: int, quantity: int) -> None:
        _check_level(product_id, quantity)
        self.stocks[product_id] = quantity

    def restock(self, product_id: int, quantity: int) -> None:
        if quantity <= 0:
            raise ValidationError("Restock quantity must be positive")
        self.stocks[product_id] = self.quantity_of(product_id) + quantity

    def copy(self) -> InventoryRecord:
        return InventoryRecord(stocks=dict(self.stocks), updated_at=self.updated_at)


def _check_level(product_id: int, quantity: int) -> None:
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise ValidationError(
            f"Stock for product {product_id} must be an integer, got {quantity!r}"
        )
    if quantity < 0:
        raise ValidationError(
            f"Stock for product {product_id} cannot be negative, got {quantity}"
        )
