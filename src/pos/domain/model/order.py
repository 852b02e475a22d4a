"""OrderRecord: the immutable trace of a completed checkout.

Exactly one OrderRecord is written per successful checkout, in the same
store transaction that decrements stock.  It is never mutated afterwards.
"""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from pos.domain.exceptions import ValidationError
from pos.domain.model.cart import CartLine
from pos.domain.model.value_objects import DEFAULT_CURRENCY, Money, Quantity


class OrderStatus(Enum):
    COMPLETED = "COMPLETED"


@dataclass(frozen=True)
class OrderLine:
    """Line snapshot copied from the cart at checkout time."""

    product_id: int
    product_name: str
    quantity: Quantity
    unit_price: Money

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity.value

    @staticmethod
    def from_cart_line(line: CartLine) -> OrderLine:
        return OrderLine(
            product_id=line.product_id,
            product_name=line.product_name,
            quantity=line.quantity,
            unit_price=line.unit_price,
        )


@dataclass(frozen=True)
class OrderRecord:
    """Aggregate root for completed purchases.

    Use ``OrderRecord.create()`` for new orders.  The plain constructor is
    what repositories use to reconstitute persisted records.
    """

    id: str
    shopper_id: str | None
    lines: tuple[OrderLine, ...]
    created_at: datetime
    status: OrderStatus = OrderStatus.COMPLETED

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def create(
        lines: list[CartLine],
        shopper_id: str | None,
        created_at: datetime,
    ) -> OrderRecord:
        if not lines:
            raise ValidationError("Order must contain at least one item")
        currencies = {line.unit_price.currency for line in lines}
        if len(currencies) > 1:
            raise ValidationError(
                f"Order lines mix currencies: {', '.join(sorted(currencies))}"
            )
        return OrderRecord(
            id=OrderRecord.new_id(),
            shopper_id=shopper_id,
            lines=tuple(OrderLine.from_cart_line(line) for line in lines),
            created_at=created_at,
        )

    @staticmethod
    def new_id() -> str:
        """Millisecond timestamp plus a random suffix, e.g. ``1760900000000-3fa2c1d9``."""
        return f"{time.time_ns() // 1_000_000}-{uuid.uuid4().hex[:8]}"

    # --- Computed properties --------------------------------------------------

    @property
    def total(self) -> Money:
        currency = self.lines[0].unit_price.currency if self.lines else DEFAULT_CURRENCY
        result = Money.zero(currency)
        for line in self.lines:
            result = result + line.line_total
        return result

    @property
    def item_count(self) -> int:
        return sum(line.quantity.value for line in self.lines)
