"""Cart aggregate: the shopper's requested line items.

A cart holds at most one line per product; adding a product that is
already present grows the existing line.  The cart never checks stock:
that is the caller's job (UI hints via the Stock Service, the final word
via the Checkout Coordinator).
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from pos.domain.exceptions import EntityNotFoundError, ValidationError
from pos.domain.model.product import Product
from pos.domain.model.value_objects import DEFAULT_CURRENCY, Money, Quantity


@dataclass(frozen=True)
class CartLine:
    """A product snapshot taken when it was added, plus the wanted quantity."""

    product_id: int
    product_name: str
    unit_price: Money  # snapshot at add-time
    quantity: Quantity
    image: str = ""

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity.value


class Cart:
    """Aggregate root for a shopper's cart.

    Lines keep insertion order.  Mutators validate before touching state,
    so a rejected call leaves the cart exactly as it was.
    """

    def __init__(self, lines: list[CartLine] | None = None) -> None:
        self._lines: dict[int, CartLine] = {}
        for line in lines or []:
            if line.product_id in self._lines:
                raise ValidationError(
                    f"Duplicate cart line for product {line.product_id}"
                )
            self._lines[line.product_id] = line

    # --- Mutations ------------------------------------------------------------

    def add(self, product: Product, quantity: int) -> CartLine:
        qty = Quantity(quantity)
        currency = self._currency()
        if currency is not None and product.price.currency != currency:
            raise ValidationError(
                f"Cannot add {product.name} priced in {product.price.currency} "
                f"to a cart priced in {currency}"
            )
        existing = self._lines.get(product.id)
        if existing is not None:
            line = replace(existing, quantity=existing.quantity + qty)
        else:
            line = CartLine(
                product_id=product.id,
                product_name=product.name,
                unit_price=product.price,
                quantity=qty,
                image=product.image,
            )
        self._lines[product.id] = line
        return line

    def update_quantity(self, product_id: int, quantity: int) -> CartLine:
        """Set a line's quantity.  Use ``remove()`` to drop a line."""
        if isinstance(quantity, int) and not isinstance(quantity, bool) and quantity < 1:
            raise ValidationError(
                "Quantity must be at least 1; remove the item instead"
            )
        qty = Quantity(quantity)
        existing = self._lines.get(product_id)
        if existing is None:
            raise EntityNotFoundError(f"Product {product_id} is not in the cart")
        line = replace(existing, quantity=qty)
        self._lines[product_id] = line
        return line

    def remove(self, product_id: int) -> None:
        self._lines.pop(product_id, None)

    def clear(self) -> None:
        self._lines.clear()

    # --- Queries --------------------------------------------------------------

    @property
    def lines(self) -> list[CartLine]:
        return list(self._lines.values())

    @property
    def is_empty(self) -> bool:
        return not self._lines

    def get(self, product_id: int) -> CartLine | None:
        return self._lines.get(product_id)

    def total(self) -> Money:
        result = Money.zero(self._currency() or DEFAULT_CURRENCY)
        for line in self._lines.values():
            result = result + line.line_total
        return result

    def item_count(self) -> int:
        return sum(line.quantity.value for line in self._lines.values())

    # --- Internal helpers -----------------------------------------------------

    def _currency(self) -> str | None:
        """Currency of the lines already in the cart, if any."""
        first = next(iter(self._lines.values()), None)
        return first.unit_price.currency if first is not None else None
