"""Application service: Cart Session.

Binds a Cart aggregate to one shopper identity and its persisted copy.

The in-memory cart is authoritative for the session.  After every
mutation the new lines are written to the CartRepository; a failed write
is logged and otherwise ignored, since the next mutation writes the whole
cart again.  Without a shopper identity the cart is memory-only.
"""

from __future__ import annotations

import structlog

from pos.application.dto import CartDTO, cart_to_dto
from pos.domain.exceptions import StoreError
from pos.domain.model.cart import Cart, CartLine
from pos.domain.model.product import Product
from pos.domain.model.value_objects import Money
from pos.domain.repository.cart_repository import CartRepository

logger = structlog.get_logger(__name__)


class CartSession:

    def __init__(self, cart_repo: CartRepository, shopper_id: str | None = None) -> None:
        self._cart_repo = cart_repo
        self._shopper_id: str | None = None
        self._cart = Cart()
        if shopper_id is not None:
            self.sign_in(shopper_id)

    # --- Identity -------------------------------------------------------------

    @property
    def shopper_id(self) -> str | None:
        return self._shopper_id

    @property
    def is_persistent(self) -> bool:
        return self._shopper_id is not None

    def sign_in(self, shopper_id: str) -> None:
        """Switch to *shopper_id* and load their saved cart."""
        if not shopper_id:
            raise ValueError("shopper_id must be a non-empty string")
        self._shopper_id = shopper_id
        try:
            lines = self._cart_repo.load(shopper_id)
        except StoreError as exc:
            logger.warning("Failed to load cart", shopper_id=shopper_id, error=str(exc))
            lines = None
        self._cart = Cart(lines or [])

    def sign_out(self) -> None:
        self._shopper_id = None
        self._cart = Cart()

    # --- Mutations ------------------------------------------------------------

    def add(self, product: Product, quantity: int) -> CartLine:
        line = self._cart.add(product, quantity)
        self._persist()
        return line

    def update_quantity(self, product_id: int, quantity: int) -> CartLine:
        line = self._cart.update_quantity(product_id, quantity)
        self._persist()
        return line

    def remove(self, product_id: int) -> None:
        self._cart.remove(product_id)
        self._persist()

    def clear(self) -> None:
        self._cart.clear()
        if self._shopper_id is None:
            return
        try:
            self._cart_repo.delete(self._shopper_id)
        except StoreError as exc:
            logger.warning("Failed to clear saved cart", shopper_id=self._shopper_id, error=str(exc))

    # --- Queries --------------------------------------------------------------

    @property
    def lines(self) -> list[CartLine]:
        return self._cart.lines

    @property
    def is_empty(self) -> bool:
        return self._cart.is_empty

    def total(self) -> Money:
        return self._cart.total()

    def item_count(self) -> int:
        return self._cart.item_count()

    def to_dto(self) -> CartDTO:
        return cart_to_dto(self._cart, self._shopper_id)

    # --- Internal helpers -----------------------------------------------------

    def _persist(self) -> None:
        if self._shopper_id is None:
            return
        try:
            self._cart_repo.save(self._shopper_id, self._cart.lines)
        except StoreError as exc:
            logger.warning("Failed to save cart", shopper_id=self._shopper_id, error=str(exc))
