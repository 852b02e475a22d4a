"""Abstract repository for persisted carts, keyed by shopper identity."""

from __future__ import annotations

from abc import ABC, abstractmethod

from pos.domain.model.cart import CartLine


class CartRepository(ABC):

    @abstractmethod
    def load(self, shopper_id: str) -> list[CartLine] | None:
        """Return the shopper's saved lines, or None if nothing is saved."""

    @abstractmethod
    def save(self, shopper_id: str, lines: list[CartLine]) -> None:
        """Replace the shopper's saved lines."""

    @abstractmethod
    def delete(self, shopper_id: str) -> None:
        """Forget the shopper's saved cart.  No-op if there is none."""
