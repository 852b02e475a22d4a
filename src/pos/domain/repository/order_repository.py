"""Abstract read repository for OrderRecord.

Orders are only ever written by the checkout transaction through
``InventoryTransaction.add_order``; this interface serves order history.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from pos.domain.model.order import OrderRecord


class OrderRepository(ABC):

    @abstractmethod
    def get_by_id(self, order_id: str) -> OrderRecord | None:
        """Return an order by its ID, or None if not found."""

    @abstractmethod
    def list_all(self) -> list[OrderRecord]:
        """Return every order, oldest first."""
