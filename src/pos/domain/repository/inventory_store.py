"""Abstract Inventory Store: the transactional document store boundary.

Defined in the domain layer so the stock and checkout logic never depend
on a specific backend.  Concrete stores (JSON files, in-memory) live in
the infrastructure layer.

The store offers three capabilities:

* point reads of the shared InventoryRecord (``read``)
* read-check-write transactions with automatic conflict retry
  (``transact``)
* push subscriptions delivering full snapshots (``subscribe``)

plus a non-transactional single-quantity write for best-effort
corrections.  Every method may raise a StoreError.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Callable, TypeVar

from pos.domain.model.inventory import InventoryRecord
from pos.domain.model.order import OrderRecord

T = TypeVar("T")

SnapshotListener = Callable[[InventoryRecord | None], None]
ErrorListener = Callable[[Exception], None]


class InventoryTransaction(ABC):
    """Handle passed to a transaction function.

    Reads see the state as of the transaction's start; writes are staged
    and only become visible when the store commits.
    """

    @abstractmethod
    def read_inventory(self) -> InventoryRecord:
        """Return a private copy of the inventory record (empty if absent)."""

    @abstractmethod
    def inventory_exists(self) -> bool:
        """True if the inventory record has ever been written."""

    @abstractmethod
    def write_inventory(self, record: InventoryRecord) -> None:
        """Stage the new inventory record."""

    @abstractmethod
    def add_order(self, order: OrderRecord) -> None:
        """Stage a new order record."""

    @abstractmethod
    def server_timestamp(self) -> datetime:
        """Timestamp assigned by the store for records written here."""


class Subscription(ABC):

    @abstractmethod
    def unsubscribe(self) -> None:
        """Stop delivering snapshots.  Safe to call twice."""


class InventoryStore(ABC):

    @abstractmethod
    def read(self) -> InventoryRecord | None:
        """Return the current inventory record, or None if none exists yet."""

    @abstractmethod
    def transact(self, fn: Callable[[InventoryTransaction], T]) -> T:
        """Run *fn* atomically and return its result.

        On a write conflict the whole function is re-run against fresh
        reads, up to a store-defined attempt limit, after which
        TransactionAbortedError is raised.  Any other exception raised by
        *fn* aborts the transaction and propagates unchanged.
        """

    @abstractmethod
    def subscribe(
        self,
        on_snapshot: SnapshotListener,
        on_error: ErrorListener | None = None,
    ) -> Subscription:
        """Deliver the current snapshot now and a new one after every change."""

    @abstractmethod
    def update_quantity(self, product_id: int, quantity: int) -> None:
        """Overwrite one product's quantity outside of any transaction."""
