"""In-memory fakes for testing.

These implement the same abstract interfaces as the JSON-backed classes
but keep everything in memory.  No file I/O, no side effects.

FakeInventoryStore mimics an optimistic transactional store and adds a
few knobs for tests: an ``unreachable`` switch, a ``before_commit`` hook
and a ``read_hook`` that runs on every transactional read.
"""

from __future__ import annotations

import itertools
import threading
from datetime import datetime, timezone
from typing import Callable, TypeVar

from pos.domain.exceptions import (
    StoreUnavailableError,
    TransactionAbortedError,
    TransactionConflictError,
)
from pos.domain.model.cart import CartLine
from pos.domain.model.inventory import InventoryRecord
from pos.domain.model.order import OrderRecord
from pos.domain.model.product import Product
from pos.domain.repository.cart_repository import CartRepository
from pos.domain.repository.inventory_store import (
    ErrorListener,
    InventoryStore,
    InventoryTransaction,
    SnapshotListener,
    Subscription,
)
from pos.domain.repository.order_repository import OrderRepository
from pos.domain.repository.product_repository import ProductRepository

T = TypeVar("T")

FIXED_NOW = datetime(2026, 1, 15, 9, 30, tzinfo=timezone.utc)


class FakeInventoryStore(InventoryStore):

    def __init__(self, stocks: dict[int, int] | None = None, max_attempts: int = 5) -> None:
        self._record: InventoryRecord | None = (
            InventoryRecord(stocks=dict(stocks)) if stocks is not None else None
        )
        self._version = 0
        self._lock = threading.Lock()
        self._listeners: dict[int, tuple[SnapshotListener, ErrorListener | None]] = {}
        self._ids = itertools.count(1)
        self.max_attempts = max_attempts
        self.orders: list[OrderRecord] = []
        self.unreachable = False
        self.read_hook: Callable[[], None] | None = None
        self.before_commit: Callable[[], None] | None = None
        self.attempts = 0
        self.commits = 0

    # --- Test helpers ---------------------------------------------------------

    @property
    def stocks(self) -> dict[int, int]:
        with self._lock:
            return dict(self._record.stocks) if self._record else {}

    def break_subscriptions(self, exc: Exception | None = None) -> None:
        error = exc or StoreUnavailableError("Listener connection lost")
        with self._lock:
            listeners = list(self._listeners.values())
            self._listeners.clear()
        for _, on_error in listeners:
            if on_error is not None:
                on_error(error)

    # --- InventoryStore interface ---------------------------------------------

    def read(self) -> InventoryRecord | None:
        self._check_reachable()
        with self._lock:
            return self._record.copy() if self._record else None

    def transact(self, fn: Callable[[InventoryTransaction], T]) -> T:
        for _ in range(self.max_attempts):
            self.attempts += 1
            self._check_reachable()
            txn = _FakeTransaction(self)
            result = fn(txn)
            if self.before_commit is not None:
                self.before_commit()
            self._check_reachable()
            try:
                snapshot = self._commit(txn)
            except TransactionConflictError:
                continue
            if snapshot is not None:
                self._notify(snapshot)
            return result
        raise TransactionAbortedError("Too much contention on inventory")

    def subscribe(
        self,
        on_snapshot: SnapshotListener,
        on_error: ErrorListener | None = None,
    ) -> Subscription:
        listener_id = next(self._ids)
        if self.unreachable:
            if on_error is not None:
                on_error(StoreUnavailableError("Inventory store unreachable"))
            return _FakeSubscription(self, listener_id)
        with self._lock:
            self._listeners[listener_id] = (on_snapshot, on_error)
            current = self._record.copy() if self._record else None
        on_snapshot(current)
        return _FakeSubscription(self, listener_id)

    def update_quantity(self, product_id: int, quantity: int) -> None:
        self._check_reachable()
        with self._lock:
            record = self._record or InventoryRecord()
            record.set_quantity(product_id, quantity)
            self._record = record
            self._version += 1
            snapshot = record.copy()
        self._notify(snapshot)

    # --- Internal helpers -----------------------------------------------------

    def _check_reachable(self) -> None:
        if self.unreachable:
            raise StoreUnavailableError("Inventory store unreachable")

    def _snapshot_for_read(self) -> tuple[InventoryRecord | None, int]:
        if self.read_hook is not None:
            self.read_hook()
        with self._lock:
            return (self._record.copy() if self._record else None), self._version

    def _commit(self, txn: _FakeTransaction) -> InventoryRecord | None:
        with self._lock:
            if txn.read_version is not None and txn.read_version != self._version:
                raise TransactionConflictError("Inventory changed")
            self.orders.extend(txn.staged_orders)
            self.commits += 1
            if txn.staged_inventory is None:
                return None
            self._record = txn.staged_inventory
            self._version += 1
            return self._record.copy()

    def _notify(self, snapshot: InventoryRecord) -> None:
        with self._lock:
            listeners = list(self._listeners.values())
        for on_snapshot, _ in listeners:
            on_snapshot(snapshot.copy())

    def _unsubscribe(self, listener_id: int) -> None:
        with self._lock:
            self._listeners.pop(listener_id, None)


class _FakeTransaction(InventoryTransaction):

    def __init__(self, store: FakeInventoryStore) -> None:
        self._store = store
        self._record: InventoryRecord | None = None
        self.read_version: int | None = None
        self.staged_inventory: InventoryRecord | None = None
        self.staged_orders: list[OrderRecord] = []

    def _ensure_read(self) -> None:
        if self.read_version is None:
            self._record, self.read_version = self._store._snapshot_for_read()

    def read_inventory(self) -> InventoryRecord:
        self._ensure_read()
        return self._record.copy() if self._record else InventoryRecord()

    def inventory_exists(self) -> bool:
        self._ensure_read()
        return self._record is not None

    def write_inventory(self, record: InventoryRecord) -> None:
        self.staged_inventory = record.copy()

    def add_order(self, order: OrderRecord) -> None:
        self.staged_orders.append(order)

    def server_timestamp(self) -> datetime:
        return FIXED_NOW


class _FakeSubscription(Subscription):

    def __init__(self, store: FakeInventoryStore, listener_id: int) -> None:
        self._store = store
        self._listener_id = listener_id

    def unsubscribe(self) -> None:
        self._store._unsubscribe(self._listener_id)


class FakeOrderRepository(OrderRepository):
    """Reads the orders committed to a FakeInventoryStore."""

    def __init__(self, store: FakeInventoryStore) -> None:
        self._store = store

    def get_by_id(self, order_id: str) -> OrderRecord | None:
        for order in self._store.orders:
            if order.id == order_id:
                return order
        return None

    def list_all(self) -> list[OrderRecord]:
        return list(self._store.orders)


class FakeProductRepository(ProductRepository):

    def __init__(self, products: list[Product] | None = None) -> None:
        self._store: dict[int, Product] = {}
        for p in products or []:
            self._store[p.id] = p

    def get_by_id(self, product_id: int) -> Product | None:
        return self._store.get(product_id)

    def list_all(self) -> list[Product]:
        return [self._store[pid] for pid in sorted(self._store)]

    def save(self, product: Product) -> None:
        self._store[product.id] = product


class FakeCartRepository(CartRepository):

    def __init__(self) -> None:
        self._store: dict[str, list[CartLine]] = {}
        self.failing = False
        self.saves = 0

    def load(self, shopper_id: str) -> list[CartLine] | None:
        self._check()
        lines = self._store.get(shopper_id)
        return list(lines) if lines is not None else None

    def save(self, shopper_id: str, lines: list[CartLine]) -> None:
        self._check()
        self.saves += 1
        self._store[shopper_id] = list(lines)

    def delete(self, shopper_id: str) -> None:
        self._check()
        self._store.pop(shopper_id, None)

    def _check(self) -> None:
        if self.failing:
            raise StoreUnavailableError("Cart store unreachable")
