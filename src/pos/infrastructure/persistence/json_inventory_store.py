"""JSON-file-backed implementation of InventoryStore.

Documents:

* ``inventory.json``: ``{"version": n, "stocks": {"<id>": qty}, "updated_at": iso}``
* ``orders.json``   : list of order documents, appended by transactions

Transactions are optimistic.  A transaction remembers the inventory
version it read; the commit fails with TransactionConflictError if another
writer bumped the version meanwhile, and ``transact`` re-runs the whole
function with fresh reads.  Commits hold an exclusive ``flock`` on
``.inventory.lock``, so stores in other processes sharing the data
directory are serialized too.

Subscriptions are in-process: listeners are called with the new snapshot
after every write made through this store instance.
"""

from __future__ import annotations

import itertools
import threading
from contextlib import ExitStack, contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Iterator, TypeVar

import structlog

from pos.domain.exceptions import (
    StoreError,
    TransactionAbortedError,
    TransactionConflictError,
)
from pos.domain.model.inventory import InventoryRecord
from pos.domain.model.order import OrderRecord
from pos.domain.repository.inventory_store import (
    ErrorListener,
    InventoryStore,
    InventoryTransaction,
    SnapshotListener,
    Subscription,
)
from pos.infrastructure.persistence.json_files import file_lock, load_json, write_json
from pos.infrastructure.persistence.json_order_repository import order_to_raw

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class JsonInventoryStore(InventoryStore):

    def __init__(
        self,
        data_dir: Path,
        max_attempts: int = 5,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self._inventory_path = data_dir / "inventory.json"
        self._orders_path = data_dir / "orders.json"
        self._lock_path = data_dir / ".inventory.lock"
        self._max_attempts = max_attempts
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._lock = threading.RLock()
        self._lock_depth = 0
        self._listeners: dict[int, tuple[SnapshotListener, ErrorListener | None]] = {}
        self._listener_ids = itertools.count(1)

    # --- InventoryStore interface ---------------------------------------------

    def read(self) -> InventoryRecord | None:
        with self._lock:
            doc = self._load_inventory()
        return None if doc is None else self._to_domain(doc)

    def transact(self, fn: Callable[[InventoryTransaction], T]) -> T:
        for attempt in range(1, self._max_attempts + 1):
            txn = _JsonTransaction(self, self._clock())
            result = fn(txn)
            try:
                # Notify under the lock so listeners see snapshots in commit order
                with self._exclusive():
                    snapshot = self._commit(txn)
                    if snapshot is not None:
                        self._notify(snapshot)
            except TransactionConflictError:
                logger.debug("Transaction conflict, retrying", attempt=attempt)
                continue
            return result
        raise TransactionAbortedError(
            f"Transaction aborted after {self._max_attempts} conflicting attempts"
        )

    def subscribe(
        self,
        on_snapshot: SnapshotListener,
        on_error: ErrorListener | None = None,
    ) -> Subscription:
        listener_id = next(self._listener_ids)
        with self._lock:
            try:
                current = self.read()
            except StoreError as exc:
                if on_error is None:
                    raise
                on_error(exc)
                return _JsonSubscription(self, listener_id)
            self._listeners[listener_id] = (on_snapshot, on_error)
            on_snapshot(current)
        return _JsonSubscription(self, listener_id)

    def update_quantity(self, product_id: int, quantity: int) -> None:
        with self._exclusive():
            doc = self._load_inventory()
            record = self._to_domain(doc) if doc is not None else InventoryRecord()
            record.set_quantity(product_id, quantity)
            record.updated_at = self._clock()
            version = (doc or {}).get("version", 0) + 1
            self._persist_inventory(record, version)
            self._notify(record)

    # --- Transaction support --------------------------------------------------

    @contextmanager
    def _exclusive(self) -> Iterator[None]:
        """Thread lock plus file lock, re-entrant within this store."""
        with self._lock, ExitStack() as stack:
            # A second flock from this process would block on the first
            if self._lock_depth == 0:
                stack.enter_context(file_lock(self._lock_path))
            self._lock_depth += 1
            try:
                yield
            finally:
                self._lock_depth -= 1

    def _read_versioned(self) -> tuple[dict | None, int]:
        with self._lock:
            doc = self._load_inventory()
        return doc, (doc or {}).get("version", 0)

    def _commit(self, txn: _JsonTransaction) -> InventoryRecord | None:
        """Apply staged writes.  Returns the new snapshot if inventory changed."""
        with self._exclusive():
            doc = self._load_inventory()
            current_version = (doc or {}).get("version", 0)
            if txn.read_version is not None and txn.read_version != current_version:
                raise TransactionConflictError(
                    f"Inventory changed (version {txn.read_version} -> {current_version})"
                )
            if txn.staged_inventory is not None:
                self._persist_inventory(txn.staged_inventory, current_version + 1)
            if txn.staged_orders:
                try:
                    orders = load_json(self._orders_path, [])
                    orders.extend(order_to_raw(order) for order in txn.staged_orders)
                    write_json(self._orders_path, orders)
                except StoreError:
                    if txn.staged_inventory is not None:
                        self._restore_inventory(doc)
                    raise
            if txn.staged_inventory is None:
                return None
            return txn.staged_inventory.copy()

    def _notify(self, snapshot: InventoryRecord) -> None:
        with self._lock:
            listeners = list(self._listeners.values())
        for on_snapshot, _ in listeners:
            try:
                on_snapshot(snapshot.copy())
            except Exception:
                logger.exception("Inventory listener raised")

    def _unsubscribe(self, listener_id: int) -> None:
        with self._lock:
            self._listeners.pop(listener_id, None)

    # --- Serialization --------------------------------------------------------

    def _load_inventory(self) -> dict | None:
        return load_json(self._inventory_path, None)

    def _restore_inventory(self, doc: dict | None) -> None:
        if doc is None:
            self._inventory_path.unlink(missing_ok=True)
        else:
            write_json(self._inventory_path, doc)

    def _persist_inventory(self, record: InventoryRecord, version: int) -> None:
        write_json(
            self._inventory_path,
            {
                "version": version,
                "stocks": {str(pid): qty for pid, qty in sorted(record.stocks.items())},
                "updated_at": record.updated_at.isoformat() if record.updated_at else None,
            },
        )

    @staticmethod
    def _to_domain(doc: dict) -> InventoryRecord:
        updated_at = doc.get("updated_at")
        return InventoryRecord(
            stocks={int(pid): qty for pid, qty in doc.get("stocks", {}).items()},
            updated_at=datetime.fromisoformat(updated_at) if updated_at else None,
        )


class _JsonTransaction(InventoryTransaction):

    def __init__(self, store: JsonInventoryStore, timestamp: datetime) -> None:
        self._store = store
        self._timestamp = timestamp
        self._doc: dict | None = None
        self.read_version: int | None = None
        self.staged_inventory: InventoryRecord | None = None
        self.staged_orders: list[OrderRecord] = []

    def _ensure_read(self) -> None:
        if self.read_version is None:
            self._doc, self.read_version = self._store._read_versioned()

    def read_inventory(self) -> InventoryRecord:
        self._ensure_read()
        if self._doc is None:
            return InventoryRecord()
        return JsonInventoryStore._to_domain(self._doc)

    def inventory_exists(self) -> bool:
        self._ensure_read()
        return self._doc is not None

    def write_inventory(self, record: InventoryRecord) -> None:
        self.staged_inventory = record.copy()

    def add_order(self, order: OrderRecord) -> None:
        self.staged_orders.append(order)

    def server_timestamp(self) -> datetime:
        return self._timestamp


class _JsonSubscription(Subscription):

    def __init__(self, store: JsonInventoryStore, listener_id: int) -> None:
        self._store = store
        self._listener_id = listener_id

    def unsubscribe(self) -> None:
        self._store._unsubscribe(self._listener_id)
