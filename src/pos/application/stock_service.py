"""Application service: Stock Service.

Keeps a local read model of the inventory, fed by a push subscription to
the Inventory Store.  The cache is eventually consistent with the store:
good enough to grey out an "add" button, never good enough to commit a
sale.  Checkout always re-reads stock inside its own transaction.

Administrative writes (restock, set level, first-run seeding) go through
the store's transaction primitive.  ``decrement`` is the one best-effort,
non-transactional write.
"""

from __future__ import annotations

import threading

import structlog

from pos.domain.exceptions import ValidationError
from pos.domain.model.inventory import InventoryRecord, StockLevel
from pos.domain.repository.inventory_store import (
    InventoryStore,
    InventoryTransaction,
    Subscription,
)

logger = structlog.get_logger(__name__)


class StockService:

    def __init__(
        self,
        store: InventoryStore,
        low_threshold: int = 5,
        medium_threshold: int = 20,
    ) -> None:
        self._store = store
        self._low_threshold = low_threshold
        self._medium_threshold = medium_threshold
        self._lock = threading.Lock()
        self._snapshot = InventoryRecord()
        self._received_snapshot = False
        self._subscription_lost = False
        self._subscription: Subscription | None = None

    # --- Subscription lifecycle -----------------------------------------------

    def start(self) -> None:
        """Subscribe to inventory changes.

        A no-op while a live subscription exists; after a lost one (including
        a store that was unreachable on the first attempt) it resubscribes.
        """
        with self._lock:
            if self._subscription is not None and not self._subscription_lost:
                return
            self._subscription_lost = False
        self.stop()
        # on_error may fire before subscribe returns; the flag records it
        self._subscription = self._store.subscribe(self._on_snapshot, self._on_error)

    def stop(self) -> None:
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None

    def _on_snapshot(self, record: InventoryRecord | None) -> None:
        snapshot = record.copy() if record is not None else InventoryRecord()
        with self._lock:
            self._snapshot = snapshot
            self._received_snapshot = True
            self._subscription_lost = False
        logger.debug("Inventory snapshot received", products=len(snapshot.stocks))

    def _on_error(self, exc: Exception) -> None:
        with self._lock:
            self._subscription_lost = True
        logger.warning("Inventory subscription lost", error=str(exc))

    @property
    def degraded(self) -> bool:
        """True when cached quantities may not reflect the store.

        A zero from ``get_available`` then means "unknown", not
        "out of stock".
        """
        with self._lock:
            return self._subscription_lost or not self._received_snapshot

    # --- Cached reads ---------------------------------------------------------

    def get_available(self, product_id: int) -> int:
        with self._lock:
            return self._snapshot.quantity_of(product_id)

    def has_available(self, product_id: int, requested_quantity: int) -> bool:
        return requested_quantity <= self.get_available(product_id)

    def stock_level(self, product_id: int) -> StockLevel:
        return StockLevel.classify(
            self.get_available(product_id),
            self._low_threshold,
            self._medium_threshold,
        )

    def snapshot(self) -> dict[int, int]:
        with self._lock:
            return dict(self._snapshot.stocks)

    # --- Writes ---------------------------------------------------------------

    def decrement(self, product_id: int, amount: int) -> int:
        """Best-effort stock correction, clamped at zero.

        Not transactional: a concurrent checkout may be overwritten.
        Checkout never calls this.
        """
        if amount <= 0:
            raise ValidationError("Decrement amount must be positive")
        current = self._store.read() or InventoryRecord()
        new_level = current.deduct_clamped(product_id, amount)
        self._store.update_quantity(product_id, new_level)
        logger.info(
            "Stock decremented",
            product_id=product_id,
            amount=amount,
            new_level=new_level,
        )
        return new_level

    def set_level(self, product_id: int, quantity: int) -> None:
        """Set the on-hand quantity of a product (administrative restock)."""

        def _set(txn: InventoryTransaction) -> None:
            record = txn.read_inventory()
            record.set_quantity(product_id, quantity)
            record.updated_at = txn.server_timestamp()
            txn.write_inventory(record)

        self._store.transact(_set)
        logger.info("Stock level set", product_id=product_id, quantity=quantity)

    def restock(self, product_id: int, amount: int) -> int:
        """Add *amount* units on top of what is on hand.  Returns the new level."""

        def _restock(txn: InventoryTransaction) -> int:
            record = txn.read_inventory()
            record.restock(product_id, amount)
            record.updated_at = txn.server_timestamp()
            txn.write_inventory(record)
            return record.quantity_of(product_id)

        new_level = self._store.transact(_restock)
        logger.info("Stock replenished", product_id=product_id, amount=amount, new_level=new_level)
        return new_level

    def ensure_initialized(self, default_levels: dict[int, int]) -> bool:
        """Create the inventory record with *default_levels* if it is missing.

        Returns True when the record was created by this call.
        """
        seed = InventoryRecord(stocks=dict(default_levels))

        def _seed(txn: InventoryTransaction) -> bool:
            if txn.inventory_exists():
                return False
            seed.updated_at = txn.server_timestamp()
            txn.write_inventory(seed)
            return True

        created = self._store.transact(_seed)
        if created:
            logger.info("Inventory initialized", products=len(default_levels))
        return created
