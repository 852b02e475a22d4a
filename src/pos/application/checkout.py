"""Application service: Checkout Coordinator.

Turns a shopper's cart into a completed order, all-or-nothing:

    IDLE -> VALIDATING -> COMMITTING -> SUCCEEDED | REJECTED | FAILED -> IDLE

The stock check runs against the inventory record read *inside* the store
transaction.  The Stock Service cache may be stale and is never consulted
here; that is what keeps two shoppers from both buying the last unit.
Write conflicts are retried by the store's transaction primitive, so the
coordinator itself never retries.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from enum import Enum
from typing import Callable

import structlog

from pos.application.cart_session import CartSession
from pos.application.dto import OrderDTO, order_to_dto
from pos.domain.exceptions import InsufficientStockError, StoreError, ValidationError
from pos.domain.model.cart import CartLine
from pos.domain.model.order import OrderRecord
from pos.domain.repository.inventory_store import InventoryStore, InventoryTransaction
from pos.domain.service.stock_allocation_service import StockAllocationService

logger = structlog.get_logger(__name__)

EMPTY_CART_REASON = "Cart is empty"
IN_PROGRESS_REASON = "A checkout is already in progress"
FAILURE_REASON = "Checkout could not be completed, please try again"


class CheckoutState(Enum):
    IDLE = "IDLE"
    VALIDATING = "VALIDATING"
    COMMITTING = "COMMITTING"
    SUCCEEDED = "SUCCEEDED"
    REJECTED = "REJECTED"
    FAILED = "FAILED"


class ErrorKind(Enum):
    INSUFFICIENT_STOCK = "INSUFFICIENT_STOCK"
    INFRASTRUCTURE = "INFRASTRUCTURE"
    INVALID_INPUT = "INVALID_INPUT"


@dataclass(frozen=True)
class CheckoutResult:
    """What the shopper-facing layer gets back from ``submit()``."""

    state: CheckoutState  # terminal state reached
    reason: str | None = None
    error_kind: ErrorKind | None = None
    order: OrderDTO | None = None
    product_id: int | None = None  # set for INSUFFICIENT_STOCK

    @property
    def succeeded(self) -> bool:
        return self.state == CheckoutState.SUCCEEDED


class CheckoutCoordinator:

    def __init__(
        self,
        store: InventoryStore,
        allocation: StockAllocationService | None = None,
        on_state_change: Callable[[CheckoutState], None] | None = None,
    ) -> None:
        self._store = store
        self._allocation = allocation or StockAllocationService()
        self._on_state_change = on_state_change
        self._guard = threading.Lock()
        self._state = CheckoutState.IDLE

    @property
    def state(self) -> CheckoutState:
        return self._state

    def submit(self, cart: CartSession) -> CheckoutResult:
        """Check out the current contents of *cart*.

        Never raises for business or infrastructure problems; every
        outcome is described by the returned CheckoutResult.
        """
        if not self._guard.acquire(blocking=False):
            return CheckoutResult(
                state=CheckoutState.REJECTED,
                reason=IN_PROGRESS_REASON,
                error_kind=ErrorKind.INVALID_INPUT,
            )
        try:
            return self._run(cart)
        finally:
            self._transition(CheckoutState.IDLE)
            self._guard.release()

    # --- Internal helpers -----------------------------------------------------

    def _run(self, cart: CartSession) -> CheckoutResult:
        self._transition(CheckoutState.VALIDATING)
        lines = cart.lines
        if not lines:
            logger.info("Checkout rejected", shopper_id=cart.shopper_id, reason=EMPTY_CART_REASON)
            return self._finish(CheckoutResult(
                state=CheckoutState.REJECTED,
                reason=EMPTY_CART_REASON,
                error_kind=ErrorKind.INVALID_INPUT,
            ))

        self._transition(CheckoutState.COMMITTING)
        try:
            order = self._store.transact(
                lambda txn: self._commit(txn, lines, cart.shopper_id)
            )
        except InsufficientStockError as exc:
            logger.info(
                "Checkout rejected",
                shopper_id=cart.shopper_id,
                product_id=exc.product_id,
                requested=exc.requested,
                available=exc.available,
            )
            return self._finish(CheckoutResult(
                state=CheckoutState.REJECTED,
                reason=str(exc),
                error_kind=ErrorKind.INSUFFICIENT_STOCK,
                product_id=exc.product_id,
            ))
        except ValidationError as exc:
            logger.info("Checkout rejected", shopper_id=cart.shopper_id, reason=str(exc))
            return self._finish(CheckoutResult(
                state=CheckoutState.REJECTED,
                reason=str(exc),
                error_kind=ErrorKind.INVALID_INPUT,
            ))
        except StoreError as exc:
            logger.error("Checkout failed", shopper_id=cart.shopper_id, error=str(exc))
            return self._finish(CheckoutResult(
                state=CheckoutState.FAILED,
                reason=f"{FAILURE_REASON} ({exc})",
                error_kind=ErrorKind.INFRASTRUCTURE,
            ))

        # Committed: clear the cart before anything else can fail
        cart.clear()
        result = self._finish(CheckoutResult(state=CheckoutState.SUCCEEDED, order=order_to_dto(order)))
        logger.info(
            "Checkout succeeded",
            shopper_id=cart.shopper_id,
            order_id=order.id,
            total=result.order.total,
        )
        return result

    def _commit(
        self,
        txn: InventoryTransaction,
        lines: list[CartLine],
        shopper_id: str | None,
    ) -> OrderRecord:
        """Transaction body.  May run more than once on write conflicts."""
        inventory = txn.read_inventory()
        self._allocation.allocate(inventory, lines)

        now = txn.server_timestamp()
        inventory.updated_at = now
        txn.write_inventory(inventory)

        order = OrderRecord.create(lines, shopper_id=shopper_id, created_at=now)
        txn.add_order(order)
        return order

    def _finish(self, result: CheckoutResult) -> CheckoutResult:
        self._transition(result.state)
        return result

    def _transition(self, state: CheckoutState) -> None:
        self._state = state
        if self._on_state_change is not None:
            self._on_state_change(state)
