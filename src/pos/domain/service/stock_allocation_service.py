"""Domain service: Stock Allocation.

Decides whether a set of cart lines can be served from an inventory
record, and if so withdraws the stock.  It works on whatever record it is
handed; the Checkout Coordinator hands it the one read *inside* the store
transaction, never the cached snapshot.

The two-phase approach (validate-then-mutate) ensures we never leave the
record partially decremented if one product fails validation.
"""

from __future__ import annotations

from pos.domain.exceptions import InsufficientStockError
from pos.domain.model.cart import CartLine
from pos.domain.model.inventory import InventoryRecord


class StockAllocationService:

    def find_shortfall(
        self, inventory: InventoryRecord, lines: list[CartLine]
    ) -> InsufficientStockError | None:
        """Return the error for the first line that cannot be served, if any."""
        for line in lines:
            available = inventory.quantity_of(line.product_id)
            if line.quantity.value > available:
                return InsufficientStockError(
                    product_id=line.product_id,
                    product_name=line.product_name,
                    requested=line.quantity.value,
                    available=available,
                )
        return None

    def allocate(self, inventory: InventoryRecord, lines: list[CartLine]) -> None:
        """Withdraw every line's quantity from *inventory*.

        Phase 1, validate: the first insufficient line (in cart order)
                  raises InsufficientStockError before anything changes.
        Phase 2, mutate: ``withdraw()`` each quantity.  ``withdraw``
                  still refuses to go below zero on its own.
        """
        shortfall = self.find_shortfall(inventory, lines)
        if shortfall is not None:
            raise shortfall

        for line in lines:
            inventory.withdraw(line.product_id, line.quantity.value)
