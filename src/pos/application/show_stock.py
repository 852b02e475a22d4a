"""Application service: Show Stock use case (query).

Reads the inventory record straight from the store (a point read, not the
subscription cache) and joins it with the catalog for display.
"""

from __future__ import annotations

from pos.application.dto import StockLineDTO
from pos.domain.model.inventory import InventoryRecord, StockLevel
from pos.domain.repository.inventory_store import InventoryStore
from pos.domain.repository.product_repository import ProductRepository


class ShowStockHandler:

    def __init__(
        self,
        store: InventoryStore,
        product_repo: ProductRepository,
        low_threshold: int = 5,
        medium_threshold: int = 20,
    ) -> None:
        self._store = store
        self._product_repo = product_repo
        self._low_threshold = low_threshold
        self._medium_threshold = medium_threshold

    def handle(self) -> list[StockLineDTO]:
        record = self._store.read() or InventoryRecord()
        products = {p.id: p for p in self._product_repo.list_all()}

        lines: list[StockLineDTO] = []
        for product_id in sorted(set(products) | set(record.stocks)):
            product = products.get(product_id)
            quantity = record.quantity_of(product_id)
            lines.append(
                StockLineDTO(
                    product_id=product_id,
                    product_name=product.name if product else f"Product {product_id}",
                    category=product.category if product else "-",
                    quantity=quantity,
                    level=StockLevel.classify(
                        quantity, self._low_threshold, self._medium_threshold
                    ).value,
                )
            )
        return lines
