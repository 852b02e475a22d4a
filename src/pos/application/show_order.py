"""Application service: Show Order / List Orders use cases (queries)."""

from __future__ import annotations

from pos.application.dto import OrderDTO, order_to_dto
from pos.domain.exceptions import EntityNotFoundError
from pos.domain.repository.order_repository import OrderRepository


class ShowOrderHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, order_id: str) -> OrderDTO:
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise EntityNotFoundError(f"Order {order_id} not found")
        return order_to_dto(order)


class ListOrdersHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, shopper_id: str | None = None) -> list[OrderDTO]:
        orders = self._order_repo.list_all()
        if shopper_id is not None:
            orders = [o for o in orders if o.shopper_id == shopper_id]
        return [order_to_dto(o) for o in orders]
