"""Application service: Add To Cart use case.

Resolves the product from the catalog and gates the addition on the Stock
Service's cached availability before touching the cart.  This is only a
hint for the shopper; checkout re-validates against the store.
"""

from __future__ import annotations

from pos.application.cart_session import CartSession
from pos.application.stock_service import StockService
from pos.domain.exceptions import EntityNotFoundError, InsufficientStockError
from pos.domain.model.cart import CartLine
from pos.domain.model.value_objects import Quantity
from pos.domain.repository.product_repository import ProductRepository


class AddToCartHandler:

    def __init__(self, product_repo: ProductRepository, stock_service: StockService) -> None:
        self._product_repo = product_repo
        self._stock_service = stock_service

    def handle(self, cart: CartSession, product_id: int, quantity: int) -> CartLine:
        product = self._product_repo.get_by_id(product_id)
        if product is None:
            raise EntityNotFoundError(f"Product not found: {product_id}")

        wanted = Quantity(quantity).value
        existing = next((line for line in cart.lines if line.product_id == product_id), None)
        if existing is not None:
            wanted += existing.quantity.value

        # An unknown cache must not look like "out of stock"
        if not self._stock_service.degraded and not self._stock_service.has_available(
            product_id, wanted
        ):
            raise InsufficientStockError(
                product_id=product.id,
                product_name=product.name,
                requested=wanted,
                available=self._stock_service.get_available(product_id),
            )

        return cart.add(product, quantity)
