"""Demo catalog and opening stock used by ``pos init``."""

from __future__ import annotations

from pos.domain.model.product import Product
from pos.domain.model.value_objects import Money

# (id, name, price, category, opening stock)
_DEMO_PRODUCTS = [
    (1, "Caffe Latte", "55.00", "coffee", 50),
    (2, "Green Milk Tea", "45.00", "tea", 40),
    (3, "Orange Juice", "35.00", "juice", 30),
    (4, "Americano", "50.00", "coffee", 45),
    (5, "Jasmine Tea", "40.00", "tea", 35),
]


def demo_catalog(currency: str = "THB") -> list[Product]:
    return [
        Product(id=pid, name=name, price=Money.of(price, currency), category=category)
        for pid, name, price, category, _ in _DEMO_PRODUCTS
    ]


def opening_stock() -> dict[int, int]:
    return {pid: stock for pid, _, _, _, stock in _DEMO_PRODUCTS}
