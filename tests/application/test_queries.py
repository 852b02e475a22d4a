"""Tests for the read-side handlers: stock listing and order lookup."""

import pytest

from pos.application.cart_session import CartSession
from pos.application.checkout import CheckoutCoordinator
from pos.application.show_order import ListOrdersHandler, ShowOrderHandler
from pos.application.show_stock import ShowStockHandler
from pos.domain.exceptions import EntityNotFoundError
from pos.domain.model.product import Product
from pos.domain.model.value_objects import Money
from tests.fakes import (
    FakeCartRepository,
    FakeInventoryStore,
    FakeOrderRepository,
    FakeProductRepository,
)

LATTE = Product(id=1, name="Caffe Latte", price=Money.of("55.00"), category="coffee")
TEA = Product(id=2, name="Green Milk Tea", price=Money.of("45.00"), category="tea")


class TestShowStock:

    def test_joins_catalog_and_levels(self):
        store = FakeInventoryStore({1: 50, 2: 3})
        lines = ShowStockHandler(store, FakeProductRepository([LATTE, TEA])).handle()
        assert [(s.product_id, s.product_name, s.quantity, s.level) for s in lines] == [
            (1, "Caffe Latte", 50, "HEALTHY"),
            (2, "Green Milk Tea", 3, "LOW"),
        ]

    def test_catalog_product_without_stock_shows_zero(self):
        store = FakeInventoryStore({1: 10})
        lines = ShowStockHandler(store, FakeProductRepository([LATTE, TEA])).handle()
        assert lines[1].quantity == 0
        assert lines[1].level == "LOW"

    def test_stock_for_unknown_product_is_listed(self):
        store = FakeInventoryStore({9: 12})
        lines = ShowStockHandler(store, FakeProductRepository()).handle()
        assert lines[0].product_name == "Product 9"
        assert lines[0].level == "MEDIUM"

    def test_missing_inventory_record(self):
        lines = ShowStockHandler(FakeInventoryStore(), FakeProductRepository([LATTE])).handle()
        assert [(s.product_id, s.quantity) for s in lines] == [(1, 0)]


class TestOrderQueries:

    @pytest.fixture
    def store(self):
        store = FakeInventoryStore({1: 10, 2: 10})
        for shopper, product in (("alice", LATTE), ("bob", TEA), ("alice", TEA)):
            cart = CartSession(FakeCartRepository(), shopper_id=shopper)
            cart.add(product, 1)
            assert CheckoutCoordinator(store).submit(cart).succeeded
        return store

    def test_show_order(self, store):
        order_id = store.orders[0].id
        dto = ShowOrderHandler(FakeOrderRepository(store)).handle(order_id)
        assert dto.id == order_id
        assert dto.status == "COMPLETED"
        assert dto.total == "฿55.00"
        assert dto.created_at == "2026-01-15 09:30 UTC"

    def test_show_missing_order(self, store):
        with pytest.raises(EntityNotFoundError, match="Order nope not found"):
            ShowOrderHandler(FakeOrderRepository(store)).handle("nope")

    def test_list_all(self, store):
        assert len(ListOrdersHandler(FakeOrderRepository(store)).handle()) == 3

    def test_list_by_shopper(self, store):
        orders = ListOrdersHandler(FakeOrderRepository(store)).handle(shopper_id="alice")
        assert [o.total for o in orders] == ["฿55.00", "฿45.00"]
