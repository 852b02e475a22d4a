"""Unit tests for the Cart aggregate."""

import random
from decimal import Decimal

import pytest

from pos.domain.exceptions import EntityNotFoundError, ValidationError
from pos.domain.model.cart import Cart
from pos.domain.model.product import Product
from pos.domain.model.value_objects import Money

LATTE = Product(id=1, name="Caffe Latte", price=Money.of("55.00"), category="coffee")
TEA = Product(id=2, name="Green Milk Tea", price=Money.of("45.00"), category="tea")


def _cheap(pid: int) -> Product:
    return Product(id=pid, name=f"Candy {pid}", price=Money.of("0.10"), category="snack")


class TestCartAdd:

    def test_add_new_line(self):
        cart = Cart()
        line = cart.add(LATTE, 2)
        assert line.quantity.value == 2
        assert line.product_name == "Caffe Latte"
        assert len(cart.lines) == 1

    def test_add_same_product_merges(self):
        cart = Cart()
        cart.add(LATTE, 2)
        cart.add(LATTE, 3)
        assert len(cart.lines) == 1
        assert cart.get(1).quantity.value == 5

    def test_lines_keep_insertion_order(self):
        cart = Cart()
        cart.add(TEA, 1)
        cart.add(LATTE, 1)
        cart.add(TEA, 1)
        assert [line.product_id for line in cart.lines] == [2, 1]

    def test_price_snapshot_taken_at_add(self):
        cart = Cart()
        cart.add(LATTE, 1)
        repriced = Product(id=1, name="Caffe Latte", price=Money.of("99.00"), category="coffee")
        cart.add(repriced, 1)
        assert cart.get(1).unit_price == Money.of("55.00")

    def test_other_currency_rejected(self):
        cart = Cart()
        cart.add(LATTE, 1)
        dollar_tea = Product(id=2, name="Green Milk Tea", price=Money.of("1.50", "USD"), category="tea")
        with pytest.raises(ValidationError, match="priced in USD"):
            cart.add(dollar_tea, 1)
        assert [line.product_id for line in cart.lines] == [1]
        assert cart.total() == Money.of("55.00")

    def test_empty_cart_takes_any_currency(self):
        cart = Cart()
        cart.add(Product(id=9, name="Drip", price=Money.of("3.00", "USD"), category="coffee"), 2)
        assert str(cart.total()) == "$6.00"

    @pytest.mark.parametrize("qty", [0, -1])
    def test_non_positive_quantity_rejected(self, qty):
        cart = Cart()
        with pytest.raises(ValidationError, match="must be positive"):
            cart.add(LATTE, qty)
        assert cart.is_empty


class TestCartUpdateQuantity:

    def test_update_sets_quantity(self):
        cart = Cart()
        cart.add(LATTE, 2)
        cart.update_quantity(1, 7)
        assert cart.get(1).quantity.value == 7

    def test_update_below_one_rejected(self):
        cart = Cart()
        cart.add(LATTE, 2)
        with pytest.raises(ValidationError, match="remove the item instead"):
            cart.update_quantity(1, 0)
        assert cart.get(1).quantity.value == 2

    def test_update_missing_line_rejected(self):
        with pytest.raises(EntityNotFoundError, match="not in the cart"):
            Cart().update_quantity(1, 2)


class TestCartRemoveAndClear:

    def test_remove(self):
        cart = Cart()
        cart.add(LATTE, 1)
        cart.add(TEA, 1)
        cart.remove(1)
        assert [line.product_id for line in cart.lines] == [2]

    def test_remove_is_idempotent(self):
        cart = Cart()
        cart.remove(1)
        cart.remove(1)
        assert cart.is_empty

    def test_clear(self):
        cart = Cart()
        cart.add(LATTE, 1)
        cart.clear()
        assert cart.is_empty
        assert cart.item_count() == 0


class TestCartTotals:

    def test_total(self):
        cart = Cart()
        cart.add(LATTE, 2)
        cart.add(TEA, 1)
        assert cart.total() == Money.of("155.00")

    def test_empty_total_is_zero(self):
        assert Cart().total().amount == Decimal("0")

    def test_fractional_prices_do_not_drift(self):
        cart = Cart()
        for pid in (1, 2, 3):
            cart.add(_cheap(pid), 3)
        assert cart.total().amount == Decimal("0.90")
        assert str(cart.total()) == "฿0.90"

    def test_item_count(self):
        cart = Cart()
        cart.add(LATTE, 2)
        cart.add(TEA, 3)
        assert cart.item_count() == 5


class TestCartInvariantsUnderRandomOperations:

    def test_one_line_per_product_and_positive_quantities(self):
        rng = random.Random(1234)
        products = [_cheap(pid) for pid in range(1, 6)]
        cart = Cart()

        for _ in range(500):
            product = rng.choice(products)
            op = rng.choice(["add", "update", "remove"])
            qty = rng.randint(-2, 5)
            try:
                if op == "add":
                    cart.add(product, qty)
                elif op == "update":
                    cart.update_quantity(product.id, qty)
                else:
                    cart.remove(product.id)
            except (ValidationError, EntityNotFoundError):
                pass

            ids = [line.product_id for line in cart.lines]
            assert len(ids) == len(set(ids))
            assert all(line.quantity.value >= 1 for line in cart.lines)
            expected = sum(
                (line.unit_price.amount * line.quantity.value for line in cart.lines),
                Decimal("0"),
            )
            assert cart.total().amount == expected
