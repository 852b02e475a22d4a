"""Unit tests for the InventoryRecord aggregate and StockLevel."""

import pytest

from pos.domain.exceptions import ValidationError
from pos.domain.model.inventory import InventoryRecord, StockLevel


class TestInventoryRecordInvariants:

    def test_unknown_product_has_zero(self):
        assert InventoryRecord(stocks={1: 5}).quantity_of(99) == 0

    def test_negative_level_rejected_on_creation(self):
        with pytest.raises(ValidationError, match="cannot be negative"):
            InventoryRecord(stocks={1: -1})

    def test_non_integer_level_rejected(self):
        with pytest.raises(ValidationError, match="must be an integer"):
            InventoryRecord(stocks={1: 2.5})


class TestWithdraw:

    def test_withdraw_reduces_stock(self):
        inv = InventoryRecord(stocks={1: 10})
        inv.withdraw(1, 4)
        assert inv.quantity_of(1) == 6

    def test_withdraw_everything(self):
        inv = InventoryRecord(stocks={1: 3})
        inv.withdraw(1, 3)
        assert inv.quantity_of(1) == 0

    def test_withdraw_more_than_on_hand_rejected(self):
        inv = InventoryRecord(stocks={1: 2})
        with pytest.raises(ValidationError, match="Cannot withdraw 3"):
            inv.withdraw(1, 3)
        assert inv.quantity_of(1) == 2

    def test_withdraw_zero_rejected(self):
        inv = InventoryRecord(stocks={1: 2})
        with pytest.raises(ValidationError, match="must be positive"):
            inv.withdraw(1, 0)


class TestDeductClamped:

    def test_deducts(self):
        inv = InventoryRecord(stocks={1: 10})
        assert inv.deduct_clamped(1, 3) == 7

    def test_clamps_at_zero(self):
        inv = InventoryRecord(stocks={1: 2})
        assert inv.deduct_clamped(1, 5) == 0
        assert inv.quantity_of(1) == 0

    def test_unknown_product_clamps_to_zero(self):
        inv = InventoryRecord()
        assert inv.deduct_clamped(7, 1) == 0

    @pytest.mark.parametrize("amount", [0, -4])
    def test_non_positive_amount_rejected(self, amount):
        inv = InventoryRecord(stocks={1: 10})
        with pytest.raises(ValidationError, match="must be positive"):
            inv.deduct_clamped(1, amount)
        assert inv.quantity_of(1) == 10


class TestSetAndRestock:

    def test_set_quantity(self):
        inv = InventoryRecord(stocks={1: 10})
        inv.set_quantity(1, 25)
        assert inv.quantity_of(1) == 25

    def test_set_negative_rejected(self):
        inv = InventoryRecord(stocks={1: 10})
        with pytest.raises(ValidationError, match="cannot be negative"):
            inv.set_quantity(1, -1)

    def test_restock_adds(self):
        inv = InventoryRecord(stocks={1: 10})
        inv.restock(1, 5)
        assert inv.quantity_of(1) == 15

    def test_restock_zero_rejected(self):
        with pytest.raises(ValidationError, match="must be positive"):
            InventoryRecord().restock(1, 0)

    def test_copy_is_independent(self):
        inv = InventoryRecord(stocks={1: 10})
        clone = inv.copy()
        clone.withdraw(1, 5)
        assert inv.quantity_of(1) == 10


class TestStockLevel:

    @pytest.mark.parametrize(
        ("quantity", "level"),
        [
            (0, StockLevel.LOW),
            (5, StockLevel.LOW),
            (6, StockLevel.MEDIUM),
            (20, StockLevel.MEDIUM),
            (21, StockLevel.HEALTHY),
        ],
    )
    def test_default_thresholds(self, quantity, level):
        assert StockLevel.classify(quantity) == level

    def test_custom_thresholds(self):
        assert StockLevel.classify(8, low_threshold=10, medium_threshold=50) == StockLevel.LOW
