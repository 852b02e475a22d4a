"""Money and Quantity, the two value types every cart line is built from.

Both are frozen dataclasses: equal when their fields are equal, and
impossible to construct in an invalid state.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from pos.domain.exceptions import ValidationError

DEFAULT_CURRENCY = "THB"

_SYMBOLS = {"THB": "฿", "USD": "$", "EUR": "€"}


@dataclass(frozen=True)
class Money:
    """A non-negative Decimal amount in one currency.

    Prices come in as strings so ``0.10 * 3`` summed three times is
    exactly ``0.90``; binary floats are refused at the door.
    """

    amount: Decimal
    currency: str = DEFAULT_CURRENCY

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            raise ValidationError(
                f"Expected a Decimal for a money amount, got {type(self.amount).__name__}"
            )
        if not self.amount.is_finite():
            raise ValidationError(f"Money amount must be finite, got {self.amount}")
        if self.amount < 0:
            raise ValidationError(f"Price {self.amount} is invalid: money cannot be negative")
        if len(self.currency) != 3 or not self.currency.isalpha():
            raise ValidationError(f"Unknown currency code {self.currency!r}")

    @property
    def symbol(self) -> str | None:
        return _SYMBOLS.get(self.currency)

    def __add__(self, other: Money) -> Money:
        return Money(self.amount + self._same_currency(other).amount, self.currency)

    def __mul__(self, units: int) -> Money:
        # bool is an int subclass; a line of True lattes is a bug
        if isinstance(units, bool) or not isinstance(units, int):
            raise TypeError(f"Money can only be scaled by a whole number, not {units!r}")
        return Money(self.amount * units, self.currency)

    def __lt__(self, other: Money) -> bool:
        return self.amount < self._same_currency(other).amount

    def __le__(self, other: Money) -> bool:
        return self.amount <= self._same_currency(other).amount

    def __str__(self) -> str:
        if self.symbol is None:
            return f"{self.amount:.2f} {self.currency}"
        return f"{self.symbol}{self.amount:.2f}"

    def _same_currency(self, other: Money) -> Money:
        if other.currency != self.currency:
            raise ValidationError(
                f"Cannot combine amounts in {self.currency} and {other.currency}"
            )
        return other

    @staticmethod
    def of(amount: str | int | Decimal, currency: str = DEFAULT_CURRENCY) -> Money:
        """Build Money from a price string, an int or a Decimal.

        Floats are refused: ``Decimal(0.1)`` carries the binary rounding
        error we are trying to avoid.
        """
        if isinstance(amount, float):
            raise ValidationError(f"Invalid money amount {amount!r}: pass prices as strings")
        try:
            value = Decimal(str(amount))
        except InvalidOperation:
            raise ValidationError(f"Invalid money amount {amount!r}") from None
        return Money(value, currency)

    @staticmethod
    def zero(currency: str = DEFAULT_CURRENCY) -> Money:
        return Money(Decimal("0.00"), currency)


@dataclass(frozen=True)
class Quantity:
    """How many units of a product a line holds; always at least one."""

    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ValidationError(f"Quantity must be an integer, not {self.value!r}")
        if self.value < 1:
            raise ValidationError(f"Quantity must be positive, got {self.value}")

    def __add__(self, other: Quantity) -> Quantity:
        return Quantity(self.value + other.value)

    def __str__(self) -> str:
        return str(self.value)
