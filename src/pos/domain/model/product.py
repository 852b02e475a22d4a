"""Product: an entry of the shop's catalog.

The catalog itself is maintained elsewhere; the checkout core only reads
the identifier, name and price of a product.
"""

from __future__ import annotations

from dataclasses import dataclass

from pos.domain.exceptions import ValidationError
from pos.domain.model.value_objects import Money


@dataclass(frozen=True)
class Product:
    """A product in the catalog.

    Immutable: catalog edits replace the record rather than mutate it.
    """

    id: int
    name: str
    price: Money
    category: str
    image: str = ""
    description: str = ""

    def __post_init__(self) -> None:
        if isinstance(self.id, bool) or not isinstance(self.id, int):
            raise ValidationError(f"Product ID must be an integer, got {self.id!r}")
        if not self.name or not self.name.strip():
            raise ValidationError("Product name is required")
