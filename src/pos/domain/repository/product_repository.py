"""Abstract repository for the Product catalog.

Defined in the domain layer so the domain never depends on
infrastructure.  The catalog is owned by an external collaborator; the
core only looks products up.  ``save`` exists for seeding.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from pos.domain.model.product import Product


class ProductRepository(ABC):

    @abstractmethod
    def get_by_id(self, product_id: int) -> Product | None:
        """Return a product by its ID, or None if not found."""

    @abstractmethod
    def list_all(self) -> list[Product]:
        """Return every product in the catalog, ordered by ID."""

    @abstractmethod
    def save(self, product: Product) -> None:
        """Persist a new or replaced product."""
