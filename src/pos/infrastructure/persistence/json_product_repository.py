"""JSON-file-backed implementation of ProductRepository.

``products.json`` maps the product id (as a string key) to its catalog
entry.  Prices are stored as strings to keep them exact.
"""

from __future__ import annotations

from decimal import Decimal
from pathlib import Path

from pos.domain.model.product import Product
from pos.domain.model.value_objects import DEFAULT_CURRENCY, Money
from pos.domain.repository.product_repository import ProductRepository
from pos.infrastructure.persistence.json_files import load_json, write_json


class JsonProductRepository(ProductRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path

    def get_by_id(self, product_id: int) -> Product | None:
        entry = load_json(self._file_path, {}).get(str(product_id))
        return None if entry is None else _from_entry(product_id, entry)

    def list_all(self) -> list[Product]:
        catalog = load_json(self._file_path, {})
        return sorted(
            (_from_entry(int(key), entry) for key, entry in catalog.items()),
            key=lambda p: p.id,
        )

    def save(self, product: Product) -> None:
        catalog = load_json(self._file_path, {})
        catalog[str(product.id)] = _to_entry(product)
        write_json(self._file_path, catalog)


def _to_entry(product: Product) -> dict:
    entry = {
        "name": product.name,
        "category": product.category,
        "price": str(product.price.amount),
        "currency": product.price.currency,
    }
    if product.image:
        entry["image"] = product.image
    if product.description:
        entry["description"] = product.description
    return entry


def _from_entry(product_id: int, entry: dict) -> Product:
    return Product(
        id=product_id,
        name=entry["name"],
        category=entry.get("category", ""),
        price=Money(Decimal(entry["price"]), entry.get("currency", DEFAULT_CURRENCY)),
        image=entry.get("image", ""),
        description=entry.get("description", ""),
    )
