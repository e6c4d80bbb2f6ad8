"""
In-memory product catalog and cart.

The catalog is shared by every connection; each connection gets its own
cart whose adds are mirrored to the client.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable, Iterable

from interpreter.collaborators import Product
from interpreter.errors import CatalogLookupError


DEMO_PRODUCTS: tuple[Product, ...] = (
    Product(id="p-001", name="Wheat Seeds Premium", price=450.0, category="Seeds"),
    Product(id="p-002", name="Hybrid Tomato Seeds", price=120.0, category="Seeds"),
    Product(id="p-003", name="Organic Fertilizer NPK", price=899.0, category="Fertilizers"),
    Product(id="p-004", name="Neem Oil Pesticide", price=350.0, category="Pesticides"),
    Product(id="p-005", name="Drip Irrigation Kit", price=2499.0, category="Equipment"),
    Product(id="p-006", name="Garden Sprayer 16L", price=1299.0, category="Equipment", in_stock=False),
    Product(id="p-007", name="Basmati Paddy Seeds", price=560.0, category="Seeds", is_active=False),
)


def product_from_dict(data: dict[str, Any]) -> Product:
    return Product(
        id=str(data["id"]),
        name=str(data["name"]),
        price=float(data.get("price", 0.0)),
        category=str(data.get("category", "")),
        is_active=bool(data.get("is_active", True)),
        in_stock=bool(data.get("in_stock", True)),
    )


class InMemoryCatalog:
    """
    Product catalog held in memory.

    lookup_product() follows the catalog contract: case-insensitive
    substring match on name, first orderable product only.
    """

    def __init__(self, products: Iterable[Product] = DEMO_PRODUCTS) -> None:
        self._products = tuple(products)

    @staticmethod
    def from_json_file(path: str | Path) -> InMemoryCatalog:
        """
        Raises:
            CatalogLookupError if the file cannot be read or parsed.
        """
        try:
            data = json.loads(Path(path).read_text(encoding="utf-8"))
            return InMemoryCatalog(product_from_dict(item) for item in data)
        except (OSError, ValueError, KeyError, TypeError) as exc:
            raise CatalogLookupError(f"cannot load catalog from {path}: {exc}") from exc

    @property
    def products(self) -> tuple[Product, ...]:
        return self._products

    async def lookup_product(self, query: str) -> Product | None:
        needle = query.strip().lower()
        if not needle:
            return None
        for product in self._products:
            if product.orderable and needle in product.name.lower():
                return product
        return None


class InMemoryCart:
    """Cart lines per product id; on_add mirrors each add to the host."""

    def __init__(self, on_add: Callable[[Product], None] | None = None) -> None:
        self._quantities: dict[str, int] = {}
        self._products: dict[str, Product] = {}
        self._on_add = on_add

    def add_to_cart(self, product: Product) -> None:
        self._products[product.id] = product
        self._quantities[product.id] = self._quantities.get(product.id, 0) + 1
        if self._on_add is not None:
            self._on_add(product)

    def quantity(self, product_id: str) -> int:
        return self._quantities.get(product_id, 0)

    def items(self) -> list[tuple[Product, int]]:
        return [(self._products[pid], qty) for pid, qty in self._quantities.items()]
