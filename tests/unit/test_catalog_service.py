# pylint: disable=missing-module-docstring,missing-function-docstring

import asyncio
import json
from pathlib import Path

import pytest

from interpreter.collaborators import Product
from interpreter.errors import CatalogLookupError
from services.catalog_service import InMemoryCart, InMemoryCatalog


def _lookup(catalog: InMemoryCatalog, query: str) -> Product | None:
    return asyncio.run(catalog.lookup_product(query))


def test_lookup_is_case_insensitive_substring() -> None:
    product = _lookup(InMemoryCatalog(), "WHEAT seeds")
    assert product is not None
    assert product.id == "p-001"


def test_lookup_skips_out_of_stock_and_inactive_products() -> None:
    catalog = InMemoryCatalog()
    assert _lookup(catalog, "sprayer") is None
    assert _lookup(catalog, "paddy") is None


def test_lookup_returns_first_orderable_match() -> None:
    catalog = InMemoryCatalog((
        Product(id="a", name="Rice Seeds", in_stock=False),
        Product(id="b", name="Rice Seeds Gold"),
        Product(id="c", name="Rice Seeds Silver"),
    ))
    product = _lookup(catalog, "rice")
    assert product is not None
    assert product.id == "b"


def test_blank_query_matches_nothing() -> None:
    assert _lookup(InMemoryCatalog(), "  ") is None


def test_catalog_from_json_file(tmp_path: Path) -> None:
    path = tmp_path / "catalog.json"
    path.write_text(
        json.dumps([{"id": 42, "name": "Mango Saplings", "price": "75.5"}]),
        encoding="utf-8",
    )

    catalog = InMemoryCatalog.from_json_file(path)

    assert catalog.products == (Product(id="42", name="Mango Saplings", price=75.5),)


def test_catalog_from_bad_file_raises(tmp_path: Path) -> None:
    path = tmp_path / "catalog.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(CatalogLookupError):
        InMemoryCatalog.from_json_file(path)

    with pytest.raises(CatalogLookupError):
        InMemoryCatalog.from_json_file(tmp_path / "missing.json")


def test_cart_counts_and_mirrors_adds() -> None:
    mirrored: list[Product] = []
    cart = InMemoryCart(on_add=mirrored.append)
    product = Product(id="p-001", name="Wheat Seeds Premium")

    cart.add_to_cart(product)
    cart.add_to_cart(product)

    assert cart.quantity("p-001") == 2
    assert cart.quantity("p-404") == 0
    assert cart.items() == [(product, 2)]
    assert mirrored == [product, product]
