# pylint: disable=missing-module-docstring,missing-function-docstring

from __future__ import annotations

import asyncio

import pytest

from interpreter.collaborators import Product
from interpreter.dispatcher import ActionDispatcher, search_path
from interpreter.enums.tone import Tone
from interpreter.errors import CatalogLookupError
from interpreter.intents import AddToCart, Navigate, Search, Unrecognized
from observability import logger
from services.catalog_service import InMemoryCart, InMemoryCatalog


class FakeNavigator:
    def __init__(self, fail: bool = False) -> None:
        self.paths: list[str] = []
        self.fail = fail

    def navigate(self, path: str) -> None:
        if self.fail:
            raise RuntimeError("router gone")
        self.paths.append(path)


class BrokenCatalog:
    async def lookup_product(self, query: str) -> Product | None:
        raise CatalogLookupError("database unavailable")


class BrokenCart:
    def add_to_cart(self, product: Product) -> None:
        raise RuntimeError("cart locked")


@pytest.fixture(autouse=True)
def _quiet_logs(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(logger, "_print", lambda line: None)


def _dispatcher(navigator=None, catalog=None, cart=None) -> ActionDispatcher:
    return ActionDispatcher(
        navigator=navigator or FakeNavigator(),
        catalog=catalog or InMemoryCatalog(),
        cart=cart if cart is not None else InMemoryCart(),
    )


def test_navigate_intent_navigates_and_announces() -> None:
    navigator = FakeNavigator()
    feedback = asyncio.run(_dispatcher(navigator=navigator).dispatch(Navigate(path="/predict")))

    assert navigator.paths == ["/predict"]
    assert feedback is not None
    assert feedback.message == "Navigating to crop prediction"
    assert feedback.tone is Tone.INFO


def test_search_intent_navigates_to_shop_with_query() -> None:
    navigator = FakeNavigator()
    feedback = asyncio.run(_dispatcher(navigator=navigator).dispatch(Search(query="neem oil")))

    assert navigator.paths == ["/shop?search=neem+oil"]
    assert feedback is not None
    assert feedback.message == "Searching for neem oil"


def test_search_path_encodes_query() -> None:
    assert search_path("seeds & tools") == "/shop?search=seeds+%26+tools"


def test_add_to_cart_success() -> None:
    cart = InMemoryCart()
    feedback = asyncio.run(_dispatcher(cart=cart).dispatch(AddToCart(query="wheat seeds")))

    assert cart.quantity("p-001") == 1
    assert feedback is not None
    assert feedback.title == "Added to cart"
    assert feedback.message == "Added Wheat Seeds Premium to your cart"
    assert feedback.tone is Tone.SUCCESS


def test_add_to_cart_unknown_product() -> None:
    cart = InMemoryCart()
    feedback = asyncio.run(_dispatcher(cart=cart).dispatch(AddToCart(query="unicorn")))

    assert cart.items() == []
    assert feedback is not None
    assert feedback.tone is Tone.ERROR
    assert "unicorn" in feedback.message


def test_add_to_cart_catalog_failure_is_not_found() -> None:
    cart = InMemoryCart()
    feedback = asyncio.run(
        _dispatcher(catalog=BrokenCatalog(), cart=cart).dispatch(AddToCart(query="wheat"))
    )

    assert cart.items() == []
    assert feedback is not None
    assert feedback.tone is Tone.ERROR
    assert "wheat" in feedback.message


def test_add_to_cart_cart_failure_reports_error() -> None:
    feedback = asyncio.run(
        _dispatcher(cart=BrokenCart()).dispatch(AddToCart(query="wheat seeds"))
    )

    assert feedback is not None
    assert feedback.tone is Tone.ERROR
    assert feedback.message == "Could not add \"wheat seeds\" to your cart"


def test_add_to_cart_retired_session_is_discarded() -> None:
    cart = InMemoryCart()
    feedback = asyncio.run(
        _dispatcher(cart=cart).dispatch(AddToCart(query="wheat seeds"), is_current=lambda: False)
    )

    assert feedback is None
    assert cart.items() == []


def test_navigation_failure_reports_error() -> None:
    feedback = asyncio.run(
        _dispatcher(navigator=FakeNavigator(fail=True)).dispatch(Navigate(path="/cart"))
    )

    assert feedback is not None
    assert feedback.tone is Tone.ERROR


def test_unrecognized_intent_gives_hint() -> None:
    feedback = asyncio.run(_dispatcher().dispatch(Unrecognized(raw_text="hello")))

    assert feedback is not None
    assert feedback.title == "Command not recognized"
    assert feedback.tone is Tone.ERROR
