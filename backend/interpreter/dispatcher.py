"""
Action dispatcher.

Intent -> side effect + FeedbackEvent

Responsibilities:
- Invoke navigation / catalog / cart collaborators for an intent
- Convert every collaborator failure into error feedback
- Drop results of a session that was retired while awaiting the catalog

Non-responsibilities:
- No transcript interpretation
- No feedback rendering (FeedbackCoordinator)
- No session state transitions
"""

from __future__ import annotations

import time
from typing import Any, Callable
from urllib.parse import urlencode

from constants import SEARCH_PATH, SEARCH_QUERY_PARAM
from interpreter.collaborators import Cart, Navigator, Product, ProductCatalog
from interpreter.feedback import FeedbackEvent, FeedbackMessages
from interpreter.intents import AddToCart, Intent, Navigate, Search, Unrecognized
from observability.logger import log_event


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


def _always_current() -> bool:
    return True


def search_path(query: str) -> str:
    """Search-scoped navigation path carrying the query as a parameter."""
    return f"{SEARCH_PATH}?{urlencode({SEARCH_QUERY_PARAM: query})}"


class ActionDispatcher:
    """
    Executes intents against application collaborators.

    dispatch() never raises for collaborator failures. It returns None
    only when the originating session was retired mid-flight, in which
    case nothing was mutated and nothing must be presented.
    """

    def __init__(
        self,
        *,
        navigator: Navigator,
        catalog: ProductCatalog,
        cart: Cart,
        messages: FeedbackMessages | None = None,
        connection_id: str | None = None,
    ) -> None:
        self._navigator = navigator
        self._catalog = catalog
        self._cart = cart
        self._messages = messages or FeedbackMessages()
        self._connection_id = connection_id

    async def dispatch(
        self,
        intent: Intent,
        *,
        is_current: Callable[[], bool] = _always_current,
    ) -> FeedbackEvent | None:
        if isinstance(intent, Navigate):
            return self._navigate(intent.path, self._messages.navigating(intent.path))

        if isinstance(intent, Search):
            return self._navigate(search_path(intent.query), self._messages.searching(intent.query))

        if isinstance(intent, AddToCart):
            return await self._add_to_cart(intent.query, is_current)

        if isinstance(intent, Unrecognized):
            self._log("dispatch_unrecognized", {"raw_text": intent.raw_text})
            return self._messages.not_recognized()

        raise TypeError(f"unknown intent: {intent!r}")

    # ------------------------------------------------------------------
    # Intent handlers
    # ------------------------------------------------------------------

    def _navigate(self, path: str, success: FeedbackEvent) -> FeedbackEvent:
        try:
            self._navigator.navigate(path)
        except Exception as exc:  # pylint: disable=broad-exception-caught
            self._log("dispatch_navigate_failed", {"path": path, "error": repr(exc)})
            return self._messages.action_failed()

        self._log("dispatch_navigate", {"path": path})
        return success

    async def _add_to_cart(
        self,
        query: str,
        is_current: Callable[[], bool],
    ) -> FeedbackEvent | None:
        product: Product | None
        try:
            product = await self._catalog.lookup_product(query)
        except Exception as exc:  # pylint: disable=broad-exception-caught
            if not is_current():
                self._log("dispatch_discarded_stale", {"query": query, "stage": "lookup_failed"})
                return None
            self._log("dispatch_lookup_failed", {"query": query, "error": repr(exc)})
            return self._messages.product_not_found(query)

        # Suspension point: the session may have been cancelled or
        # superseded while the catalog was answering.
        if not is_current():
            self._log("dispatch_discarded_stale", {"query": query, "stage": "lookup_done"})
            return None

        if product is None:
            self._log("dispatch_product_not_found", {"query": query})
            return self._messages.product_not_found(query)

        try:
            self._cart.add_to_cart(product)
        except Exception as exc:  # pylint: disable=broad-exception-caught
            self._log(
                "dispatch_cart_failed",
                {"query": query, "product_id": product.id, "error": repr(exc)},
            )
            return self._messages.cart_failed(query)

        self._log("dispatch_added_to_cart", {"query": query, "product_id": product.id})
        return self._messages.added_to_cart(product.name)

    def _log(self, event_type: str, details: dict[str, Any]) -> None:
        log_event({
            "ts_ms": _now_ms(),
            "event_type": event_type,
            "connection_id": self._connection_id,
            **details,
        })
