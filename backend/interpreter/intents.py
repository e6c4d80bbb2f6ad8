"""
Intent value types.

Rules:
- Intents are immutable value objects produced by the resolver.
- Exactly one intent is produced per final transcript.
- kind is an explicit discriminant and must never be inferred
  from Python type identity.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

from interpreter.enums.intent_kind import IntentKind


@dataclass(frozen=True)
class Navigate:
    """Go to an application path."""
    path: str
    kind: IntentKind = IntentKind.NAVIGATE


@dataclass(frozen=True)
class AddToCart:
    """Look up a product by name and add it to the cart."""
    query: str
    kind: IntentKind = IntentKind.ADD_TO_CART


@dataclass(frozen=True)
class Search:
    """Open the shop filtered by a query."""
    query: str
    kind: IntentKind = IntentKind.SEARCH


@dataclass(frozen=True)
class Unrecognized:
    """Nothing in the rule or pattern tables matched."""
    raw_text: str
    kind: IntentKind = IntentKind.UNRECOGNIZED


Intent = Union[Navigate, AddToCart, Search, Unrecognized]


def intent_to_log(intent: Intent) -> dict[str, Any]:
    """Flatten an intent into a JSON-serializable dict for logging."""
    if isinstance(intent, Navigate):
        return {"kind": intent.kind.value, "path": intent.path}
    if isinstance(intent, (AddToCart, Search)):
        return {"kind": intent.kind.value, "query": intent.query}
    return {"kind": intent.kind.value, "raw_text": intent.raw_text}
