"""
Intent kind enumeration.

Stable discriminant for intent variants, used by parameterized
patterns and for logging.
"""

from __future__ import annotations

from enum import Enum


class IntentKind(str, Enum):
    NAVIGATE = "NAVIGATE"
    ADD_TO_CART = "ADD_TO_CART"
    SEARCH = "SEARCH"
    UNRECOGNIZED = "UNRECOGNIZED"
