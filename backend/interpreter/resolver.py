"""
Command resolver.

final transcript -> Intent

Rules:
- Pure: no side effects, no IO, no clocks.
- Deterministic and case-insensitive.
- Navigation rules first (by priority), then parameterized patterns
  (in table order), else Unrecognized. First match wins; no
  multi-intent resolution.
"""

from __future__ import annotations

import re
from typing import Iterable

from interpreter.enums.intent_kind import IntentKind
from interpreter.intents import AddToCart, Intent, Navigate, Search, Unrecognized
from interpreter.rules import COMMAND_PATTERNS, NAVIGATION_RULES, Pattern, Rule


_WHITESPACE = re.compile(r"\s+")
_TRAILING_PUNCTUATION = ".!?,"


def normalize_transcript(transcript: str) -> str:
    """Trim, lower-case, collapse whitespace, drop trailing punctuation."""
    text = _WHITESPACE.sub(" ", transcript.strip().lower())
    return text.rstrip(_TRAILING_PUNCTUATION).strip()


def resolve(
    transcript: str,
    rules: Iterable[Rule] = NAVIGATION_RULES,
    patterns: Iterable[Pattern] = COMMAND_PATTERNS,
) -> Intent:
    """
    Map a final transcript to exactly one intent.

    `rules` must already be in evaluation order (see rules.by_priority);
    the default table is.
    """
    normalized = normalize_transcript(transcript)
    if not normalized:
        return Unrecognized(raw_text=transcript)

    for rule in rules:
        if rule.matches(normalized):
            return Navigate(path=rule.path)

    for pattern in patterns:
        query = pattern.capture(normalized)
        if query is None:
            continue
        if pattern.intent_kind is IntentKind.ADD_TO_CART:
            return AddToCart(query=query)
        if pattern.intent_kind is IntentKind.SEARCH:
            return Search(query=query)

    return Unrecognized(raw_text=transcript)
