"""
Static command tables.

Rules:
- Tables are process-wide, loaded at startup, never mutated.
- Navigation priority is an explicit field on every rule; evaluation
  order never depends on how a table was built.
- Every pattern has exactly one capture group.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable

from interpreter.enums.intent_kind import IntentKind
from interpreter.enums.match_mode import MatchMode


# =============================================================================
# Types
# =============================================================================

@dataclass(frozen=True)
class Rule:
    """Navigation rule: phrase -> path."""
    phrase: str
    path: str
    priority: int
    match: MatchMode = MatchMode.CONTAINS

    def __post_init__(self) -> None:
        # Transcripts are matched after normalization; phrases must be too
        object.__setattr__(self, "phrase", " ".join(self.phrase.lower().split()))

    def matches(self, normalized: str) -> bool:
        if self.match is MatchMode.EXACT:
            return normalized == self.phrase
        return self.phrase in normalized

    def to_dict(self) -> dict[str, Any]:
        return {
            "phrase": self.phrase,
            "path": self.path,
            "priority": self.priority,
            "match": self.match.value,
        }

    @staticmethod
    def from_dict(data: dict[str, Any]) -> Rule:
        """
        Build a rule from its serialized form.

        Raises:
            KeyError / ValueError on malformed entries.
        """
        phrase = str(data["phrase"]).strip().lower()
        if not phrase:
            raise ValueError("rule phrase must be non-empty")
        return Rule(
            phrase=phrase,
            path=str(data["path"]),
            priority=int(data["priority"]),
            match=MatchMode(data.get("match", MatchMode.CONTAINS.value)),
        )


@dataclass(frozen=True)
class Pattern:
    """Parameterized command: one capture group becomes the intent query."""
    name: str
    matcher: re.Pattern[str]
    intent_kind: IntentKind

    def capture(self, normalized: str) -> str | None:
        m = self.matcher.fullmatch(normalized)
        if m is None:
            return None
        query = m.group(1).strip()
        return query or None


# =============================================================================
# Ordering
# =============================================================================

def by_priority(rules: Iterable[Rule]) -> tuple[Rule, ...]:
    """
    Return rules in evaluation order: highest priority first.

    sorted() is stable, so equal priorities keep declaration order.
    """
    return tuple(sorted(rules, key=lambda r: -r.priority))


# =============================================================================
# Default navigation table
# =============================================================================
# Longer phrases that contain shorter ones carry a higher priority
# ("shopping cart" before "go to shop", "prediction history" before
# "go to prediction"). Bare nouns are EXACT so parameterized commands
# such as "add rice to cart" fall through to the pattern table.

_P_COMPOUND = 100
_P_PHRASE = 50
_P_WORD = 10

NAVIGATION_RULES: tuple[Rule, ...] = by_priority((
    Rule("prediction history", "/history", _P_COMPOUND),
    Rule("shopping cart", "/cart", _P_COMPOUND),
    Rule("crop prediction", "/predict", _P_COMPOUND),

    Rule("go to home", "/", _P_PHRASE),
    Rule("go home", "/", _P_PHRASE),
    Rule("go to shop", "/shop", _P_PHRASE),
    Rule("go shop", "/shop", _P_PHRASE),
    Rule("go to prediction", "/predict", _P_PHRASE),
    Rule("go to analytics", "/analytics", _P_PHRASE),
    Rule("go to cart", "/cart", _P_PHRASE),
    Rule("go to contact", "/contact", _P_PHRASE),
    Rule("go to orders", "/orders", _P_PHRASE),
    Rule("my orders", "/orders", _P_PHRASE),
    Rule("sign in", "/auth", _P_PHRASE),
    Rule("sign up", "/auth", _P_PHRASE),
    Rule("go to history", "/history", _P_PHRASE),

    Rule("home", "/", _P_WORD, MatchMode.EXACT),
    Rule("shop", "/shop", _P_WORD, MatchMode.EXACT),
    Rule("store", "/shop", _P_WORD, MatchMode.EXACT),
    Rule("prediction", "/predict", _P_WORD, MatchMode.EXACT),
    Rule("predict", "/predict", _P_WORD, MatchMode.EXACT),
    Rule("analytics", "/analytics", _P_WORD, MatchMode.EXACT),
    Rule("cart", "/cart", _P_WORD, MatchMode.EXACT),
    Rule("contact", "/contact", _P_WORD, MatchMode.EXACT),
    Rule("orders", "/orders", _P_WORD, MatchMode.EXACT),
    Rule("login", "/auth", _P_WORD, MatchMode.EXACT),
    Rule("history", "/history", _P_WORD, MatchMode.EXACT),
))


# =============================================================================
# Default pattern table
# =============================================================================
# Order matters: cart commands before search phrasing. Patterns must
# span the whole utterance, so compound commands match nothing.

_PLEASE = r"(?:please )?"
_CART = r"(?:my |the )?cart"


def _pattern(name: str, regex: str, kind: IntentKind) -> Pattern:
    return Pattern(name=name, matcher=re.compile(_PLEASE + regex), intent_kind=kind)


COMMAND_PATTERNS: tuple[Pattern, ...] = (
    _pattern("add_x_to_cart", rf"add (.+) to {_CART}", IntentKind.ADD_TO_CART),
    _pattern("add_to_cart_x", rf"add to {_CART} (.+)", IntentKind.ADD_TO_CART),
    _pattern("put_x_in_cart", rf"put (.+) in(?:to)? {_CART}", IntentKind.ADD_TO_CART),
    _pattern("buy_x", r"buy (.+)", IntentKind.ADD_TO_CART),
    _pattern("search_for_x", r"search for (.+)", IntentKind.SEARCH),
    _pattern("find_x", r"find (.+)", IntentKind.SEARCH),
    _pattern("look_for_x", r"look for (.+)", IntentKind.SEARCH),
    _pattern("show_me_x", r"show me (.+)", IntentKind.SEARCH),
)


# =============================================================================
# Serialization
# =============================================================================

def dump_rules(rules: Iterable[Rule]) -> str:
    """Serialize a rule table to JSON (priority and match mode included)."""
    return json.dumps([r.to_dict() for r in rules], ensure_ascii=False, indent=2)


def parse_rules(payload: str) -> tuple[Rule, ...]:
    """
    Parse a JSON rule table and return it in evaluation order.

    Raises:
        ValueError if the payload is not a JSON list of rule objects.
    """
    data = json.loads(payload)
    if not isinstance(data, list):
        raise ValueError("rule table must be a JSON list")
    return by_priority(Rule.from_dict(item) for item in data)


def load_rules(path: str | Path) -> tuple[Rule, ...]:
    """Load a navigation rule table from a JSON file."""
    return parse_rules(Path(path).read_text(encoding="utf-8"))
