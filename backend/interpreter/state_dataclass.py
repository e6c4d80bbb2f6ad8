"""
Authoritative capture session state container.

Rules:
- This dataclass is a pure data model.
- It contains ALL state the reducer may ever need.
- No behavior, no helpers, no derived logic.
"""
from __future__ import annotations

from dataclasses import dataclass

from interpreter.enums.state import State
from interpreter.rules import COMMAND_PATTERNS, NAVIGATION_RULES, Pattern, Rule


@dataclass(frozen=True)
class SessionState:
    """Immutable snapshot of all capture-session-owned state."""

    # ------------------------------------------------------------------
    # Control state
    # ------------------------------------------------------------------
    state: State = State.IDLE

    # ------------------------------------------------------------------
    # Session identity
    # ------------------------------------------------------------------
    # Monotonic token. 0 means "no session has been started yet".
    # Bumped ONLY on a successful start; never reused.
    session_id: int = 0

    locale_tag: str | None = None

    # Session whose dispatch result may still be applied. 0 = none.
    # Cleared by cancel and by a superseding start, so a late catalog
    # answer for a retired session is discarded.
    active_dispatch: int = 0

    # ------------------------------------------------------------------
    # Transcript
    # ------------------------------------------------------------------
    interim_text: str = ""

    # ------------------------------------------------------------------
    # Error handling
    # ------------------------------------------------------------------
    last_error: str | None = None

    # ------------------------------------------------------------------
    # Command tables (immutable, loaded at startup)
    # ------------------------------------------------------------------
    navigation_rules: tuple[Rule, ...] = NAVIGATION_RULES
    command_patterns: tuple[Pattern, ...] = COMMAND_PATTERNS
