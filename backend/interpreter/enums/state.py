"""
Authoritative capture session state enumeration.

Rules:
- This enum defines ONLY the session lifecycle states.
- No behavior, no helper methods, no side effects.
- Transitions are defined exclusively in the reducer.
"""

from __future__ import annotations

from enum import Enum


class State(str, Enum):
    """
    Lifecycle states of the speech capture session.

    IDLE is both the initial state and the terminal state of every
    listening cycle; the session object is reused across cycles.
    """

    IDLE = "IDLE"
    LISTENING = "LISTENING"
    PROCESSING = "PROCESSING"
    ERROR = "ERROR"
