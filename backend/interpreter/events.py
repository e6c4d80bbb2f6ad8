"""
Event definitions for the capture session reducer.

Rules:
- Events describe facts that have occurred.
- Events carry data only (no behavior).
- All reducer decisions are based on these events.
- No clocks, no timers, no async, no side effects.

Engine events and timer events carry session_id for stale gating.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


# =============================================================================
# Event Type Enumeration
# =============================================================================

class EventType(str, Enum):
    """
    Canonical event types understood by the reducer.

    Every (state, event_type) pair must be explicitly handled
    or explicitly ignored by the reducer.
    """

    # ------------------------------------------------------------------
    # User control
    # ------------------------------------------------------------------
    LISTEN_START = "LISTEN_START"
    LISTEN_STOP = "LISTEN_STOP"
    LISTEN_CANCEL = "LISTEN_CANCEL"

    # ------------------------------------------------------------------
    # Recognition engine
    # ------------------------------------------------------------------
    TRANSCRIPT = "TRANSCRIPT"
    RECOGNITION_ERROR = "RECOGNITION_ERROR"
    RECOGNITION_END = "RECOGNITION_END"

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------
    DISPATCH_COMPLETE = "DISPATCH_COMPLETE"

    # ------------------------------------------------------------------
    # Timers
    # ------------------------------------------------------------------
    ERROR_TIMEOUT = "ERROR_TIMEOUT"


# =============================================================================
# Base Event
# =============================================================================

@dataclass(frozen=True)
class Event:
    """
    Base event type.

    All events must specify:
    - event_type: discriminant
    - ts_ms: timestamp provided by the source (or fake in tests)
    """

    event_type: EventType
    ts_ms: int


@dataclass(frozen=True)
class SessionScopedEvent(Event):
    """
    Base class for events produced on behalf of one listening session.

    The reducer MUST ignore events whose session_id is not the
    currently active session.
    """

    session_id: int


# =============================================================================
# User Control Events
# =============================================================================

@dataclass(frozen=True)
class ListenStart(Event):
    """
    User asked to start listening.

    Capability and locale are probed by the runtime at start time and
    carried here so the reducer stays pure.
    """
    app_locale: str
    recognition_available: bool


@dataclass(frozen=True)
class ListenStop(Event):
    """Graceful stop requested by the user."""


@dataclass(frozen=True)
class ListenCancel(Event):
    """Hard abort (teardown, or explicit cancel)."""
    reason: str = "cancelled"


# =============================================================================
# Recognition Engine Events
# =============================================================================

@dataclass(frozen=True)
class TranscriptEvent(SessionScopedEvent):
    """Interim (is_final=False) or final transcript."""
    text: str
    is_final: bool


@dataclass(frozen=True)
class RecognitionFailed(SessionScopedEvent):
    """Engine-reported error while listening."""
    reason: str


@dataclass(frozen=True)
class RecognitionEnded(SessionScopedEvent):
    """Engine termination (onend). Always returns the session to IDLE."""


# =============================================================================
# Dispatch / Timer Events
# =============================================================================

@dataclass(frozen=True)
class DispatchComplete(SessionScopedEvent):
    """The intent dispatched for session_id finished (or was discarded)."""


@dataclass(frozen=True)
class ErrorTimeout(SessionScopedEvent):
    """ERROR auto-resolve timer expired."""
