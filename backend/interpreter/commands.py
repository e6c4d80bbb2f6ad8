"""
Side-effect command definitions for the capture session.

Rules:
- Commands are declarative requests for side effects.
- Commands are emitted by the reducer and executed by the runtime.
- No behavior, no async, no I/O, no clocks.
Invariant:
    - All concrete Command subclasses MUST be frozen dataclasses.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from interpreter.enums.failure import Failure
from interpreter.events import EventType
from interpreter.intents import Intent

# =============================================================================
# Command Type Enumeration
# =============================================================================

class CommandType(str, Enum):
    """
    Canonical command types emitted by the reducer.

    Stable discriminants used for logging and runtime dispatch.
    """

    # Recognition
    START_RECOGNITION = "START_RECOGNITION"
    STOP_RECOGNITION = "STOP_RECOGNITION"
    ABORT_RECOGNITION = "ABORT_RECOGNITION"
    PUBLISH_TRANSCRIPT = "PUBLISH_TRANSCRIPT"

    # Actions
    DISPATCH_INTENT = "DISPATCH_INTENT"

    # Feedback
    REPORT_FAILURE = "REPORT_FAILURE"
    CANCEL_SPEECH = "CANCEL_SPEECH"

    # Timers
    START_TIMER = "START_TIMER"
    CANCEL_TIMER = "CANCEL_TIMER"

    # Observability
    LOG_EVENT = "LOG_EVENT"


# =============================================================================
# Base Command
# =============================================================================

class Command:
    """
    Base command type.

    command_type is an explicit discriminant and must never be inferred
    from Python type identity.
    """

    command_type: CommandType


# =============================================================================
# Recognition Commands
# =============================================================================

@dataclass(frozen=True)
class StartRecognition(Command):
    """Ask the host engine to start listening for session_id."""
    session_id: int
    locale_tag: str
    command_type: CommandType = CommandType.START_RECOGNITION


@dataclass(frozen=True)
class StopRecognition(Command):
    """Graceful engine stop."""
    session_id: int
    command_type: CommandType = CommandType.STOP_RECOGNITION


@dataclass(frozen=True)
class AbortRecognition(Command):
    """Hard engine abort; pending transcript is discarded."""
    session_id: int
    command_type: CommandType = CommandType.ABORT_RECOGNITION


@dataclass(frozen=True)
class PublishTranscript(Command):
    """Forward a transcript to the host for display."""
    session_id: int
    text: str
    is_final: bool
    command_type: CommandType = CommandType.PUBLISH_TRANSCRIPT


# =============================================================================
# Action Commands
# =============================================================================

@dataclass(frozen=True)
class DispatchIntent(Command):
    """
    Execute a resolved intent.

    The runtime runs the dispatch concurrently and must emit exactly one
    DispatchComplete(session_id) when it finishes.
    """
    session_id: int
    intent: Intent
    command_type: CommandType = CommandType.DISPATCH_INTENT


# =============================================================================
# Feedback Commands
# =============================================================================

@dataclass(frozen=True)
class ReportFailure(Command):
    """Tell the user a session failed (runtime builds the feedback)."""
    failure: Failure
    command_type: CommandType = CommandType.REPORT_FAILURE


@dataclass(frozen=True)
class CancelSpeech(Command):
    """Silence any in-flight speech synthesis."""
    command_type: CommandType = CommandType.CANCEL_SPEECH


# =============================================================================
# Timer Commands
# =============================================================================

@dataclass(frozen=True)
class StartTimer(Command):
    """
    Request to start a named timer.

    On expiration, the runtime must inject the specified timeout event
    tagged with session_id.
    """
    timer_id: str
    duration_ms: int
    timeout_event_type: EventType
    session_id: int
    command_type: CommandType = CommandType.START_TIMER


@dataclass(frozen=True)
class CancelTimer(Command):
    """Request to cancel a previously scheduled timer."""
    timer_id: str
    command_type: CommandType = CommandType.CANCEL_TIMER


# =============================================================================
# Observability Commands
# =============================================================================

@dataclass(frozen=True)
class LogEvent(Command):
    """Request to emit a structured observability event."""
    event: dict[str, Any]
    command_type: CommandType = CommandType.LOG_EVENT
