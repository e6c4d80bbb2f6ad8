"""
Pure capture session reducer.

(state, event) -> (new_state, commands)

Rules:
- Pure: no side effects, no IO, no clocks.
- Deterministic: output depends only on inputs.
- Total: every (state, event) pair is handled or explicitly ignored (logged).
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any

from constants import ERROR_STATE_AUTO_RESOLVE_DELAY_MS, TRANSCRIPT_LOG_PREVIEW_CHARS
from interpreter.commands import (
    AbortRecognition,
    CancelSpeech,
    CancelTimer,
    Command,
    DispatchIntent,
    LogEvent,
    PublishTranscript,
    ReportFailure,
    StartRecognition,
    StartTimer,
    StopRecognition,
)
from interpreter.enums.failure import Failure
from interpreter.enums.state import State
from interpreter.events import (
    DispatchComplete,
    ErrorTimeout,
    Event,
    EventType,
    ListenCancel,
    ListenStart,
    ListenStop,
    RecognitionEnded,
    RecognitionFailed,
    SessionScopedEvent,
    TranscriptEvent,
)
from interpreter.intents import intent_to_log
from interpreter.locale_adapter import resolve_speech_locale
from interpreter.resolver import resolve
from interpreter.state_dataclass import SessionState


# =============================================================================
# Invariants
# =============================================================================
# - session_id is bumped ONLY on a successful start
# - At most one session is LISTENING or PROCESSING
# - Cancel and superseding start clear active_dispatch; stop and engine
#   end do not
# - RecognitionEnded always lands in IDLE

# =============================================================================
# Timer IDs
# =============================================================================

TIMER_ERROR_AUTO_RESOLVE = "error_auto_resolve"

_ACTIVE_STATES = (State.LISTENING, State.PROCESSING)


# =============================================================================
# Small helpers
# =============================================================================

def _log(
    state: SessionState,
    event: Event,
    decision: str,
    details: dict[str, Any] | None = None,
) -> LogEvent:
    return LogEvent(
        event={
            "ts_ms": event.ts_ms,
            "state": state.state.value,
            "event_type": event.event_type.value,
            "decision": decision,
            "session_id": state.session_id,
            "active_dispatch": state.active_dispatch,
            "details": details or {},
        }
    )


def _state_changed(
    old: SessionState,
    new: SessionState,
    event: Event,
    source: str,
) -> LogEvent:
    return _log(
        new,
        event,
        "state_changed",
        {
            "from_state": old.state.value,
            "to_state": new.state.value,
            "source": source,
        },
    )


def _logs_last(commands: tuple[Command, ...]) -> tuple[Command, ...]:
    non_logs: list[Command] = []
    logs: list[Command] = []
    state_change_logs: list[Command] = []

    for command in commands:
        if isinstance(command, LogEvent):
            if command.event.get("decision") == "state_changed":
                state_change_logs.append(command)
            else:
                logs.append(command)
        else:
            non_logs.append(command)

    return tuple(non_logs + logs + state_change_logs)


def _ignore(
    state: SessionState, event: Event, reason: str
) -> tuple[SessionState, tuple[Command, ...]]:
    return state, (_log(state, event, "ignore", {"reason": reason}),)


def _preview(text: str) -> str:
    return text[:TRANSCRIPT_LOG_PREVIEW_CHARS]


def _to_idle(state: SessionState, **changes: Any) -> SessionState:
    return replace(state, state=State.IDLE, interim_text="", last_error=None, **changes)


# =============================================================================
# User control
# =============================================================================

def _on_listen_start(
    state: SessionState, event: ListenStart
) -> tuple[SessionState, tuple[Command, ...]]:
    if not event.recognition_available:
        return state, (
            ReportFailure(failure=Failure.NOT_SUPPORTED),
            _log(state, event, "not_supported"),
        )

    cmds: list[Command] = []
    source = "listen_start"

    if state.state in _ACTIVE_STATES:
        # Supersede: retire the running session before starting the next
        cmds.append(AbortRecognition(session_id=state.session_id))
        cmds.append(_log(state, event, "session_superseded", {"retired": state.session_id}))
        source = "superseded"
    elif state.state is State.ERROR:
        cmds.append(CancelTimer(timer_id=TIMER_ERROR_AUTO_RESOLVE))
        source = "retry_after_error"

    locale_tag = resolve_speech_locale(event.app_locale)
    new_state = replace(
        state,
        state=State.LISTENING,
        session_id=state.session_id + 1,
        locale_tag=locale_tag,
        active_dispatch=0,
        interim_text="",
        last_error=None,
    )

    cmds.append(CancelSpeech())
    cmds.append(StartRecognition(session_id=new_state.session_id, locale_tag=locale_tag))
    cmds.append(_state_changed(state, new_state, event, source))
    return new_state, _logs_last(tuple(cmds))


def _on_listen_stop(
    state: SessionState, event: ListenStop
) -> tuple[SessionState, tuple[Command, ...]]:
    if state.state is State.IDLE:
        return _ignore(state, event, "already_idle")

    cmds: list[Command] = []
    if state.state is State.LISTENING:
        cmds.append(StopRecognition(session_id=state.session_id))
    elif state.state is State.ERROR:
        cmds.append(CancelTimer(timer_id=TIMER_ERROR_AUTO_RESOLVE))

    # active_dispatch is kept: a pending command still completes
    cmds.append(CancelSpeech())

    new_state = _to_idle(state)
    cmds.append(_state_changed(state, new_state, event, "listen_stop"))
    return new_state, _logs_last(tuple(cmds))


def _on_listen_cancel(
    state: SessionState, event: ListenCancel
) -> tuple[SessionState, tuple[Command, ...]]:
    cmds: list[Command] = []
    if state.state in _ACTIVE_STATES:
        cmds.append(AbortRecognition(session_id=state.session_id))
    elif state.state is State.ERROR:
        cmds.append(CancelTimer(timer_id=TIMER_ERROR_AUTO_RESOLVE))

    cmds.append(CancelSpeech())

    new_state = _to_idle(state, active_dispatch=0)
    cmds.append(
        _log(
            new_state,
            event,
            "cancelled",
            {"reason": event.reason, "retired_dispatch": state.active_dispatch},
        )
    )
    if new_state.state is not state.state:
        cmds.append(_state_changed(state, new_state, event, "listen_cancel"))
    return new_state, _logs_last(tuple(cmds))


# =============================================================================
# Recognition engine
# =============================================================================

def _on_transcript(
    state: SessionState, event: TranscriptEvent
) -> tuple[SessionState, tuple[Command, ...]]:
    if state.state is not State.LISTENING:
        return _ignore(state, event, "not_listening")

    if not event.is_final:
        new_state = replace(state, interim_text=event.text)
        return new_state, (
            PublishTranscript(session_id=state.session_id, text=event.text, is_final=False),
            _log(new_state, event, "transcript_interim", {"text": _preview(event.text)}),
        )

    intent = resolve(event.text, state.navigation_rules, state.command_patterns)
    new_state = replace(
        state,
        state=State.PROCESSING,
        active_dispatch=state.session_id,
        interim_text="",
    )
    return new_state, _logs_last((
        PublishTranscript(session_id=state.session_id, text=event.text, is_final=True),
        DispatchIntent(session_id=state.session_id, intent=intent),
        _log(
            new_state,
            event,
            "intent_resolved",
            {"text": _preview(event.text), "intent": intent_to_log(intent)},
        ),
        _state_changed(state, new_state, event, "transcript_final"),
    ))


def _on_recognition_failed(
    state: SessionState, event: RecognitionFailed
) -> tuple[SessionState, tuple[Command, ...]]:
    if state.state is not State.LISTENING:
        return _ignore(state, event, "not_listening")

    new_state = replace(state, state=State.ERROR, last_error=event.reason, interim_text="")
    return new_state, _logs_last((
        ReportFailure(failure=Failure.RECOGNITION_ERROR),
        StartTimer(
            timer_id=TIMER_ERROR_AUTO_RESOLVE,
            duration_ms=ERROR_STATE_AUTO_RESOLVE_DELAY_MS,
            timeout_event_type=EventType.ERROR_TIMEOUT,
            session_id=state.session_id,
        ),
        _log(new_state, event, "enter_error", {"reason": event.reason}),
        _state_changed(state, new_state, event, "recognition_error"),
    ))


def _on_recognition_ended(
    state: SessionState, event: RecognitionEnded
) -> tuple[SessionState, tuple[Command, ...]]:
    if state.state is State.IDLE:
        return _ignore(state, event, "already_idle")

    cmds: list[Command] = []
    if state.state is State.ERROR:
        cmds.append(CancelTimer(timer_id=TIMER_ERROR_AUTO_RESOLVE))
    elif state.state is State.LISTENING:
        cmds.append(_log(state, event, "ended_without_final"))

    new_state = _to_idle(state)
    cmds.append(_state_changed(state, new_state, event, "recognition_end"))
    return new_state, _logs_last(tuple(cmds))


# =============================================================================
# Dispatch / timers
# =============================================================================

def _on_dispatch_complete(
    state: SessionState, event: DispatchComplete
) -> tuple[SessionState, tuple[Command, ...]]:
    if state.active_dispatch == 0 or event.session_id != state.active_dispatch:
        return _ignore(state, event, "stale_dispatch")

    if state.state is State.PROCESSING:
        new_state = _to_idle(state, active_dispatch=0)
        return new_state, _logs_last((
            _log(new_state, event, "dispatch_complete"),
            _state_changed(state, new_state, event, "dispatch_complete"),
        ))

    # Engine already ended the session; only the dispatch slot is released
    new_state = replace(state, active_dispatch=0)
    return new_state, (_log(new_state, event, "dispatch_complete"),)


def _on_error_timeout(
    state: SessionState, event: ErrorTimeout
) -> tuple[SessionState, tuple[Command, ...]]:
    if state.state is not State.ERROR:
        return _ignore(state, event, "not_in_error")

    new_state = _to_idle(state)
    return new_state, (_state_changed(state, new_state, event, "error_resolved"),)


# =============================================================================
# Reducer entrypoint
# =============================================================================

def reduce(
    state: SessionState, event: Event
) -> tuple[SessionState, tuple[Command, ...]]:
    """
    Pure reducer for the speech capture session state machine.

    Given the current session state and a single event, returns:
    - the next state
    - a tuple of commands describing required side effects

    Properties:
    - Deterministic: no IO, clocks, or randomness
    - Total: every (state, event) pair is handled or explicitly ignored
    - Version-safe: ignores events with stale session IDs
    """
    if isinstance(event, ListenStart):
        return _on_listen_start(state, event)

    if isinstance(event, ListenStop):
        return _on_listen_stop(state, event)

    if isinstance(event, ListenCancel):
        return _on_listen_cancel(state, event)

    if isinstance(event, DispatchComplete):
        return _on_dispatch_complete(state, event)

    # ------------------------------------------------------------------
    # Session-scoped gating
    # ------------------------------------------------------------------
    if isinstance(event, SessionScopedEvent) and event.session_id != state.session_id:
        return _ignore(state, event, "stale_session")

    if isinstance(event, TranscriptEvent):
        return _on_transcript(state, event)

    if isinstance(event, RecognitionFailed):
        return _on_recognition_failed(state, event)

    if isinstance(event, RecognitionEnded):
        return _on_recognition_ended(state, event)

    if isinstance(event, ErrorTimeout):
        return _on_error_timeout(state, event)

    return _ignore(state, event, "unknown_event")
