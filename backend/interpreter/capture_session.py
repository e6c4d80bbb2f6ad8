"""
Speech capture session: runtime execution shell for the interpreter.

Responsibilities:
- Own the authoritative SessionState
- Call the pure reducer
- Execute commands with side effects (recognition engine, dispatch,
  feedback, timers)
- Run intent dispatches concurrently, tagged with their session_id
- Convert timer expiry into events

Non-responsibilities:
- No transition decisions (reducer)
- No transcript interpretation (resolver)
- No transport concerns (gateway)
"""

from __future__ import annotations

import asyncio
import time
from typing import Callable

from adapters.recognition.base import RecognitionAdapter
from interpreter.collaborators import HostCapabilities, LocaleSource
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
from interpreter.dispatcher import ActionDispatcher
from interpreter.enums.failure import Failure
from interpreter.enums.state import State
from interpreter.errors import NotSupportedError, RecognitionError
from interpreter.events import (
    DispatchComplete,
    ErrorTimeout,
    Event,
    EventType,
    ListenCancel,
    ListenStart,
    ListenStop,
    RecognitionFailed,
)
from interpreter.feedback import FeedbackCoordinator, FeedbackMessages
from interpreter.intents import Intent
from interpreter.reducer import reduce
from interpreter.state_dataclass import SessionState
from observability.logger import log_event


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


# session_id, text, is_final
TranscriptSink = Callable[[int, str, bool], None]


class SpeechCaptureSession:
    """
    Runtime boundary for voice command capture.

    Architectural role:
    SpeechCaptureSession is the bridge between the pure interpreter
    (reducer + resolver + immutable state) and the imperative world
    (host engines, collaborators, logging, time).

    Guarantees:
    - Reducer is called exactly once per incoming event
    - State is updated before any side effect executes
    - Commands execute in reducer-emitted order
    - Engine events, timers and finished dispatches all re-enter through
      handle_event() (single entry point)
    - A dispatch whose session was cancelled or superseded never mutates
      the cart and never presents feedback

    The object is reusable across listening cycles.
    """

    def __init__(
        self,
        *,
        host: HostCapabilities,
        locale_source: LocaleSource,
        dispatcher: ActionDispatcher,
        feedback: FeedbackCoordinator,
        messages: FeedbackMessages | None = None,
        on_transcript: TranscriptSink | None = None,
        connection_id: str | None = None,
        initial_state: SessionState | None = None,
    ) -> None:
        self._host = host
        self._locale_source = locale_source
        self._dispatcher = dispatcher
        self._feedback = feedback
        self._messages = messages or FeedbackMessages()
        self._on_transcript = on_transcript
        self._connection_id = connection_id
        self._state = initial_state or SessionState()

        # Engine bound to the running session / engine probed for the next one
        self._recognizer: RecognitionAdapter | None = None
        self._probed: RecognitionAdapter | None = None

        self._timers: dict[str, asyncio.Task[None]] = {}
        self._dispatches: dict[int, asyncio.Task[None]] = {}

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        """
        Current immutable session state.

        Only the reducer produces new states; consumers must treat this
        as read-only.
        """
        return self._state

    @property
    def session_id(self) -> int:
        return self._state.session_id

    def is_current(self, session_id: int) -> bool:
        """True while a dispatch for session_id may still be applied."""
        return session_id != 0 and self._state.active_dispatch == session_id

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def start(self) -> int | None:
        """
        Start a listening session.

        Supersedes any running session. Returns the new session_id, or
        None when the host has no recognition engine (the user has
        already been told).
        """
        try:
            self._probed = self._host.recognition()
            available = True
        except NotSupportedError:
            self._probed = None
            available = False

        await self.handle_event(
            ListenStart(
                event_type=EventType.LISTEN_START,
                ts_ms=_now_ms(),
                app_locale=self._locale_source.current_locale(),
                recognition_available=available,
            )
        )

        if self._state.state is State.LISTENING:
            return self._state.session_id
        return None

    async def stop(self) -> None:
        """Graceful stop. A no-op while IDLE."""
        await self.handle_event(ListenStop(event_type=EventType.LISTEN_STOP, ts_ms=_now_ms()))

    async def cancel(self, reason: str = "cancelled") -> None:
        """Hard abort: engine aborted, speech cancelled, pending results dropped."""
        await self.handle_event(
            ListenCancel(event_type=EventType.LISTEN_CANCEL, ts_ms=_now_ms(), reason=reason)
        )

    async def shutdown(self) -> None:
        """
        Teardown.

        Cancels the session, then all timers and in-flight dispatch
        tasks, and waits for them to finish.
        """
        await self.cancel(reason="teardown")

        for timer_id in list(self._timers.keys()):
            self._cancel_timer(timer_id)

        tasks = list(self._dispatches.values())
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._dispatches.clear()

    async def handle_event(self, event: Event) -> None:
        """
        Process a single event through the interpreter pipeline.

        1. Pass the current state and event to the pure reducer
        2. Swap in the new state
        3. Execute all emitted commands sequentially
        """
        new_state, commands = reduce(self._state, event)
        self._state = new_state

        for cmd in commands:
            await self._execute_command(cmd)

    async def wait_idle(self) -> None:
        """Wait for all in-flight dispatches to finish."""
        while self._dispatches:
            await asyncio.gather(*list(self._dispatches.values()), return_exceptions=True)

    # ------------------------------------------------------------------
    # Command execution (side effects)
    # ------------------------------------------------------------------

    async def _execute_command(self, cmd: Command) -> None:
        if isinstance(cmd, LogEvent):
            log_event({**cmd.event, "connection_id": self._connection_id})

        elif isinstance(cmd, StartRecognition):
            await self._start_recognition(cmd.session_id, cmd.locale_tag)

        elif isinstance(cmd, StopRecognition):
            await self._engine_call("stop", cmd.session_id)

        elif isinstance(cmd, AbortRecognition):
            await self._engine_call("abort", cmd.session_id)

        elif isinstance(cmd, PublishTranscript):
            if self._on_transcript is not None:
                self._on_transcript(cmd.session_id, cmd.text, cmd.is_final)

        elif isinstance(cmd, DispatchIntent):
            self._spawn_dispatch(cmd.session_id, cmd.intent)

        elif isinstance(cmd, ReportFailure):
            if cmd.failure is Failure.NOT_SUPPORTED:
                await self._feedback.present(self._messages.not_supported())
            else:
                await self._feedback.present(self._messages.recognition_error())

        elif isinstance(cmd, CancelSpeech):
            await self._feedback.cancel_speech()

        elif isinstance(cmd, StartTimer):
            self._start_timer(
                timer_id=cmd.timer_id,
                duration_ms=cmd.duration_ms,
                timeout_event_type=cmd.timeout_event_type,
                session_id=cmd.session_id,
            )

        elif isinstance(cmd, CancelTimer):
            self._cancel_timer(cmd.timer_id)

        else:
            self._log("unknown_command", {"command_type": cmd.command_type.value})

    async def _start_recognition(self, session_id: int, locale_tag: str) -> None:
        self._recognizer = self._probed
        self._probed = None

        if self._recognizer is None:
            self._log("recognition_start_without_engine", {"session_id": session_id})
            return

        try:
            await self._recognizer.start(session_id=session_id, locale_tag=locale_tag)
        except RecognitionError as exc:
            await self.handle_event(
                RecognitionFailed(
                    event_type=EventType.RECOGNITION_ERROR,
                    ts_ms=_now_ms(),
                    session_id=session_id,
                    reason=str(exc) or "start_failed",
                )
            )
            return

        self._log(
            "recognition_start_executed",
            {"session_id": session_id, "locale_tag": locale_tag},
        )

    async def _engine_call(self, action: str, session_id: int) -> None:
        """stop()/abort() on the bound engine. Failures are logged only."""
        recognizer = self._recognizer
        if recognizer is None:
            return
        try:
            if action == "stop":
                await recognizer.stop(session_id)
            else:
                await recognizer.abort(session_id)
        except Exception as exc:  # pylint: disable=broad-exception-caught
            self._log(
                "recognition_call_failed",
                {"action": action, "session_id": session_id, "error": repr(exc)},
            )
            return

        self._log(f"recognition_{action}_executed", {"session_id": session_id})

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def _spawn_dispatch(self, session_id: int, intent: Intent) -> None:
        task = asyncio.create_task(self._run_dispatch(session_id, intent))
        self._dispatches[session_id] = task

        def _forget(done: asyncio.Task[None]) -> None:
            if self._dispatches.get(session_id) is done:
                del self._dispatches[session_id]

        task.add_done_callback(_forget)

    async def _run_dispatch(self, session_id: int, intent: Intent) -> None:
        try:
            feedback = await self._dispatcher.dispatch(
                intent,
                is_current=lambda: self.is_current(session_id),
            )
        except asyncio.CancelledError:
            raise
        except Exception as exc:  # pylint: disable=broad-exception-caught
            self._log("dispatch_crashed", {"session_id": session_id, "error": repr(exc)})
            feedback = self._messages.action_failed()

        if feedback is not None:
            if self.is_current(session_id):
                await self._feedback.present(feedback)
            else:
                self._log("feedback_discarded_stale", {"session_id": session_id})

        await self.handle_event(
            DispatchComplete(
                event_type=EventType.DISPATCH_COMPLETE,
                ts_ms=_now_ms(),
                session_id=session_id,
            )
        )

    # ------------------------------------------------------------------
    # Timers
    # ------------------------------------------------------------------

    def _start_timer(
        self,
        *,
        timer_id: str,
        duration_ms: int,
        timeout_event_type: EventType,
        session_id: int,
    ) -> None:
        """
        Start or replace a timer that emits a timeout event.

        Timer tasks re-enter handle_event() when they expire.
        """
        self._cancel_timer(timer_id)

        async def _timer_task() -> None:
            try:
                await asyncio.sleep(duration_ms / 1000.0)
            except asyncio.CancelledError:
                return

            self._timers.pop(timer_id, None)

            if timeout_event_type is EventType.ERROR_TIMEOUT:
                await self.handle_event(
                    ErrorTimeout(
                        event_type=EventType.ERROR_TIMEOUT,
                        ts_ms=_now_ms(),
                        session_id=session_id,
                    )
                )
            else:
                self._log("unknown_timeout_event", {"timer_id": timer_id})

        self._timers[timer_id] = asyncio.create_task(_timer_task())

    def _cancel_timer(self, timer_id: str) -> None:
        """Idempotent: safe to call even if the timer doesn't exist."""
        task = self._timers.pop(timer_id, None)
        if task is not None and not task.done():
            task.cancel()

    def _log(self, event_type: str, details: dict[str, object]) -> None:
        log_event({
            "ts_ms": _now_ms(),
            "event_type": event_type,
            "connection_id": self._connection_id,
            "state": self._state.state.value,
            **details,
        })
