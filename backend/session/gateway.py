"""
Session gateway.

Responsibilities:
- Owns VoiceSession lifecycle
- Tracks connection_status independently of interpreter state
- Wires the interpreter (capture session, dispatcher, feedback) to the
  client-backed host
- Routes inbound JSON control messages -> capture session calls/events
- Hands outbound control messages to the transport

NOT responsible for:
- Any state machine logic (reducer)
- Transcript interpretation (resolver)
- Socket I/O (server routes)
"""

from __future__ import annotations

import json
import time
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any
from uuid import uuid4

from constants import PAYLOAD_LOG_PREVIEW_CHARS
from interpreter.capture_session import SpeechCaptureSession
from interpreter.collaborators import ProductCatalog
from interpreter.dispatcher import ActionDispatcher
from interpreter.events import (
    Event,
    EventType,
    RecognitionEnded,
    RecognitionFailed,
    TranscriptEvent,
)
from interpreter.feedback import FeedbackCoordinator, FeedbackMessages, Translate
from interpreter.rules import NAVIGATION_RULES, Rule
from interpreter.state_dataclass import SessionState
from observability.logger import log_event
from services.catalog_service import InMemoryCart
from session.client_host import ClientHost
from session.connection_status import ConnectionStatus
from session.voice_session import VoiceSession

if TYPE_CHECKING:
    from config import AppConfig


# ------------------------------------------------------------------
# Helpers
# ------------------------------------------------------------------

def _now_ms() -> int:
    return time.time_ns() // 1_000_000


def _new_connection_id() -> str:
    return f"conn_{uuid4().hex[:12]}"


def _int_field(data: dict[str, Any], key: str) -> int | None:
    value = data.get(key)
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value


# ------------------------------------------------------------------
# Gateway result
# ------------------------------------------------------------------

@dataclass(frozen=True)
class GatewayResult:
    """
    Return value for gateway boundary methods.

    outbound_json:
        JSON messages to send to client, in order
    """
    outbound_json: tuple[dict[str, Any], ...] = ()


# ------------------------------------------------------------------
# SessionGateway
# ------------------------------------------------------------------

class SessionGateway:
    """One gateway == one client connection == one voice session."""

    def __init__(
        self,
        *,
        config: AppConfig,
        catalog: ProductCatalog,
        navigation_rules: tuple[Rule, ...] = NAVIGATION_RULES,
        translate: Translate | None = None,
    ) -> None:
        self._config = config
        self._catalog = catalog
        self._navigation_rules = navigation_rules
        self._messages = FeedbackMessages(translate)
        self.session: VoiceSession | None = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def on_ws_connect(self) -> GatewayResult:
        """Called when a WebSocket connection is established."""
        connection_id = _new_connection_id()

        session = VoiceSession(connection_id=connection_id)
        session.connection_status = ConnectionStatus.UP

        host = ClientHost(session=session, default_locale=self._config.default_app_locale)
        cart = InMemoryCart(on_add=host.cart_added)
        feedback = FeedbackCoordinator(
            notifier=host,
            host=host,
            locale_source=host,
            connection_id=connection_id,
        )
        dispatcher = ActionDispatcher(
            navigator=host,
            catalog=self._catalog,
            cart=cart,
            messages=self._messages,
            connection_id=connection_id,
        )
        capture = SpeechCaptureSession(
            host=host,
            locale_source=host,
            dispatcher=dispatcher,
            feedback=feedback,
            messages=self._messages,
            on_transcript=host.publish_transcript,
            connection_id=connection_id,
            initial_state=replace(SessionState(), navigation_rules=self._navigation_rules),
        )

        session.host = host
        session.cart = cart
        session.feedback = feedback
        session.capture = capture
        self.session = session

        self._log("WS_CONNECTED", {})

        init_msg: dict[str, Any] = {
            "type": "SESSION_INIT",
            "connection_id": connection_id,
            "config": {"default_locale": self._config.default_app_locale},
        }
        return GatewayResult(outbound_json=(init_msg,) + self.drain_outbound())

    async def on_ws_disconnect(self, reason: str | None = None) -> GatewayResult:
        """
        Called when the WebSocket disconnects.

        Tears the interpreter down: recognition aborted, speech
        cancelled, pending dispatch results discarded.
        """
        if self.session is None:
            log_event({
                "ts_ms": _now_ms(),
                "event_type": "WS_DISCONNECT_WITHOUT_SESSION",
                "reason": reason,
            })
            return GatewayResult()

        if self.session.capture is not None:
            await self.session.capture.shutdown()

        self.session.connection_status = ConnectionStatus.DOWN
        self.session.drain_control()
        self._log("WS_DISCONNECTED", {"reason": reason})
        return GatewayResult()

    # ------------------------------------------------------------------
    # Outbound
    # ------------------------------------------------------------------

    def drain_outbound(self) -> tuple[dict[str, Any], ...]:
        if self.session is None:
            return ()
        return self.session.drain_control()

    async def wait_outbound(self) -> None:
        """Block until the session has control messages to deliver."""
        assert self.session is not None, "wait_outbound() before on_ws_connect()"
        await self.session.wait_control()

    # ------------------------------------------------------------------
    # Inbound
    # ------------------------------------------------------------------

    async def on_json_message(self, payload: str) -> GatewayResult:
        """Route inbound JSON to capture session calls and events."""
        if self.session is None:
            log_event({
                "ts_ms": _now_ms(),
                "event_type": "MESSAGE_WITHOUT_SESSION",
                "payload_preview": payload[:PAYLOAD_LOG_PREVIEW_CHARS],
            })
            return GatewayResult()

        try:
            data = json.loads(payload)
        except json.JSONDecodeError as e:
            self._log("JSON_DECODE_ERROR", {
                "error": str(e),
                "payload_preview": payload[:PAYLOAD_LOG_PREVIEW_CHARS],
            })
            return GatewayResult()

        if not isinstance(data, dict):
            self._log("INVALID_MESSAGE", {"payload_preview": payload[:PAYLOAD_LOG_PREVIEW_CHARS]})
            return GatewayResult()

        await self._route(data)
        return GatewayResult(outbound_json=self.drain_outbound())

    async def _route(self, data: dict[str, Any]) -> None:
        session = self.session
        assert session is not None
        assert session.host is not None and session.capture is not None
        assert session.feedback is not None

        msg_type = data.get("type")
        ts_ms = _int_field(data, "ts_ms") or _now_ms()

        if msg_type == "CAPABILITIES":
            recognition = data.get("recognition")
            synthesis = data.get("synthesis")
            session.host.update_capabilities(
                recognition=recognition if isinstance(recognition, bool) else None,
                synthesis=synthesis if isinstance(synthesis, bool) else None,
            )
            self._log("CAPABILITIES_UPDATED", session.host.capabilities())
            return

        if msg_type == "LOCALE":
            locale = data.get("locale")
            if not isinstance(locale, str):
                self._log("INVALID_MESSAGE", {"msg_type": msg_type, "field": "locale"})
                return
            session.host.set_locale(locale)
            return

        if msg_type == "LISTEN_START":
            await session.capture.start()
            return

        if msg_type == "LISTEN_STOP":
            await session.capture.stop()
            return

        if msg_type == "LISTEN_CANCEL":
            await session.capture.cancel(reason="client_cancel")
            return

        if msg_type == "SPEECH_END":
            utterance_id = _int_field(data, "utterance_id")
            if utterance_id is None:
                self._log("INVALID_MESSAGE", {"msg_type": msg_type, "field": "utterance_id"})
                return
            session.feedback.speech_finished(utterance_id)
            return

        event = self._engine_event(msg_type, data, ts_ms)
        if event is not None:
            await session.capture.handle_event(event)

    def _engine_event(self, msg_type: Any, data: dict[str, Any], ts_ms: int) -> Event | None:
        """Build a session-scoped engine event, or log why not."""
        if msg_type not in ("RECOGNITION_RESULT", "RECOGNITION_ERROR", "RECOGNITION_END"):
            self._log("UNKNOWN_MESSAGE_TYPE", {"msg_type": msg_type})
            return None

        session_id = _int_field(data, "session_id")
        if session_id is None:
            self._log("INVALID_MESSAGE", {"msg_type": msg_type, "field": "session_id"})
            return None

        if msg_type == "RECOGNITION_RESULT":
            text = data.get("text")
            if not isinstance(text, str):
                self._log("INVALID_MESSAGE", {"msg_type": msg_type, "field": "text"})
                return None
            return TranscriptEvent(
                event_type=EventType.TRANSCRIPT,
                ts_ms=ts_ms,
                session_id=session_id,
                text=text,
                is_final=bool(data.get("is_final", False)),
            )

        if msg_type == "RECOGNITION_ERROR":
            return RecognitionFailed(
                event_type=EventType.RECOGNITION_ERROR,
                ts_ms=ts_ms,
                session_id=session_id,
                reason=str(data.get("error") or "unknown"),
            )

        return RecognitionEnded(
            event_type=EventType.RECOGNITION_END,
            ts_ms=ts_ms,
            session_id=session_id,
        )

    def _log(self, event_type: str, details: dict[str, Any]) -> None:
        context = self.session.log_context() if self.session is not None else {}
        log_event({
            "ts_ms": _now_ms(),
            "event_type": event_type,
            **context,
            **details,
        })
