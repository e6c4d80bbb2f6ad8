"""
Client-backed host.

The connected browser owns the speech engines, the router and the toast
surface. ClientHost exposes them to the interpreter through the
collaborator protocols, translating every call into a control message on
the session's outbound queue.

Capability flags and the application locale are whatever the client
last reported; they are read on every probe, never frozen.
"""

from __future__ import annotations

from typing import Any

from adapters.recognition.browser import BrowserRecognitionAdapter
from adapters.synthesis.browser import BrowserSynthesisAdapter
from interpreter.collaborators import Product
from interpreter.enums.tone import Tone
from interpreter.errors import NotSupportedError
from session.voice_session import VoiceSession


class ClientHost:
    """HostCapabilities + Navigator + Notifier + LocaleSource for one client."""

    def __init__(self, *, session: VoiceSession, default_locale: str) -> None:
        self._session = session
        self._locale = default_locale
        self._recognition_available = False
        self._synthesis_available = False

        self._recognizer = BrowserRecognitionAdapter(send=session.enqueue_control)
        self._synthesizer = BrowserSynthesisAdapter(send=session.enqueue_control)

    # ------------------------------------------------------------------
    # Client reports
    # ------------------------------------------------------------------

    def update_capabilities(
        self,
        *,
        recognition: bool | None = None,
        synthesis: bool | None = None,
    ) -> None:
        if recognition is not None:
            self._recognition_available = recognition
        if synthesis is not None:
            self._synthesis_available = synthesis

    def set_locale(self, locale: str) -> None:
        self._locale = locale

    def capabilities(self) -> dict[str, Any]:
        return {
            "recognition": self._recognition_available,
            "synthesis": self._synthesis_available,
            "locale": self._locale,
        }

    # ------------------------------------------------------------------
    # HostCapabilities
    # ------------------------------------------------------------------

    def recognition(self) -> BrowserRecognitionAdapter:
        if not self._recognition_available:
            raise NotSupportedError("client reported no speech recognition")
        return self._recognizer

    def synthesis(self) -> BrowserSynthesisAdapter | None:
        if not self._synthesis_available:
            return None
        return self._synthesizer

    # ------------------------------------------------------------------
    # LocaleSource
    # ------------------------------------------------------------------

    def current_locale(self) -> str:
        return self._locale

    # ------------------------------------------------------------------
    # Navigator / Notifier / transcript display / cart mirror
    # ------------------------------------------------------------------

    def navigate(self, path: str) -> None:
        self._session.enqueue_control({"type": "NAVIGATE", "path": path})

    def notify(self, title: str, message: str, tone: Tone) -> None:
        self._session.enqueue_control({
            "type": "NOTIFY",
            "title": title,
            "message": message,
            "tone": tone.value,
        })

    def publish_transcript(self, session_id: int, text: str, is_final: bool) -> None:
        self._session.enqueue_control({
            "type": "TRANSCRIPT",
            "session_id": session_id,
            "text": text,
            "is_final": is_final,
        })

    def cart_added(self, product: Product) -> None:
        self._session.enqueue_control({"type": "CART_ADD", "product": product.to_dict()})
