"""
Browser-backed speech recognition.

The engine itself runs in the client (Web Speech API). This adapter only
turns start/stop/abort into control messages; results come back as
RECOGNITION_RESULT / RECOGNITION_ERROR / RECOGNITION_END messages that
the gateway converts into session-scoped events.
"""

from __future__ import annotations

from typing import Any, Callable

from adapters.recognition.base import RecognitionAdapter


class BrowserRecognitionAdapter(RecognitionAdapter):
    """Single-utterance recognition delegated to the connected client."""

    def __init__(self, *, send: Callable[[dict[str, Any]], None]) -> None:
        self._send = send

    async def start(self, *, session_id: int, locale_tag: str) -> None:
        self._send({
            "type": "RECOGNITION_START",
            "session_id": session_id,
            "lang": locale_tag,
            "interim_results": True,
            "continuous": False,
        })

    async def stop(self, session_id: int) -> None:
        self._send({"type": "RECOGNITION_STOP", "session_id": session_id})

    async def abort(self, session_id: int) -> None:
        self._send({"type": "RECOGNITION_ABORT", "session_id": session_id})
