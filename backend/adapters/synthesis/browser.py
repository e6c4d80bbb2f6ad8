"""
Browser-backed speech synthesis (speechSynthesis in the client).

The client answers every SPEAK with a SPEECH_END carrying the same
utterance_id once playback finishes or is cancelled.
"""

from __future__ import annotations

from typing import Any, Callable

from adapters.synthesis.base import SynthesisAdapter


class BrowserSynthesisAdapter(SynthesisAdapter):

    def __init__(self, *, send: Callable[[dict[str, Any]], None]) -> None:
        self._send = send

    async def speak(self, *, utterance_id: int, text: str, locale_tag: str) -> None:
        self._send({
            "type": "SPEAK",
            "utterance_id": utterance_id,
            "text": text,
            "lang": locale_tag,
        })

    async def cancel(self) -> None:
        self._send({"type": "SPEECH_CANCEL"})
