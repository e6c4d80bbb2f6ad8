"""
Multi-modal feedback.

Responsibilities:
- Build user-facing feedback from message keys (translation injected)
- Render a visual notification for every feedback event
- Vocalize feedback through a single-slot speech channel

Non-responsibilities:
- No intent logic
- No session state
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional

from adapters.synthesis.base import SynthesisAdapter
from constants import DESTINATION_LABELS
from interpreter.collaborators import HostCapabilities, LocaleSource, Notifier
from interpreter.enums.tone import Tone
from interpreter.locale_adapter import resolve_speech_locale
from observability.logger import log_event


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


# =============================================================================
# Feedback event
# =============================================================================

@dataclass(frozen=True)
class FeedbackEvent:
    """Ephemeral feedback, consumed immediately by the coordinator."""
    title: str
    message: str
    tone: Tone
    speak_text: str

    def to_log(self) -> dict[str, Any]:
        return {"title": self.title, "message": self.message, "tone": self.tone.value}


# =============================================================================
# Messages
# =============================================================================

DEFAULT_MESSAGES: Mapping[str, str] = {
    "voice.command": "Voice command",
    "voice.navigating": "Navigating to {destination}",
    "voice.searching": "Searching for {query}",
    "voice.addedToCartTitle": "Added to cart",
    "voice.addedToCart": "Added {product} to your cart",
    "voice.productNotFound": "Could not find \"{query}\" in the shop",
    "voice.cartFailed": "Could not add \"{query}\" to your cart",
    "voice.actionFailed": "Could not complete that command. Please try again.",
    "voice.notRecognized": "Command not recognized",
    "voice.tryAgain": "Try saying \"go to shop\" or \"add wheat seeds to cart\".",
    "voice.notSupported": "Voice not supported",
    "voice.browserNotSupported": "Your browser does not support speech recognition.",
    "voice.error": "Voice error",
    "voice.errorMessage": "Something went wrong while listening. Please try again.",
}

# key -> translated template, or None to keep the default
Translate = Callable[[str], Optional[str]]


class FeedbackMessages:
    """
    Builds FeedbackEvents from message keys.

    Templates use str.format placeholders. A translation that fails to
    format falls back to the default template.
    """

    def __init__(self, translate: Translate | None = None) -> None:
        self._translate = translate

    def text(self, key: str, **params: str) -> str:
        default = DEFAULT_MESSAGES[key]
        template = self._translate(key) if self._translate is not None else None
        if template:
            try:
                return template.format(**params)
            except (KeyError, IndexError, ValueError):
                pass
        return default.format(**params)

    def _event(self, title_key: str, message: str, tone: Tone) -> FeedbackEvent:
        return FeedbackEvent(
            title=self.text(title_key),
            message=message,
            tone=tone,
            speak_text=message,
        )

    # ------------------------------------------------------------------
    # Intent outcomes
    # ------------------------------------------------------------------

    def navigating(self, path: str) -> FeedbackEvent:
        destination = DESTINATION_LABELS.get(path, path)
        return self._event(
            "voice.command",
            self.text("voice.navigating", destination=destination),
            Tone.INFO,
        )

    def searching(self, query: str) -> FeedbackEvent:
        return self._event(
            "voice.command",
            self.text("voice.searching", query=query),
            Tone.INFO,
        )

    def added_to_cart(self, product_name: str) -> FeedbackEvent:
        return self._event(
            "voice.addedToCartTitle",
            self.text("voice.addedToCart", product=product_name),
            Tone.SUCCESS,
        )

    def product_not_found(self, query: str) -> FeedbackEvent:
        return self._event(
            "voice.command",
            self.text("voice.productNotFound", query=query),
            Tone.ERROR,
        )

    def cart_failed(self, query: str) -> FeedbackEvent:
        return self._event(
            "voice.command",
            self.text("voice.cartFailed", query=query),
            Tone.ERROR,
        )

    def action_failed(self) -> FeedbackEvent:
        return self._event("voice.command", self.text("voice.actionFailed"), Tone.ERROR)

    def not_recognized(self) -> FeedbackEvent:
        return self._event("voice.notRecognized", self.text("voice.tryAgain"), Tone.ERROR)

    # ------------------------------------------------------------------
    # Session failures
    # ------------------------------------------------------------------

    def not_supported(self) -> FeedbackEvent:
        return self._event(
            "voice.notSupported", self.text("voice.browserNotSupported"), Tone.ERROR
        )

    def recognition_error(self) -> FeedbackEvent:
        return self._event("voice.error", self.text("voice.errorMessage"), Tone.ERROR)


# =============================================================================
# Speech channel
# =============================================================================

class SpeechChannel:
    """
    Single-slot speech resource.

    Writing a new utterance cancels the active one first; nothing is
    ever queued. The host reports completion via finished(), which frees
    the slot only if the id is still the active utterance.
    """

    def __init__(self) -> None:
        self._next_id = 0
        self._active_id: int | None = None
        self._active_adapter: SynthesisAdapter | None = None

    @property
    def active_utterance(self) -> int | None:
        return self._active_id

    async def write(self, adapter: SynthesisAdapter, text: str, locale_tag: str) -> int:
        await self.cancel()

        self._next_id += 1
        utterance_id = self._next_id
        self._active_id = utterance_id
        self._active_adapter = adapter

        await adapter.speak(utterance_id=utterance_id, text=text, locale_tag=locale_tag)
        return utterance_id

    async def cancel(self) -> None:
        if self._active_id is None:
            return
        adapter = self._active_adapter
        self._active_id = None
        self._active_adapter = None
        if adapter is not None:
            await adapter.cancel()

    def finished(self, utterance_id: int) -> bool:
        """Mark an utterance complete. Returns False for stale ids."""
        if utterance_id != self._active_id:
            return False
        self._active_id = None
        self._active_adapter = None
        return True


# =============================================================================
# Coordinator
# =============================================================================

class FeedbackCoordinator:
    """
    Presents FeedbackEvents: toast always, speech when the host can.

    Absence of a synthesis engine degrades silently to visual-only.
    Synthesis failures are logged and never propagate.
    """

    def __init__(
        self,
        *,
        notifier: Notifier,
        host: HostCapabilities,
        locale_source: LocaleSource,
        connection_id: str | None = None,
        channel: SpeechChannel | None = None,
    ) -> None:
        self._notifier = notifier
        self._host = host
        self._locale_source = locale_source
        self._connection_id = connection_id
        self._channel = channel or SpeechChannel()

    @property
    def channel(self) -> SpeechChannel:
        return self._channel

    async def present(self, event: FeedbackEvent) -> None:
        try:
            self._notifier.notify(event.title, event.message, event.tone)
        except Exception as exc:  # pylint: disable=broad-exception-caught
            self._log("feedback_notify_failed", {"error": repr(exc)})

        synth = self._host.synthesis()
        if synth is None or not event.speak_text:
            self._log("feedback_presented", {**event.to_log(), "spoken": False})
            return

        locale_tag = resolve_speech_locale(self._locale_source.current_locale())
        try:
            utterance_id = await self._channel.write(synth, event.speak_text, locale_tag)
        except Exception as exc:  # pylint: disable=broad-exception-caught
            self._log("feedback_speech_failed", {"error": repr(exc)})
            return

        self._log(
            "feedback_presented",
            {**event.to_log(), "spoken": True, "utterance_id": utterance_id},
        )

    async def cancel_speech(self) -> None:
        try:
            await self._channel.cancel()
        except Exception as exc:  # pylint: disable=broad-exception-caught
            self._log("speech_cancel_failed", {"error": repr(exc)})

    def speech_finished(self, utterance_id: int) -> None:
        if not self._channel.finished(utterance_id):
            self._log("speech_end_stale", {"utterance_id": utterance_id})

    def _log(self, event_type: str, details: dict[str, Any]) -> None:
        log_event({
            "ts_ms": _now_ms(),
            "event_type": event_type,
            "connection_id": self._connection_id,
            **details,
        })
