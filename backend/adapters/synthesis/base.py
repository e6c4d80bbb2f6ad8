"""
Speech synthesis adapter contract.

This module defines the *interface only*. Serialization of utterances
(single-flight speech) is owned by the feedback coordinator's speech
channel, not by adapters.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class SynthesisAdapter(ABC):
    """
    Abstract interface for a host speech-synthesis engine.

    Contract:
    - Best effort: failures must not affect interpreter state.
    - speak() returns once the utterance has been handed to the engine;
      it does not wait for playback to finish. The host reports
      completion separately (utterance_id).
    """

    @abstractmethod
    async def speak(self, *, utterance_id: int, text: str, locale_tag: str) -> None:
        """Start vocalizing text in the given speech locale."""
        raise NotImplementedError

    @abstractmethod
    async def cancel(self) -> None:
        """
        Stop any utterance currently playing.

        MUST be idempotent; a no-op when nothing is playing.
        """
        raise NotImplementedError
