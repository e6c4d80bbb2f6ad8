"""
Speech recognition adapter contract.

This module defines the *interface only*: no state machine, no intent
resolution, no feedback.

Key invariants:
- Session IDs are owned by the capture session reducer. Adapters never
  generate or mutate session IDs.
- The adapter (or the host behind it) reports engine output as events
  into the capture session's event sink; it never makes state
  transitions itself.
- Every started session ends with exactly one RecognitionEnded event,
  whether it finished, failed, was stopped or was aborted.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class RecognitionAdapter(ABC):
    """
    Abstract interface for a host speech-recognition engine.

    Implementations are responsible for:
    - Starting a single-utterance recognition for a session_id
    - Reporting interim/final transcripts, errors and end-of-session
      tagged with that session_id
    - Supporting graceful stop() and hard abort()

    Non-responsibilities:
    - No listening timeouts (the engine ends on silence by itself)
    - No interpretation of transcripts
    - No direct interaction with UI
    """

    @abstractmethod
    async def start(self, *, session_id: int, locale_tag: str) -> None:
        """
        Begin listening for the given session.

        Raises:
            RecognitionError if the engine refuses to start.
        """
        raise NotImplementedError

    @abstractmethod
    async def stop(self, session_id: int) -> None:
        """
        Request graceful termination of the session.

        Contract:
        - MUST be idempotent.
        - If session_id is unknown or already complete, stop() is a no-op.
        """
        raise NotImplementedError

    @abstractmethod
    async def abort(self, session_id: int) -> None:
        """
        Hard abort: any transcript not yet finalized is discarded.

        Contract:
        - MUST be idempotent.
        - After abort, the adapter must stop emitting transcripts for
          that session_id as quickly as possible.
        """
        raise NotImplementedError
