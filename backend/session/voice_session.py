"""
Voice session container.

- One WebSocket connection == one VoiceSession
- Owns connection status (mutable, gateway-controlled)
- Owns the outbound control queue shared by every collaborator that
  talks to the client
- Owned and mutated by SessionGateway
- NOT a state machine
- Contains no interpreter logic
"""

from __future__ import annotations

import asyncio
import time
from collections import deque
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from session.connection_status import ConnectionStatus

if TYPE_CHECKING:
    from interpreter.capture_session import SpeechCaptureSession
    from interpreter.feedback import FeedbackCoordinator
    from services.catalog_service import InMemoryCart
    from session.client_host import ClientHost


# ---------------------------------------------------------------------
# VoiceSession
# ---------------------------------------------------------------------


@dataclass
class VoiceSession:
    """Mutable runtime container for a single client connection."""

    # ------------------------------------------------------------------
    # Identity / lifecycle
    # ------------------------------------------------------------------

    connection_id: str
    created_at: float = field(default_factory=time.time)

    # ------------------------------------------------------------------
    # Connection / gateway-controlled state
    # ------------------------------------------------------------------

    connection_status: ConnectionStatus = ConnectionStatus.DOWN

    # ------------------------------------------------------------------
    # Interpreter wiring (attached by SessionGateway)
    # ------------------------------------------------------------------

    host: ClientHost | None = None
    cart: InMemoryCart | None = None
    feedback: FeedbackCoordinator | None = None
    capture: SpeechCaptureSession | None = None

    def __post_init__(self) -> None:
        self._control_out: deque[dict[str, Any]] = deque()
        self._control_ready = asyncio.Event()

    # ------------------------------------------------------------------
    # Observability helpers (read-only)
    # ------------------------------------------------------------------

    def log_context(self) -> dict[str, Any]:
        """Standard logging context for this connection."""
        return {
            "connection_id": self.connection_id,
            "connection_status": self.connection_status.value,
        }

    # ------------------------------------------------------------------
    # Outbound control queue
    # ------------------------------------------------------------------

    def enqueue_control(self, msg: dict[str, Any]) -> None:
        """
        Enqueue a control message for gateway delivery to the client.

        Messages are buffered in FIFO order and later retrieved via
        drain_control(). Messages enqueued after disconnect are dropped.
        """
        if self.connection_status is ConnectionStatus.DOWN:
            return
        self._control_out.append(msg)
        self._control_ready.set()

    def drain_control(self) -> tuple[dict[str, Any], ...]:
        """
        Atomically drain all pending control messages.

        Returns:
            A FIFO-ordered tuple of control messages. Returns an empty
            tuple if no messages are pending.

        After this call, the control queue is empty.
        """
        self._control_ready.clear()
        if not self._control_out:
            return ()
        out = tuple(self._control_out)
        self._control_out.clear()
        return out

    async def wait_control(self) -> None:
        """Block until at least one control message is pending."""
        while not self._control_out:
            self._control_ready.clear()
            await self._control_ready.wait()
