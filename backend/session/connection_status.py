"""
Connection status tracking for voice sessions.

Connection lifecycle is tracked separately from the capture session
state machine: a session can be IDLE with either status.
"""
from enum import Enum

class ConnectionStatus(Enum):
    """Owned by SessionGateway, never by interpreter state."""
    DOWN = "DOWN"   # Not connected (before accept, after disconnect)
    UP = "UP"       # Active WebSocket connection
