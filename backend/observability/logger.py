"""
JSONL event logger for interpreter, dispatcher and gateway decisions.

- One JSON object per line on stdout, flushed immediately
- Switched off process-wide with ENABLE_JSON_LOGS=0 (see configure())
- Never raises into the caller
"""

from __future__ import annotations

import json
import sys
from typing import Any, Mapping, Callable


# ------------------------------------------------------------------
# Explicit output sink (patchable in tests)
# ------------------------------------------------------------------

def _stdout_print(line: str) -> None:
    sys.stdout.write(line + "\n")
    sys.stdout.flush()

_print: Callable[[str], None] = _stdout_print

_enabled: bool = True


def configure(*, enabled: bool) -> None:
    """Enable or disable JSONL output (ENABLE_JSON_LOGS)."""
    global _enabled  # pylint: disable=global-statement
    _enabled = enabled


def log_event(event: Mapping[str, Any]) -> None:
    """
    Write a single JSONL event to stdout.

    The caller is responsible for:
    - Supplying a fully-formed event dict
    - Including ts_ms, session_id, state, etc.

    This function:
    - Serializes to JSON
    - Writes exactly one line
    - Flushes immediately (no buffering)
    - Never raises
    """
    if not _enabled:
        return

    try:
        line = json.dumps(event, ensure_ascii=False, separators=(",", ":"))
    except (TypeError, ValueError) as e:
        # Last-resort fallback: logging must never crash the runtime
        fallback: dict[str, Any] = {
            "ts_ms": event.get("ts_ms"),
            "event_type": "LOGGER_SERIALIZATION_ERROR",
            "error": str(e),
            "original_event_repr": repr(event),
        }
        line = json.dumps(fallback, ensure_ascii=False, separators=(",", ":"))

    _print(line)
