# pylint: disable=missing-module-docstring,missing-function-docstring

import json
from typing import Any

import pytest

from observability import logger


@pytest.fixture
def captured(monkeypatch: pytest.MonkeyPatch) -> list[str]:
    lines: list[str] = []
    # Patch the explicit output sink used by logger
    monkeypatch.setattr(logger, "_print", lines.append)
    monkeypatch.setattr(logger, "_enabled", True)
    return lines


def test_log_event_emits_valid_jsonl(captured: list[str]) -> None:
    """
    Contract:
    - log_event emits exactly one JSONL line
    - payload is serialized as-is
    - output sink is patchable
    """
    payload: dict[str, Any] = {
        "event_type": "intent_resolved",
        "session_id": 3,
        "details": {"text": "go to shop"},
    }

    logger.log_event(payload)

    assert len(captured) == 1
    assert "\n" not in captured[0]
    assert json.loads(captured[0]) == payload


def test_unserializable_event_falls_back_without_raising(captured: list[str]) -> None:
    logger.log_event({"ts_ms": 5, "event_type": "X", "blob": object()})

    decoded = json.loads(captured[0])
    assert decoded["event_type"] == "LOGGER_SERIALIZATION_ERROR"
    assert decoded["ts_ms"] == 5


def test_disabled_logger_writes_nothing(
    captured: list[str],
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setattr(logger, "_enabled", True)
    logger.configure(enabled=False)
    logger.log_event({"event_type": "X"})

    assert captured == []
