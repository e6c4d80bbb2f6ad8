"""
Session gateway protocol tests.

The client is simulated by feeding JSON messages and reading the
outbound control messages the gateway hands back.
"""

from __future__ import annotations

import asyncio
import json
from typing import Any

import pytest

import session.gateway as gateway_mod
from config import AppConfig
from interpreter.enums.state import State
from observability import logger
from services.catalog_service import InMemoryCatalog
from session.connection_status import ConnectionStatus
from session.gateway import SessionGateway


@pytest.fixture(autouse=True)
def _quiet_logs(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(logger, "_print", lambda line: None)


def _gateway() -> SessionGateway:
    return SessionGateway(config=AppConfig(), catalog=InMemoryCatalog())


async def _send(gw: SessionGateway, **msg: Any) -> tuple[dict[str, Any], ...]:
    result = await gw.on_json_message(json.dumps(msg))
    return result.outbound_json


def _types(msgs: tuple[dict[str, Any], ...]) -> list[str]:
    return [m["type"] for m in msgs]


async def _capable_gateway(locale: str = "en") -> SessionGateway:
    gw = _gateway()
    await gw.on_ws_connect()
    await _send(gw, type="CAPABILITIES", recognition=True, synthesis=True)
    await _send(gw, type="LOCALE", locale=locale)
    return gw


def test_connect_sends_session_init() -> None:
    async def scenario() -> None:
        gw = _gateway()
        result = await gw.on_ws_connect()

        assert gw.session is not None
        assert gw.session.connection_status is ConnectionStatus.UP
        assert result.outbound_json[0]["type"] == "SESSION_INIT"
        assert result.outbound_json[0]["connection_id"] == gw.session.connection_id

    asyncio.run(scenario())


def test_listen_start_requests_recognition_in_speech_locale() -> None:
    async def scenario() -> None:
        gw = await _capable_gateway(locale="hi")
        out = await _send(gw, type="LISTEN_START")

        assert out[0] == {
            "type": "RECOGNITION_START",
            "session_id": 1,
            "lang": "hi-IN",
            "interim_results": True,
            "continuous": False,
        }

    asyncio.run(scenario())


def test_listen_start_without_capabilities_notifies_not_supported() -> None:
    async def scenario() -> None:
        gw = _gateway()
        await gw.on_ws_connect()
        out = await _send(gw, type="LISTEN_START")

        assert _types(out) == ["NOTIFY"]
        assert out[0]["title"] == "Voice not supported"
        assert out[0]["tone"] == "error"

    asyncio.run(scenario())


def test_spoken_navigation_round_trip() -> None:
    async def scenario() -> None:
        gw = await _capable_gateway()
        await _send(gw, type="LISTEN_START")

        out = await _send(gw, type="RECOGNITION_RESULT", session_id=1, text="go to", is_final=False)
        assert out == ({"type": "TRANSCRIPT", "session_id": 1, "text": "go to", "is_final": False},)

        out = await _send(gw, type="RECOGNITION_RESULT", session_id=1, text="go to cart", is_final=True)
        assert _types(out) == ["TRANSCRIPT"]

        assert gw.session is not None and gw.session.capture is not None
        await gw.session.capture.wait_idle()
        out = gw.drain_outbound()

        assert _types(out) == ["NAVIGATE", "NOTIFY", "SPEAK"]
        assert out[0]["path"] == "/cart"
        assert out[2] == {
            "type": "SPEAK",
            "utterance_id": 1,
            "text": "Navigating to cart",
            "lang": "en-US",
        }

        await _send(gw, type="SPEECH_END", utterance_id=1)
        assert gw.session.feedback is not None
        assert gw.session.feedback.channel.active_utterance is None

        out = await _send(gw, type="RECOGNITION_END", session_id=1)
        assert out == ()
        assert gw.session.capture.state.state is State.IDLE

    asyncio.run(scenario())


def test_add_to_cart_is_mirrored_to_client() -> None:
    async def scenario() -> None:
        gw = await _capable_gateway()
        await _send(gw, type="LISTEN_START")
        await _send(gw, type="RECOGNITION_RESULT", session_id=1,
                    text="add wheat seeds to cart", is_final=True)

        await asyncio.wait_for(gw.wait_outbound(), timeout=1.0)
        assert gw.session is not None and gw.session.capture is not None
        await gw.session.capture.wait_idle()
        out = gw.drain_outbound()

        assert _types(out)[0] == "CART_ADD"
        assert out[0]["product"]["id"] == "p-001"
        assert gw.session.cart is not None
        assert gw.session.cart.quantity("p-001") == 1

    asyncio.run(scenario())


def test_recognition_error_notifies_client() -> None:
    async def scenario() -> None:
        gw = await _capable_gateway()
        await _send(gw, type="LISTEN_START")
        out = await _send(gw, type="RECOGNITION_ERROR", session_id=1, error="network")

        assert "NOTIFY" in _types(out)
        assert gw.session is not None and gw.session.capture is not None
        assert gw.session.capture.state.state is State.ERROR
        assert gw.session.capture.state.last_error == "network"

    asyncio.run(scenario())


def test_stale_recognition_result_is_dropped() -> None:
    async def scenario() -> None:
        gw = await _capable_gateway()
        await _send(gw, type="LISTEN_START")
        out = await _send(gw, type="LISTEN_START")
        assert _types(out) == ["RECOGNITION_ABORT", "RECOGNITION_START"]

        out = await _send(gw, type="RECOGNITION_RESULT", session_id=1, text="go home", is_final=True)
        assert out == ()

    asyncio.run(scenario())


def test_stop_and_cancel_messages() -> None:
    async def scenario() -> None:
        gw = await _capable_gateway()
        await _send(gw, type="LISTEN_START")
        out = await _send(gw, type="LISTEN_STOP")
        assert out == ({"type": "RECOGNITION_STOP", "session_id": 1},)

        await _send(gw, type="LISTEN_START")
        out = await _send(gw, type="LISTEN_CANCEL")
        assert _types(out) == ["RECOGNITION_ABORT"]

    asyncio.run(scenario())


def test_protocol_errors_are_logged_and_ignored(monkeypatch: pytest.MonkeyPatch) -> None:
    emitted: list[dict[str, Any]] = []
    monkeypatch.setattr(gateway_mod, "log_event", emitted.append)

    async def scenario() -> None:
        gw = await _capable_gateway()

        assert (await gw.on_json_message("{nope")).outbound_json == ()
        assert await _send(gw, type="WAVE_HELLO") == ()
        assert await _send(gw, type="RECOGNITION_RESULT", text="go home") == ()
        assert (await gw.on_json_message("[1, 2]")).outbound_json == ()

    asyncio.run(scenario())

    kinds = [e["event_type"] for e in emitted]
    assert "JSON_DECODE_ERROR" in kinds
    assert "UNKNOWN_MESSAGE_TYPE" in kinds
    assert kinds.count("INVALID_MESSAGE") == 2


def test_message_before_connect_is_logged(monkeypatch: pytest.MonkeyPatch) -> None:
    emitted: list[dict[str, Any]] = []
    monkeypatch.setattr(gateway_mod, "log_event", emitted.append)

    result = asyncio.run(_gateway().on_json_message('{"type": "LISTEN_START"}'))

    assert result.outbound_json == ()
    assert emitted[0]["event_type"] == "MESSAGE_WITHOUT_SESSION"


def test_disconnect_tears_session_down() -> None:
    async def scenario() -> None:
        gw = await _capable_gateway()
        await _send(gw, type="LISTEN_START")
        await gw.on_ws_disconnect(reason="client_disconnect")

        assert gw.session is not None and gw.session.capture is not None
        assert gw.session.connection_status is ConnectionStatus.DOWN
        assert gw.session.capture.state.state is State.IDLE

        gw.session.enqueue_control({"type": "NAVIGATE", "path": "/"})
        assert gw.drain_outbound() == ()

    asyncio.run(scenario())
