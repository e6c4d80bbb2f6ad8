"""
Route registration for the voice command interpreter API.

Responsibilities:
- Define HTTP and WebSocket endpoints
- Wire gateway to WebSocket lifecycle
- Pull dependencies from app.state
"""

from __future__ import annotations

import asyncio
import json

from fastapi import FastAPI, WebSocket, WebSocketDisconnect

from observability.logger import log_event
from session.gateway import GatewayResult, SessionGateway


def register_routes(app: FastAPI) -> None:
    """Register all routes on the FastAPI app."""
    @app.get("/health")
    async def health() -> dict[str, str]: # pyright: ignore[reportUnusedFunction]
        return {"status": "ok"}

    @app.websocket("/ws")
    async def websocket_endpoint(ws: WebSocket) -> None: # pyright: ignore[reportUnusedFunction]
        await ws.accept()

        gateway = SessionGateway(
            config=app.state.config,
            catalog=app.state.catalog,
            navigation_rules=app.state.navigation_rules,
        )

        # Serializes drain+send so the receive loop and the pump never
        # reorder outbound messages.
        send_lock = asyncio.Lock()
        pump: asyncio.Task[None] | None = None

        try:
            async with send_lock:
                result = await gateway.on_ws_connect()
                await _flush_gateway_result(ws, result)

            pump = asyncio.create_task(_pump_outbound(ws, gateway, send_lock))

            while True:
                text = await ws.receive_text()
                async with send_lock:
                    result = await gateway.on_json_message(text)
                    await _flush_gateway_result(ws, result)

        except WebSocketDisconnect:
            await _stop_pump(pump)
            await gateway.on_ws_disconnect(reason="client_disconnect")

        except Exception as exc:  # pylint: disable=broad-exception-caught
            log_event({
                "event_type": "WS_FATAL_ERROR",
                "connection_id": gateway.session.connection_id if gateway.session else None,
                "exception": type(exc).__name__,
                "message": str(exc),
            })
            await _stop_pump(pump)
            await gateway.on_ws_disconnect(reason="server_error")


async def _pump_outbound(
    ws: WebSocket,
    gateway: SessionGateway,
    send_lock: asyncio.Lock,
) -> None:
    """
    Deliver control messages produced outside the receive loop
    (finished dispatches, timers).
    """
    while True:
        await gateway.wait_outbound()
        async with send_lock:
            await _flush_gateway_result(ws, GatewayResult(outbound_json=gateway.drain_outbound()))


async def _stop_pump(pump: asyncio.Task[None] | None) -> None:
    if pump is None:
        return
    pump.cancel()
    await asyncio.gather(pump, return_exceptions=True)


async def _flush_gateway_result(
    ws: WebSocket,
    result: GatewayResult,
) -> None:
    for msg in result.outbound_json:
        await ws.send_text(json.dumps(msg))
