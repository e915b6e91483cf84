"""Tests for the display broadcast hub."""

import asyncio
import json
from datetime import datetime
from decimal import Decimal

from fastapi.websockets import WebSocketState

from salesboard.realtime.broadcast import BroadcastHub, encode_event


class FakeWebSocket:
    """Stands in for a WebSocket: records sent text, optionally fails."""

    def __init__(self, state=WebSocketState.CONNECTED, fail=False):
        self.client_state = state
        self.fail = fail
        self.sent = []

    async def send_text(self, message):
        if self.fail:
            raise RuntimeError("connection reset")
        self.sent.append(message)


def test_encode_event_envelope():
    message = encode_event(
        "sale_created",
        {"amount": Decimal("12.50"), "created_at": datetime(2024, 3, 1, 9, 30)},
    )

    assert json.loads(message) == {
        "type": "sale_created",
        "data": {"amount": "12.50", "created_at": "2024-03-01T09:30:00"},
    }


def test_encode_event_without_data():
    assert json.loads(encode_event("target_cycles_initialized")) == {
        "type": "target_cycles_initialized",
        "data": None,
    }


def test_broadcast_reaches_every_open_connection():
    hub = BroadcastHub()
    open_sockets = [FakeWebSocket() for _ in range(3)]
    closed = FakeWebSocket(state=WebSocketState.DISCONNECTED)
    for websocket in [*open_sockets, closed]:
        hub.register(websocket)

    delivered = asyncio.run(hub.broadcast("sale_created", {"id": 7}))

    assert delivered == 3
    payloads = {ws.sent[0] for ws in open_sockets}
    assert len(payloads) == 1
    assert json.loads(payloads.pop()) == {"type": "sale_created", "data": {"id": 7}}
    assert closed.sent == []
    assert hub.connection_count == 3


def test_broadcast_drops_connection_that_fails_to_send():
    hub = BroadcastHub()
    healthy = FakeWebSocket()
    broken = FakeWebSocket(fail=True)
    hub.register(healthy)
    hub.register(broken)

    delivered = asyncio.run(hub.broadcast("team_updated", {"id": 1}))

    assert delivered == 1
    assert hub.connection_count == 1
    assert len(healthy.sent) == 1


def test_broadcast_skips_connections_still_connecting():
    hub = BroadcastHub()
    connecting = FakeWebSocket(state=WebSocketState.CONNECTING)
    hub.register(connecting)

    delivered = asyncio.run(hub.broadcast("agent_created", {"id": 2}))

    assert delivered == 0
    assert connecting.sent == []
    assert hub.connection_count == 1


def test_broadcast_with_no_connections():
    hub = BroadcastHub()
    assert asyncio.run(hub.broadcast("sale_deleted", {"id": 1})) == 0


def test_unregister_unknown_connection_is_ignored():
    hub = BroadcastHub()
    hub.unregister(FakeWebSocket())
    assert hub.connection_count == 0
