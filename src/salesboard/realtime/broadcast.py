"""
WebSocket connection registry and best-effort event fan-out.

Every mutating operation announces itself to the connected TV displays with
a ``{"type": ..., "data": ...}`` envelope. Delivery is at-most-once: closed
or broken connections are skipped and dropped, nothing is queued or
replayed, and clients re-fetch the dashboard when notified.
"""

import json
import logging
from decimal import Decimal
from typing import Any, List, Set

from fastapi.encoders import jsonable_encoder
from fastapi.websockets import WebSocket, WebSocketState

logger = logging.getLogger(__name__)


def jsonable(data: Any) -> Any:
    """Convert domain objects to JSON-compatible data.

    Decimals become strings so money never passes through a float.
    """
    return jsonable_encoder(data, custom_encoder={Decimal: str})


def encode_event(event_type: str, data: Any = None) -> str:
    """Serialize one event envelope."""
    return json.dumps(jsonable({"type": event_type, "data": data}))


class BroadcastHub:
    """Holds the open display connections and pushes events to all of them."""

    def __init__(self) -> None:
        self._connections: Set[WebSocket] = set()

    def register(self, websocket: WebSocket) -> None:
        """Start delivering events to a connection."""
        self._connections.add(websocket)
        logger.info(
            "Display connected. Total connections: %d", len(self._connections)
        )

    def unregister(self, websocket: WebSocket) -> None:
        """Stop delivering events to a connection. Unknown connections are ignored."""
        if websocket in self._connections:
            self._connections.discard(websocket)
            logger.info(
                "Display disconnected. Remaining connections: %d", len(self._connections)
            )

    @property
    def connection_count(self) -> int:
        return len(self._connections)

    async def broadcast(self, event_type: str, data: Any = None) -> int:
        """
        Send one event to every open connection.

        Args:
            event_type: Event name, e.g. "sale_created"
            data: Event payload (domain dataclasses, dicts, lists)

        Returns:
            Number of connections the message was delivered to
        """
        message = encode_event(event_type, data)

        # Copy so connects/disconnects during the awaits below are safe
        connections = list(self._connections)
        disconnected: List[WebSocket] = []
        delivered = 0

        for websocket in connections:
            if websocket.client_state == WebSocketState.DISCONNECTED:
                disconnected.append(websocket)
                continue
            if websocket.client_state != WebSocketState.CONNECTED:
                continue
            try:
                await websocket.send_text(message)
                delivered += 1
            except Exception as e:
                logger.debug("Dropping display connection after send failure: %s", e)
                disconnected.append(websocket)

        for websocket in disconnected:
            self._connections.discard(websocket)

        logger.debug(
            "Broadcast %s to %d/%d connections", event_type, delivered, len(connections)
        )
        return delivered
