import logging
from typing import Dict, Optional, Set

from fastapi import WebSocket
from fastapi.encoders import jsonable_encoder
from starlette.websockets import WebSocketState

logger = logging.getLogger(__name__)


class RoomBroadcaster:
    """Very small in-memory fan-out of chat events to room sockets (single-process)."""

    def __init__(self) -> None:
        # room_id -> connected sockets
        self._connections: Dict[str, Set[WebSocket]] = {}

    def subscribe(self, room_id: str, websocket: WebSocket) -> None:
        self._connections.setdefault(room_id, set()).add(websocket)

    def unsubscribe(self, room_id: str, websocket: WebSocket) -> None:
        sockets = self._connections.get(room_id)
        if not sockets:
            return
        sockets.discard(websocket)
        if not sockets:
            # clean up key
            self._connections.pop(room_id, None)

    def connection_count(self, room_id: str) -> int:
        return len(self._connections.get(room_id, ()))

    async def notify(self, room_id: str, event: str, payload: dict, exclude: Optional[WebSocket] = None) -> None:
        """Send ``{"event", **payload}`` to every socket in the room; drop sockets that fail"""
        message = jsonable_encoder({"event": event, **payload})
        dead = []
        for websocket in list(self._connections.get(room_id, ())):
            if exclude is not None and websocket is exclude:
                continue
            if websocket.client_state != WebSocketState.CONNECTED:
                dead.append(websocket)
                continue
            try:
                await websocket.send_json(message)
            except (RuntimeError, OSError) as e:
                logger.warning(f"Dropping chat socket in room {room_id}: {e}")
                dead.append(websocket)
        for websocket in dead:
            self.unsubscribe(room_id, websocket)


broadcaster = RoomBroadcaster()
