"""WebSocket connection manager for real-time alert events."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field

from fastapi import WebSocket

logger = logging.getLogger(__name__)


@dataclass
class Subscriber:
    websocket: WebSocket
    # None means every house (staff)
    house_ids: set[str] | None = field(default=None)

    def wants(self, house_id: str) -> bool:
        return self.house_ids is None or house_id in self.house_ids


class ConnectionManager:
    def __init__(self):
        self._subscribers: list[Subscriber] = []

    async def connect(self, websocket: WebSocket, house_ids: set[str] | None) -> Subscriber:
        await websocket.accept()
        sub = Subscriber(websocket=websocket, house_ids=house_ids)
        self._subscribers.append(sub)
        return sub

    def disconnect(self, sub: Subscriber):
        if sub in self._subscribers:
            self._subscribers.remove(sub)

    @property
    def connection_count(self) -> int:
        return len(self._subscribers)

    async def broadcast(self, house_id: str, message: dict):
        """Send a JSON message to every subscriber allowed to see ``house_id``."""
        dead = []
        for sub in list(self._subscribers):
            if not sub.wants(house_id):
                continue
            try:
                await sub.websocket.send_text(json.dumps(message, default=str))
            except Exception:
                dead.append(sub)
        for sub in dead:
            logger.debug("Dropping dead websocket subscriber")
            self.disconnect(sub)


ws_manager = ConnectionManager()
