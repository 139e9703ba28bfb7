from __future__ import annotations

import asyncio
import logging

from fastapi import WebSocket


logger = logging.getLogger(__name__)


class ConnectionManager:
    def __init__(self) -> None:
        self._connections: set[WebSocket] = set()
        self._lock = asyncio.Lock()

    async def connect(self, websocket: WebSocket) -> None:
        async with self._lock:
            self._connections.add(websocket)

    async def disconnect(self, websocket: WebSocket) -> None:
        async with self._lock:
            self._connections.discard(websocket)

    async def broadcast(self, message: dict) -> None:
        async with self._lock:
            sockets = list(self._connections)
        for ws in sockets:
            try:
                await ws.send_json(message)
            except Exception:
                logger.info("Dropping websocket after failed send")
                await self.disconnect(ws)


manager = ConnectionManager()
