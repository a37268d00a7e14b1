"""Push "recount your badge" hints to a user's open WebSockets."""
from __future__ import annotations

import asyncio
import json
import logging

from fastapi import WebSocket, WebSocketDisconnect

logger = logging.getLogger(__name__)

REFRESH_PAYLOAD: dict[str, object] = {"type": "notifications.refresh"}


class RefreshStreamManager:
    """Sockets grouped by user id; sends never raise into the publisher."""

    def __init__(self) -> None:
        self._sockets: dict[str, set[WebSocket]] = {}
        self._owner: dict[WebSocket, str] = {}
        self._lock = asyncio.Lock()

    async def connect(self, user_id: str, websocket: WebSocket) -> None:
        await websocket.accept()
        async with self._lock:
            self._sockets.setdefault(user_id, set()).add(websocket)
            self._owner[websocket] = user_id
        logger.debug("Refresh socket attached | user_id=%s open=%d", user_id, self.connection_count(user_id))

    async def disconnect(self, websocket: WebSocket) -> None:
        async with self._lock:
            user_id = self._owner.pop(websocket, None)
            if user_id is None:
                return
            remaining = self._sockets.get(user_id, set())
            remaining.discard(websocket)
            if not remaining:
                self._sockets.pop(user_id, None)

    def connection_count(self, user_id: str) -> int:
        return len(self._sockets.get(user_id, ()))

    async def send(self, user_id: str, payload: dict[str, object]) -> int:
        """Send ``payload`` to every socket of ``user_id``; returns how many got it."""

        async with self._lock:
            targets = list(self._sockets.get(user_id, ()))
        if not targets:
            return 0
        message = json.dumps(payload, default=str)
        delivered = 0
        for websocket in targets:
            try:
                await websocket.send_text(message)
            except (WebSocketDisconnect, RuntimeError):
                logger.debug("Dropping dead refresh socket | user_id=%s", user_id)
                await self.disconnect(websocket)
            else:
                delivered += 1
        return delivered

    async def push_refresh(self, user_id: str) -> int:
        return await self.send(user_id, REFRESH_PAYLOAD)


refresh_stream = RefreshStreamManager()


__all__ = ["REFRESH_PAYLOAD", "RefreshStreamManager", "refresh_stream"]
