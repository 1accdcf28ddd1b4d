"""
WebSocket fan-out.

Every text message a client sends is forwarded verbatim to every other
connected client. There is no session state and no merge logic; a client
whose send fails is dropped without affecting the others.
"""

import asyncio
from typing import List

import structlog
from fastapi import APIRouter, WebSocket, WebSocketDisconnect

logger = structlog.get_logger()

router = APIRouter(tags=["realtime"])


class ConnectionManager:
    """Tracks open sockets and broadcasts between them."""

    def __init__(self) -> None:
        self.connections: List[WebSocket] = []

    async def connect(self, websocket: WebSocket) -> None:
        await websocket.accept()
        self.connections.append(websocket)
        logger.info("WebSocket client connected", clients=len(self.connections))

    def disconnect(self, websocket: WebSocket) -> None:
        if websocket in self.connections:
            self.connections.remove(websocket)
            logger.info("WebSocket client disconnected", clients=len(self.connections))

    async def broadcast(self, message: str, sender: WebSocket) -> int:
        """Send ``message`` to every client except ``sender``.

        Returns the number of clients that received it.
        """
        targets = [ws for ws in self.connections if ws is not sender]
        results = await asyncio.gather(
            *(ws.send_text(message) for ws in targets), return_exceptions=True
        )
        delivered = 0
        for ws, result in zip(targets, results):
            if isinstance(result, Exception):
                logger.warning("Dropping WebSocket client after failed send", error=str(result))
                self.disconnect(ws)
            else:
                delivered += 1
        return delivered


@router.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket) -> None:
    manager: ConnectionManager = websocket.app.state.connections
    await manager.connect(websocket)
    try:
        while True:
            event = await websocket.receive()
            if event["type"] == "websocket.disconnect":
                break
            message = event.get("text")
            if message is None:
                message = (event.get("bytes") or b"").decode("utf-8", errors="replace")
            await manager.broadcast(message, sender=websocket)
    except WebSocketDisconnect:
        pass
    finally:
        manager.disconnect(websocket)
