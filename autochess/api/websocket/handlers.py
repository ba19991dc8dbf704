"""
WebSocket handlers for real-time combat streaming.
"""

from typing import Any, Dict, List
from fastapi import WebSocket


class WebSocketManager:
    """Manage WebSocket connections grouped by channel."""

    def __init__(self):
        self.active_connections: Dict[str, List[WebSocket]] = {}

    async def connect(self, websocket: WebSocket, channel: str):
        """Connect a client to a channel."""
        await websocket.accept()
        if channel not in self.active_connections:
            self.active_connections[channel] = []
        self.active_connections[channel].append(websocket)

    def disconnect(self, websocket: WebSocket, channel: str):
        """Disconnect a client from a channel."""
        if channel in self.active_connections:
            if websocket in self.active_connections[channel]:
                self.active_connections[channel].remove(websocket)
            if not self.active_connections[channel]:
                del self.active_connections[channel]

    async def broadcast(self, channel: str, message: Dict[str, Any]):
        """Send a message to every client watching a channel."""
        for connection in list(self.active_connections.get(channel, [])):
            await connection.send_json(message)

    def channel_size(self, channel: str) -> int:
        return len(self.active_connections.get(channel, []))


manager = WebSocketManager()
