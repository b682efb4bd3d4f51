# stockwatch/services/websockets/manager.py
import asyncio
import json
import logging
from typing import List, Set

from fastapi import WebSocket

from stockwatch.schemas.stock_alert import StockWarning

logger = logging.getLogger(__name__)

class ConnectionManager:
    """Dashboard WebSocket clients that receive low-stock warnings"""

    def __init__(self):
        self.active_connections: List[WebSocket] = []
        self._pending: Set[asyncio.Task] = set()

    async def connect(self, websocket: WebSocket):
        await websocket.accept()
        self.active_connections.append(websocket)
        logger.info(f"WebSocket connected. Total connections: {len(self.active_connections)}")

    def disconnect(self, websocket: WebSocket):
        if websocket in self.active_connections:
            self.active_connections.remove(websocket)
        logger.info(f"WebSocket disconnected. Total connections: {len(self.active_connections)}")

    async def broadcast(self, message: dict):
        """Broadcast message to all connected clients"""
        json_message = json.dumps(message)
        disconnected = []

        for connection in self.active_connections:
            try:
                await connection.send_text(json_message)
            except Exception as e:
                logger.error(f"Error sending to WebSocket: {e}")
                disconnected.append(connection)

        # Clean up disconnected clients
        for connection in disconnected:
            self.disconnect(connection)

    def notify(self, warning: StockWarning):
        """Warning sink for the alert monitor; sends without blocking the caller"""
        logger.info(f"Broadcasting stock warning: {warning.message}")
        task = asyncio.get_running_loop().create_task(self.broadcast(warning.to_message()))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def flush(self):
        """Wait for broadcasts still in flight"""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

# Global connection manager instance
manager = ConnectionManager()
