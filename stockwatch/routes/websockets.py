# stockwatch/routes/websockets.py
from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from stockwatch.services.websockets.manager import manager
import logging

logger = logging.getLogger(__name__)

router = APIRouter()

@router.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket):
    """Low-stock warning feed for dashboard clients"""
    await manager.connect(websocket)
    try:
        while True:
            # Keep the connection open; clients only listen
            await websocket.receive_text()
    except WebSocketDisconnect:
        manager.disconnect(websocket)
        logger.info("WebSocket client disconnected")
