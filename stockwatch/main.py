# stockwatch/main.py

import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Load environment variables from .env file
load_dotenv()

from stockwatch.core.config import get_settings
from stockwatch.core.exceptions import PushChannelError
from stockwatch.core.logging_config import configure_logging
from stockwatch.routes import health, reports, websockets as websocket_router
from stockwatch.services.inventory_api import InventoryAPIClient
from stockwatch.services.push_channel import SocketIOPushChannel
from stockwatch.services.stock_alert_monitor import StockAlertMonitor
from stockwatch.services.websockets.manager import manager

configure_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()

    channel = SocketIOPushChannel.from_settings(settings)
    try:
        await channel.connect()
    except PushChannelError as e:
        # Socket.IO keeps no retry loop for a failed first connect; alerts come from the snapshot only
        logger.error(f"Push channel unavailable, live stock updates disabled: {e}")

    monitor = StockAlertMonitor.from_settings(
        InventoryAPIClient.from_settings(settings),
        channel,
        manager.notify,
        settings=settings,
    )
    app.state.channel = channel
    app.state.monitor = monitor

    await monitor.start()
    try:
        yield
    finally:
        monitor.stop()
        await monitor.drain()
        await manager.flush()
        await channel.disconnect()
        logger.info("Stockwatch shut down")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application"""
    app = FastAPI(
        title="Stockwatch",
        description="Low-stock alerts and stock reports for the inventory dashboard",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router)
    app.include_router(reports.router)
    app.include_router(websocket_router.router)
    return app


app = create_app()
