# stockwatch/services/push_channel.py
"""
Real-time push channel to the inventory backend.

The backend emits Socket.IO events (``productUpdated`` and friends). This module
keeps one client connection and fans each event out to any number of
subscribers, each holding a Subscription it can release independently.
Reconnection after a dropped connection is left to the Socket.IO client.
"""

import logging
from collections import defaultdict
from typing import Any, Callable, Dict, List, Optional

import socketio

from stockwatch.core.config import Settings, get_settings
from stockwatch.core.exceptions import PushChannelError

logger = logging.getLogger(__name__)

EventHandler = Callable[[Any], None]


class Subscription:
    """Handle for one registered event handler"""

    def __init__(self, channel: "SocketIOPushChannel", event: str, handler: EventHandler):
        self.channel = channel
        self.event = event
        self.handler = handler
        self.active = True

    def unsubscribe(self):
        if not self.active:
            return
        self.active = False
        self.channel._remove_handler(self.event, self.handler)

    def __repr__(self):
        state = "active" if self.active else "released"
        return f"<Subscription {self.event} ({state})>"


class SocketIOPushChannel:

    def __init__(
        self,
        url: str,
        token: Optional[str] = None,
        client: Optional[socketio.AsyncClient] = None
    ):
        self.url = url
        self.token = token
        self._sio = client or socketio.AsyncClient(reconnection=True, logger=False, engineio_logger=False)
        self._handlers: Dict[str, List[EventHandler]] = defaultdict(list)
        self._registered_events = set()

        self._sio.on("connect", self._on_connect)
        self._sio.on("disconnect", self._on_disconnect)
        self._sio.on("connect_error", self._on_connect_error)

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "SocketIOPushChannel":
        settings = settings or get_settings()
        return cls(url=settings.socket_url, token=settings.API_TOKEN or None)

    @property
    def connected(self) -> bool:
        return bool(self._sio.connected)

    async def connect(self):
        """
        Open the connection.

        Raises:
            PushChannelError: If the server cannot be reached
        """
        if self.connected:
            return
        auth = {"token": self.token} if self.token else None
        try:
            await self._sio.connect(self.url, auth=auth)
        except socketio.exceptions.ConnectionError as e:
            logger.error(f"Could not connect to push channel at {self.url}: {e}")
            raise PushChannelError(f"Push channel connection failed: {e}")

    async def disconnect(self):
        if self.connected:
            await self._sio.disconnect()

    def subscribe(self, event: str, handler: EventHandler) -> Subscription:
        """Register ``handler`` for ``event`` and return a handle to release it"""
        if event not in self._registered_events:
            self._sio.on(event, self._make_dispatcher(event))
            self._registered_events.add(event)
        self._handlers[event].append(handler)
        logger.debug(f"Subscribed to '{event}' ({len(self._handlers[event])} handler(s))")
        return Subscription(self, event, handler)

    def handler_count(self, event: str) -> int:
        return len(self._handlers.get(event, []))

    def _remove_handler(self, event: str, handler: EventHandler):
        handlers = self._handlers.get(event, [])
        if handler in handlers:
            handlers.remove(handler)
        logger.debug(f"Unsubscribed from '{event}' ({len(handlers)} handler(s) left)")

    def _make_dispatcher(self, event: str):
        async def dispatch(*args):
            payload = args[0] if args else None
            self.dispatch(event, payload)
        return dispatch

    def dispatch(self, event: str, payload: Any):
        """Deliver one payload to every current handler of ``event``"""
        for handler in list(self._handlers.get(event, [])):
            try:
                handler(payload)
            except Exception as e:
                logger.error(f"Handler for '{event}' failed: {e}", exc_info=True)

    async def _on_connect(self):
        logger.info(f"Connected to push channel at {self.url}")

    async def _on_disconnect(self, *args):
        logger.info(f"Disconnected from push channel at {self.url}")

    async def _on_connect_error(self, data=None):
        logger.warning(f"Push channel connection error: {data}")
