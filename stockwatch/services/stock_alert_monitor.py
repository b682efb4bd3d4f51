# stockwatch/services/stock_alert_monitor.py
"""
Low-stock alert monitor.

Shows one warning for every product the backend reports as below its reorder
level and not yet read, then marks that alert read on the backend. Records
come from a snapshot fetched once at start and from ``productUpdated`` push
events for as long as the monitor runs.

The backend's ``isRead`` flag is the only memory of what has been shown. The
monitor itself keeps none unless ``remember_displayed`` is switched on, in
which case alert ids shown during this run are skipped until the next start().
"""

import asyncio
import logging
from typing import Any, Callable, Dict, Optional, Set

from stockwatch.core.config import Settings, get_settings
from stockwatch.core.enums import AlertState
from stockwatch.core.exceptions import InventoryAPIError
from stockwatch.schemas.stock_alert import ProductAlertState, StockWarning
from stockwatch.services.inventory_api import InventoryAPIClient
from stockwatch.services.push_channel import Subscription

logger = logging.getLogger(__name__)

WarningSink = Callable[[StockWarning], None]


class StockAlertMonitor:
    """Shows and acknowledges low-stock alerts from the snapshot and push events"""

    def __init__(
        self,
        api_client: InventoryAPIClient,
        channel,
        notify: WarningSink,
        event: str = "productUpdated",
        remember_displayed: bool = False,
        warning_options: Optional[Dict[str, Any]] = None
    ):
        """
        Args:
            api_client: Client used for the snapshot and acknowledgments
            channel: Push channel exposing subscribe(event, handler) -> Subscription
            notify: Sink that displays a StockWarning to the user
            event: Push event carrying one alert record
            remember_displayed: Skip alert ids already shown since the last start()
            warning_options: Extra StockWarning fields (auto_close_ms, position)
        """
        self.api_client = api_client
        self.channel = channel
        self.notify = notify
        self.event = event
        self.remember_displayed = remember_displayed
        self.warning_options = warning_options or {}

        self._subscription: Optional[Subscription] = None
        self._running = False
        self._displayed: Set[str] = set()
        self._acknowledgments: Set[asyncio.Task] = set()

    @classmethod
    def from_settings(
        cls,
        api_client: InventoryAPIClient,
        channel,
        notify: WarningSink,
        settings: Optional[Settings] = None
    ) -> "StockAlertMonitor":
        settings = settings or get_settings()
        return cls(
            api_client,
            channel,
            notify,
            event=settings.PRODUCT_UPDATED_EVENT,
            remember_displayed=settings.ALERT_SESSION_DEDUP,
            warning_options={
                "auto_close_ms": settings.WARNING_AUTO_CLOSE_MS,
                "position": settings.WARNING_POSITION,
            },
        )

    @property
    def running(self) -> bool:
        return self._running

    @property
    def pending_acknowledgments(self) -> int:
        return len(self._acknowledgments)

    async def start(self):
        """Evaluate the current snapshot, then follow push events until stop()"""
        if self._running:
            logger.warning("Stock alert monitor already running; start() ignored")
            return

        self._running = True
        self._displayed.clear()
        logger.info("Starting stock alert monitor")

        try:
            records = await self.api_client.get_stock_alerts()
        except InventoryAPIError as e:
            logger.error(f"Failed to fetch stock alert snapshot, continuing with push events only: {e}")
            records = []

        logger.info(f"Stock alert snapshot: {len(records)} record(s)")
        for record in records:
            self.evaluate(record)

        # stop() may have been called while the snapshot was in flight
        if not self._running:
            return

        self._subscription = self.channel.subscribe(self.event, self.evaluate)
        logger.info(f"Listening for '{self.event}' events")

    def stop(self):
        """Release the push subscription. In-flight acknowledgments are left to finish."""
        self._running = False
        if self._subscription is None:
            return
        self._subscription.unsubscribe()
        self._subscription = None
        logger.info("Stock alert monitor stopped")

    def evaluate(self, record: Any) -> bool:
        """
        Show a warning for ``record`` if it is low on stock and unread, then
        acknowledge it on the backend.

        Returns:
            bool: True if a warning was shown
        """
        alert = ProductAlertState.from_payload(record)
        if alert is None:
            return False

        if alert.classify() is not AlertState.LOW_UNACKED:
            return False

        if self.remember_displayed and alert.id in self._displayed:
            logger.debug(f"Alert {alert.id} already shown this session")
            return False

        warning = StockWarning.for_alert(alert, **self.warning_options)
        try:
            self.notify(warning)
        except Exception as e:
            # Not shown, so leave it unread for the next observation
            logger.error(f"Failed to display stock warning for {alert.display_name}: {e}", exc_info=True)
            return False

        if self.remember_displayed:
            self._displayed.add(alert.id)

        task = asyncio.get_running_loop().create_task(self._acknowledge(alert))
        self._acknowledgments.add(task)
        task.add_done_callback(self._acknowledgment_done)
        return True

    async def drain(self):
        """Wait for in-flight acknowledgment calls to settle"""
        while self._acknowledgments:
            await asyncio.gather(*list(self._acknowledgments), return_exceptions=True)

    async def _acknowledge(self, alert: ProductAlertState):
        try:
            await self.api_client.mark_alert_read(alert.id)
        except InventoryAPIError as e:
            logger.warning(f"Failed to mark stock alert {alert.id} ({alert.display_name}) as read: {e}")
            return
        logger.debug(f"Stock alert {alert.id} marked as read")

    def _acknowledgment_done(self, task: asyncio.Task):
        self._acknowledgments.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(f"Unexpected error acknowledging stock alert: {exc!r}")
