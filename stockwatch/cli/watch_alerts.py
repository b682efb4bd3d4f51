# stockwatch/cli/watch_alerts.py
import asyncio
import logging

import click

from stockwatch.core.config import get_settings
from stockwatch.core.exceptions import PushChannelError
from stockwatch.core.logging_config import configure_logging
from stockwatch.services.inventory_api import InventoryAPIClient
from stockwatch.services.notifiers import ConsoleNotifier, LoggingNotifier
from stockwatch.services.push_channel import SocketIOPushChannel
from stockwatch.services.stock_alert_monitor import StockAlertMonitor

logger = logging.getLogger(__name__)


async def run_monitor(stop_event: asyncio.Event, notifier=None):
    settings = get_settings()
    channel = SocketIOPushChannel.from_settings(settings)
    monitor = StockAlertMonitor.from_settings(
        InventoryAPIClient.from_settings(settings),
        channel,
        notifier or ConsoleNotifier(),
        settings=settings,
    )

    try:
        await channel.connect()
    except PushChannelError as e:
        click.echo(f"Live updates unavailable ({e}); showing snapshot alerts only")

    await monitor.start()
    try:
        await stop_event.wait()
    finally:
        monitor.stop()
        await monitor.drain()
        await channel.disconnect()


@click.command()
@click.option('--no-color', is_flag=True, help='Print warnings without colour')
@click.option('--log-only', is_flag=True, help='Send warnings to the log instead of the terminal')
def watch(no_color, log_only):
    """Show low-stock warnings as they happen until interrupted"""
    configure_logging()
    settings = get_settings()
    click.echo(f"Watching stock alerts on {settings.API_BASE_URL} (Ctrl-C to stop)")

    async def _watch():
        stop_event = asyncio.Event()
        notifier = LoggingNotifier() if log_only else ConsoleNotifier(color=not no_color)
        await run_monitor(stop_event, notifier)

    try:
        asyncio.run(_watch())
    except KeyboardInterrupt:
        click.echo("Stopped watching stock alerts")

if __name__ == "__main__":
    watch()
