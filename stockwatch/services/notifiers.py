"""Warning sinks used outside the web dashboard."""

import logging

import click

from stockwatch.schemas.stock_alert import StockWarning

logger = logging.getLogger(__name__)


class LoggingNotifier:
    """Writes warnings to the application log"""

    def __call__(self, warning: StockWarning):
        logger.warning(warning.message)


class ConsoleNotifier:
    """Prints warnings to the terminal for the ``watch`` command"""

    def __init__(self, color: bool = True):
        self.color = color

    def __call__(self, warning: StockWarning):
        line = (
            f"⚠ {warning.message} "
            f"(stock {warning.current_quantity}, reorder level {warning.reorder_level})"
        )
        click.secho(line, fg="yellow" if self.color else None, bold=self.color)
