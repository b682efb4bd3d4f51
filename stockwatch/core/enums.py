"""
Shared enums and constants used across the application.
"""

from enum import Enum


class AlertState(str, Enum):
    """Low-stock state of a product as observed by the alert monitor"""
    OK = "OK"
    LOW_UNACKED = "LOW_UNACKED"
    LOW_ACKED = "LOW_ACKED"


class StockStatus(str, Enum):
    """Stock indicator shown next to a product"""
    IN_STOCK = "IN_STOCK"
    LOW_STOCK = "LOW_STOCK"
    OUT_OF_STOCK = "OUT_OF_STOCK"

    @property
    def label(self):
        return self.value.replace('_', ' ').capitalize()


class WarningLevel(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class MovementType(str, Enum):
    """Direction of a stock statement entry as the backend spells it"""
    STOCK_IN = "stock in"
    STOCK_OUT = "stock out"
