"""
Core module exports.
"""
from .enums import (
    AlertState,
    StockStatus,
    WarningLevel
)

from .exceptions import (
    BaseServiceError,
    InventoryAPIError,
    PushChannelError,
    ValidationError
)
