"""
Schemas for stock-alert records and the warnings raised from them.
"""

import logging
from typing import Any, Dict, Optional, Union
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from stockwatch.core.enums import AlertState, WarningLevel

logger = logging.getLogger(__name__)

UNKNOWN_PRODUCT_NAME = "Unknown product"


class ProductRef(BaseModel):
    """Populated ``productId`` document embedded in an alert record"""
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: Optional[str] = Field(None, alias="_id")
    name: Optional[str] = None


class ProductAlertState(BaseModel):
    """
    Read-through projection of one product's alert state, as returned by the
    stock-alerts endpoint and pushed with ``productUpdated`` events.
    """
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str = Field(..., alias="_id")
    product: Optional[Union[ProductRef, str]] = Field(None, alias="productId")
    current_quantity: int = Field(..., alias="currentQuantity", strict=True)
    reorder_level: int = Field(..., alias="reorderLevel", strict=True)
    is_read: bool = Field(..., alias="isRead", strict=True)

    @field_validator('id', mode='before')
    @classmethod
    def validate_id(cls, v):
        if v is None or v == '':
            raise ValueError('Alert id is required')
        return str(v)

    @classmethod
    def from_payload(cls, payload: Any) -> Optional["ProductAlertState"]:
        """Parse a wire payload, returning None for malformed or partial records"""
        if isinstance(payload, cls):
            return payload
        if not isinstance(payload, dict):
            logger.debug(f"Skipping non-object alert payload: {payload!r}")
            return None
        try:
            return cls.model_validate(payload)
        except ValidationError as e:
            logger.debug(f"Skipping malformed alert record {payload.get('_id')}: {e.error_count()} error(s)")
            return None

    @property
    def display_name(self) -> str:
        if isinstance(self.product, ProductRef) and self.product.name:
            return self.product.name
        return UNKNOWN_PRODUCT_NAME

    @property
    def is_low(self) -> bool:
        return self.current_quantity < self.reorder_level

    def classify(self) -> AlertState:
        if not self.is_low:
            return AlertState.OK
        return AlertState.LOW_ACKED if self.is_read else AlertState.LOW_UNACKED


class StockWarning(BaseModel):
    """User-visible low-stock warning"""
    alert_id: str
    product_name: str
    current_quantity: int
    reorder_level: int
    level: WarningLevel = WarningLevel.WARNING
    auto_close_ms: int = 5000
    position: str = "top-right"

    @classmethod
    def for_alert(cls, alert: ProductAlertState, **kwargs) -> "StockWarning":
        return cls(
            alert_id=alert.id,
            product_name=alert.display_name,
            current_quantity=alert.current_quantity,
            reorder_level=alert.reorder_level,
            **kwargs,
        )

    @property
    def message(self) -> str:
        return f"{self.product_name} is low on stock!"

    def to_message(self) -> Dict[str, Any]:
        """Payload broadcast to dashboard clients"""
        return {
            "type": "stock_warning",
            "message": self.message,
            **self.model_dump(mode="json"),
        }
