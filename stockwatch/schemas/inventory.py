"""
Schemas for the product and sale documents used by the stock reports.
"""

from datetime import date, datetime
from typing import Any, List, Optional, Union
from pydantic import BaseModel, ConfigDict, Field, field_validator

from stockwatch.core.enums import MovementType, StockStatus
from stockwatch.schemas.stock_alert import ProductRef


class InventoryDocument(BaseModel):
    model_config = ConfigDict(
        populate_by_name = True,
        extra = "allow"
    )


class CategoryRef(InventoryDocument):
    id: Optional[str] = Field(None, alias="_id")
    name: Optional[str] = None


class Product(InventoryDocument):
    id: Optional[str] = Field(None, alias="_id")
    name: Optional[str] = None
    sku: Optional[str] = None
    quantity: int = 0
    reorder_level: int = Field(0, alias="reorderLevel")
    price: Optional[float] = None
    category: Optional[Union[CategoryRef, str]] = Field(None, alias="categoryId")

    @field_validator('quantity', 'reorder_level', mode='before')
    @classmethod
    def validate_integers(cls, v):
        if v is None or v == '': return 0
        try: return int(v)
        except (ValueError, TypeError): raise ValueError('Value must be a valid integer')

    @property
    def category_id(self) -> Optional[str]:
        if isinstance(self.category, CategoryRef):
            return self.category.id
        return self.category


class LowStockProduct(BaseModel):
    id: Optional[str] = None
    name: str
    quantity: int
    reorder_level: int
    status: StockStatus


class InventoryStats(BaseModel):
    total: int = 0
    out_of_stock: int = 0
    low_stock: int = 0


class Sale(InventoryDocument):
    id: Optional[str] = Field(None, alias="_id")
    sale_date: Optional[datetime] = Field(None, alias="saleDate")
    total_amount: float = Field(0.0, alias="totalAmount")
    products: List[Any] = []

    @field_validator('total_amount', mode='before')
    @classmethod
    def validate_total(cls, v):
        if v is None or v == '':
            return 0.0
        try:
            return float(v)
        except (ValueError, TypeError):
            raise ValueError(f'Total amount must be a valid number, got: {v}')

    @field_validator('sale_date', mode='before')
    @classmethod
    def validate_sale_date(cls, v):
        if v in (None, ''):
            return None
        return v


class DailySales(BaseModel):
    day: date
    sales_count: int = 0
    total_amount: float = 0.0


class DashboardSummary(BaseModel):
    total_categories: int = 0
    total_products: int = 0
    total_sales: int = 0
    total_customers: int = 0
    low_stock_items: int = 0
    recent_sales: List[Sale] = []


class StockMovement(InventoryDocument):
    """One stock-in or stock-out entry of the stock statement"""
    id: Optional[str] = Field(None, alias="_id")
    type: MovementType
    quantity: int
    note: Optional[str] = None
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    product: Optional[Union[ProductRef, str]] = Field(None, alias="productId")

    @field_validator('type', mode='before')
    @classmethod
    def normalize_type(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @property
    def product_name(self) -> str:
        if isinstance(self.product, ProductRef) and self.product.name:
            return self.product.name
        return "Unknown Product"


class StatementEntry(BaseModel):
    id: Optional[str] = None
    type: MovementType
    product_name: str
    quantity: int
    note: Optional[str] = None
    created_at: Optional[datetime] = None
