from fastapi import APIRouter, Depends, HTTPException, Query
from typing import List, Optional
import logging

from stockwatch.core.enums import MovementType
from stockwatch.core.exceptions import InventoryAPIError
from stockwatch.dependencies import get_api_client
from stockwatch.schemas.inventory import (
    DailySales,
    DashboardSummary,
    InventoryStats,
    LowStockProduct,
    Product,
    StatementEntry,
)
from stockwatch.services.inventory_api import InventoryAPIClient, unwrap_list
from stockwatch.services import report_service

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/reports", tags=["reports"])


async def _load(fetch, what: str) -> list:
    try:
        return unwrap_list(await fetch())
    except InventoryAPIError as e:
        logger.error(f"Failed to load {what}: {e}")
        raise HTTPException(status_code=502, detail=f"Failed to load {what} from inventory API")


@router.get("/low-stock", response_model=List[LowStockProduct])
async def low_stock_report(client: InventoryAPIClient = Depends(get_api_client)):
    """Products below their reorder level"""
    products = await _load(client.get_products, "products")
    return report_service.low_stock_products(products)


@router.get("/inventory-stats", response_model=InventoryStats)
async def inventory_stats_report(client: InventoryAPIClient = Depends(get_api_client)):
    products = await _load(client.get_products, "products")
    return report_service.inventory_stats(products)


@router.get("/products", response_model=List[Product], response_model_by_alias=True)
async def search_products(
    name: Optional[str] = Query(None, description="Match on product name or id"),
    sku: Optional[str] = Query(None, description="Match on SKU"),
    category_id: Optional[str] = Query(None, description="Exact category id"),
    client: InventoryAPIClient = Depends(get_api_client),
):
    products = await _load(client.get_products, "products")
    return report_service.filter_products(products, name=name, sku=sku, category_id=category_id)


@router.get("/sales-by-date", response_model=List[DailySales])
async def sales_by_date_report(client: InventoryAPIClient = Depends(get_api_client)):
    sales = await _load(client.get_sales, "sales")
    return report_service.sales_by_date(sales)


@router.get("/stock-statement", response_model=List[StatementEntry])
async def stock_statement_report(
    movement_type: Optional[MovementType] = Query(None, alias="type", description="Only \"stock in\" or only \"stock out\" entries"),
    client: InventoryAPIClient = Depends(get_api_client),
):
    """Stock-in and stock-out history, newest first"""
    movements = await _load(client.get_stock_movements, "stock movements")
    return report_service.stock_statement(movements, movement_type=movement_type)


@router.get("/dashboard", response_model=DashboardSummary)
async def dashboard_report(client: InventoryAPIClient = Depends(get_api_client)):
    return await report_service.dashboard_summary(client)
