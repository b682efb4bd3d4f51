"""
Stock and sales aggregations behind the dashboard and stock screens.

The helpers work on the raw documents the backend returns so they can be used
on any listing response without an extra fetch.
"""

from __future__ import annotations

import asyncio
import logging
from collections import OrderedDict
from typing import Any, Dict, Iterable, List, Optional

from pydantic import ValidationError as PydanticValidationError

from stockwatch.core.enums import MovementType, StockStatus
from stockwatch.core.exceptions import InventoryAPIError, ValidationError
from stockwatch.schemas.inventory import (
    DailySales,
    DashboardSummary,
    InventoryStats,
    LowStockProduct,
    Product,
    Sale,
    StatementEntry,
    StockMovement,
)
from stockwatch.services.inventory_api import InventoryAPIClient, unwrap_list, unwrap_total

logger = logging.getLogger(__name__)

RECENT_SALES_LIMIT = 5


def stock_status(quantity: int, reorder_level: int) -> StockStatus:
    """Indicator shown next to a product in the product list"""
    if quantity is None or reorder_level is None:
        raise ValidationError("quantity and reorder_level are required")
    if quantity <= 0:
        return StockStatus.OUT_OF_STOCK
    if quantity <= reorder_level:
        return StockStatus.LOW_STOCK
    return StockStatus.IN_STOCK


def _parse_products(products: Iterable[Any]) -> List[Product]:
    parsed = []
    for raw in products:
        if isinstance(raw, Product):
            parsed.append(raw)
            continue
        try:
            parsed.append(Product.model_validate(raw))
        except PydanticValidationError as e:
            logger.debug(f"Skipping malformed product {raw!r}: {e.error_count()} error(s)")
    return parsed


def low_stock_products(products: Iterable[Any]) -> List[LowStockProduct]:
    """Products whose quantity is strictly below their reorder level"""
    return [
        LowStockProduct(
            id=p.id,
            name=p.name or "Unnamed Product",
            quantity=p.quantity,
            reorder_level=p.reorder_level,
            status=stock_status(p.quantity, p.reorder_level),
        )
        for p in _parse_products(products)
        if p.quantity < p.reorder_level
    ]


def inventory_stats(products: Iterable[Any]) -> InventoryStats:
    parsed = _parse_products(products)
    return InventoryStats(
        total=len(parsed),
        out_of_stock=sum(1 for p in parsed if p.quantity == 0),
        low_stock=sum(1 for p in parsed if p.reorder_level >= p.quantity),
    )


def filter_products(
    products: Iterable[Any],
    name: Optional[str] = None,
    sku: Optional[str] = None,
    category_id: Optional[str] = None,
) -> List[Product]:
    """
    Client-side product search.

    ``name`` matches against the product name or id, ``sku`` against the SKU,
    both as case-insensitive substrings. ``category_id`` must match exactly.
    """
    name_filter = (name or "").lower().strip()
    sku_filter = (sku or "").lower().strip()

    matches = []
    for product in _parse_products(products):
        matches_name = (
            name_filter in (product.name or "").lower()
            or name_filter in (product.id or "").lower()
        )
        matches_sku = sku_filter in (product.sku or "").lower()
        matches_category = product.category_id == category_id if category_id else True
        if matches_name and matches_sku and matches_category:
            matches.append(product)
    return matches


def sales_by_date(sales: Iterable[Any]) -> List[DailySales]:
    """Sale count and revenue per calendar day, oldest first"""
    days: Dict[Any, DailySales] = {}
    for raw in sales:
        try:
            sale = raw if isinstance(raw, Sale) else Sale.model_validate(raw)
        except PydanticValidationError as e:
            logger.debug(f"Skipping unparseable sale {raw!r}: {e.error_count()} error(s)")
            continue
        if sale.sale_date is None:
            continue

        day = sale.sale_date.date()
        bucket = days.setdefault(day, DailySales(day=day))
        bucket.sales_count += 1
        bucket.total_amount = round(bucket.total_amount + sale.total_amount, 2)

    return [days[day] for day in sorted(days)]


def stock_statement(movements: Iterable[Any], movement_type: Optional[MovementType] = None) -> List[StatementEntry]:
    """
    Stock-in and stock-out entries, newest first.

    Entries without a known type or a quantity are skipped. Entries whose
    product is not populated are listed as "Unknown Product".
    """
    entries = []
    for raw in movements:
        try:
            movement = raw if isinstance(raw, StockMovement) else StockMovement.model_validate(raw)
        except PydanticValidationError as e:
            logger.debug(f"Skipping malformed stock movement {raw!r}: {e.error_count()} error(s)")
            continue
        if movement_type is not None and movement.type is not movement_type:
            continue
        entries.append(StatementEntry(
            id=movement.id,
            type=movement.type,
            product_name=movement.product_name,
            quantity=movement.quantity,
            note=movement.note or None,
            created_at=movement.created_at,
        ))

    # Undated entries go last
    entries.sort(key=lambda e: (e.created_at is not None, e.created_at.timestamp() if e.created_at else 0), reverse=True)
    return entries


async def dashboard_summary(client: InventoryAPIClient) -> DashboardSummary:
    """
    Headline totals for the dashboard.

    The four listings are fetched concurrently. A listing that fails to load
    counts as zero rather than failing the whole summary.
    """
    fetchers = OrderedDict([
        ("categories", client.get_categories),
        ("products", client.get_products),
        ("sales", client.get_sales),
        ("customers", client.get_customers),
    ])

    async def _safe_fetch(name, fetch):
        try:
            return await fetch()
        except InventoryAPIError as e:
            logger.warning(f"Dashboard: failed to load {name}: {e}")
            return {"data": {"data": [], "total": 0}}

    responses = await asyncio.gather(*(_safe_fetch(name, fetch) for name, fetch in fetchers.items()))
    by_name = dict(zip(fetchers.keys(), responses))

    sales = []
    for raw in unwrap_list(by_name["sales"])[:RECENT_SALES_LIMIT]:
        try:
            sales.append(Sale.model_validate(raw))
        except PydanticValidationError:
            continue

    return DashboardSummary(
        total_categories=unwrap_total(by_name["categories"]),
        total_products=unwrap_total(by_name["products"]),
        total_sales=unwrap_total(by_name["sales"]),
        total_customers=unwrap_total(by_name["customers"]),
        low_stock_items=len(low_stock_products(unwrap_list(by_name["products"]))),
        recent_sales=sales,
    )
