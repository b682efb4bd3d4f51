# tests/conftest.py
import pytest
from unittest.mock import AsyncMock, MagicMock

from stockwatch.core.config import Settings, clear_settings_cache
from stockwatch.services.inventory_api import InventoryAPIClient
from tests.mocks.mock_push_channel import MockPushChannel


@pytest.fixture(autouse=True)
def fresh_settings():
    """Drop cached settings so env changes in one test do not leak into the next"""
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def settings():
    """Provide test settings"""
    return Settings(
        API_BASE_URL="http://inventory.test",
        API_TOKEN="test_token",
        SOCKET_URL="http://push.test",
    )


@pytest.fixture
def mock_api_client():
    """InventoryAPIClient with async methods mocked out"""
    client = MagicMock(spec=InventoryAPIClient)
    client.get_stock_alerts = AsyncMock(return_value=[])
    client.mark_alert_read = AsyncMock(return_value={})
    client.get_products = AsyncMock(return_value={"data": {"data": [], "total": 0}})
    client.get_sales = AsyncMock(return_value={"data": {"data": [], "total": 0}})
    client.get_categories = AsyncMock(return_value={"data": {"data": [], "total": 0}})
    client.get_customers = AsyncMock(return_value={"data": {"data": [], "total": 0}})
    client.get_stock_movements = AsyncMock(return_value={"data": {"data": [], "total": 0}})
    return client


@pytest.fixture
def push_channel():
    return MockPushChannel()


@pytest.fixture
def warnings_shown():
    """Collects warnings passed to the monitor's sink"""
    return []


@pytest.fixture
def make_alert():
    """Build a raw stock-alert record as the backend sends it"""
    def _make(alert_id="alert-1", name="Widget", current=3, reorder=10, is_read=False, **overrides):
        record = {
            "_id": alert_id,
            "productId": {"_id": f"prod-{alert_id}", "name": name},
            "currentQuantity": current,
            "reorderLevel": reorder,
            "isRead": is_read,
        }
        record.update(overrides)
        return record
    return _make


@pytest.fixture
def sample_products():
    return [
        {"_id": "p1", "name": "Blue Mug", "sku": "MUG-BL", "quantity": 0, "reorderLevel": 5, "categoryId": {"_id": "c1", "name": "Kitchen"}},
        {"_id": "p2", "name": "Red Mug", "sku": "MUG-RD", "quantity": 3, "reorderLevel": 5, "categoryId": {"_id": "c1", "name": "Kitchen"}},
        {"_id": "p3", "name": "Desk Lamp", "sku": "LMP-01", "quantity": 5, "reorderLevel": 5, "categoryId": "c2"},
        {"_id": "p4", "name": "Notebook", "sku": "NB-A5", "quantity": 40, "reorderLevel": 10, "categoryId": "c3"},
    ]


@pytest.fixture
def sample_movements():
    return [
        {"_id": "m1", "type": "stock in", "quantity": 20, "note": "Supplier delivery", "createdAt": "2024-03-01T09:00:00Z", "productId": {"_id": "p1", "name": "Blue Mug"}},
        {"_id": "m2", "type": "stock out", "quantity": 3, "note": "", "createdAt": "2024-03-02T15:30:00Z", "productId": "p2"},
        {"_id": "m3", "type": "stock in", "quantity": 5, "createdAt": "2024-03-01T12:00:00Z", "productId": {"_id": "p3", "name": "Desk Lamp"}},
        {"_id": "m4", "type": "adjustment", "quantity": 1, "createdAt": "2024-03-03T08:00:00Z"},
    ]
