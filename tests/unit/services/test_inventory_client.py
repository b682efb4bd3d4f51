# API client unit tests
import pytest
import httpx
from unittest.mock import AsyncMock

from stockwatch.core.exceptions import InventoryAPIError
from stockwatch.services.inventory_api import InventoryAPIClient, unwrap_list, unwrap_total


def _mock_http(mocker, status_code=200, json_body=None, content=b"{}", side_effect=None):
    """Patch httpx.AsyncClient and return the mocked request coroutine"""
    mock_client = mocker.patch("httpx.AsyncClient")
    request = AsyncMock()
    if side_effect is not None:
        request.side_effect = side_effect
    else:
        mock_response = mocker.MagicMock()
        mock_response.status_code = status_code
        mock_response.content = content
        mock_response.text = str(json_body)
        mock_response.json.return_value = json_body
        request.return_value = mock_response
    mock_client.return_value.__aenter__.return_value.request = request
    return request


"""
1. Request construction
"""

@pytest.mark.asyncio
async def test_bearer_token_and_no_cache_headers(mocker):
    request = _mock_http(mocker, json_body={"success": True})
    client = InventoryAPIClient("http://inventory.test/", token="secret")

    result = await client._make_request("GET", "/products")

    _, kwargs = request.call_args
    assert kwargs["url"] == "http://inventory.test/api/v1/products"
    assert kwargs["headers"]["Authorization"] == "Bearer secret"
    assert kwargs["headers"]["Cache-Control"] == "no-cache"
    assert result == {"success": True}


@pytest.mark.asyncio
async def test_no_authorization_header_without_token(mocker):
    request = _mock_http(mocker, json_body={})
    client = InventoryAPIClient("http://inventory.test")

    await client._make_request("GET", "categories")

    _, kwargs = request.call_args
    assert "Authorization" not in kwargs["headers"]
    assert kwargs["url"] == "http://inventory.test/api/v1/categories"


def test_from_settings(settings):
    client = InventoryAPIClient.from_settings(settings)

    assert client.base_url == "http://inventory.test"
    assert client.token == "test_token"
    assert client.api_prefix == "/api/v1"
    assert client.timeout == 30.0


def test_from_settings_reads_environment(monkeypatch):
    monkeypatch.setenv("API_BASE_URL", "http://env.inventory.test")
    monkeypatch.setenv("REQUEST_TIMEOUT", "5")

    client = InventoryAPIClient.from_settings()

    assert client.base_url == "http://env.inventory.test"
    assert client.timeout == 5.0


"""
2. Stock alert endpoints
"""

@pytest.mark.asyncio
async def test_get_stock_alerts_unwraps_envelope(mocker):
    records = [{"_id": "a1", "currentQuantity": 1, "reorderLevel": 5, "isRead": False}]
    mock_make_request = mocker.patch.object(
        InventoryAPIClient, "_make_request",
        return_value={"success": True, "data": {"data": records, "total": 1}}
    )
    client = InventoryAPIClient("http://inventory.test")

    result = await client.get_stock_alerts()

    mock_make_request.assert_called_once_with("GET", "/stock-alerts")
    assert result == records


@pytest.mark.asyncio
async def test_mark_alert_read_patches_without_body(mocker):
    request = _mock_http(mocker, status_code=204, content=b"")
    client = InventoryAPIClient("http://inventory.test")

    result = await client.mark_alert_read("a1")

    _, kwargs = request.call_args
    assert kwargs["method"] == "PATCH"
    assert kwargs["url"] == "http://inventory.test/api/v1/stock-alerts/a1/read"
    assert kwargs["json"] is None
    assert result == {}


@pytest.mark.asyncio
async def test_get_stock_movements_hits_stocks(mocker):
    mock_make_request = mocker.patch.object(InventoryAPIClient, "_make_request", return_value={"data": {"data": [], "total": 0}})
    client = InventoryAPIClient("http://inventory.test")

    await client.get_stock_movements({"page": 2})

    mock_make_request.assert_called_once_with("GET", "/stocks", params={"page": 2})


"""
3. Error handling
"""

@pytest.mark.asyncio
async def test_api_error_status(mocker):
    _mock_http(mocker, status_code=404, json_body="Not Found")
    client = InventoryAPIClient("http://inventory.test")

    with pytest.raises(InventoryAPIError) as exc_info:
        await client.mark_alert_read("missing")

    assert exc_info.value.status_code == 404
    assert "Request failed (404)" in str(exc_info.value)


@pytest.mark.asyncio
async def test_network_error(mocker):
    _mock_http(mocker, side_effect=httpx.ConnectError("Connection refused"))
    client = InventoryAPIClient("http://inventory.test")

    with pytest.raises(InventoryAPIError) as exc_info:
        await client.get_stock_alerts()

    assert "Network error" in str(exc_info.value)
    assert "Connection refused" in str(exc_info.value)


@pytest.mark.asyncio
async def test_timeout_error(mocker):
    _mock_http(mocker, side_effect=httpx.ReadTimeout("Read timed out"))
    client = InventoryAPIClient("http://inventory.test")

    with pytest.raises(InventoryAPIError) as exc_info:
        await client.get_products()

    assert "Request timed out" in str(exc_info.value)


"""
4. Envelope helpers
"""

def test_unwrap_list_shapes():
    assert unwrap_list({"data": {"data": [1, 2]}}) == [1, 2]
    assert unwrap_list({"data": [3]}) == [3]
    assert unwrap_list([4]) == [4]
    assert unwrap_list({"data": {"total": 0}}) == []
    assert unwrap_list(None) == []
    assert unwrap_list("oops") == []


def test_unwrap_total():
    assert unwrap_total({"data": {"data": [1, 2], "total": 17}}) == 17
    assert unwrap_total({"data": {"data": [1, 2]}}) == 2
    assert unwrap_total({"data": [1]}) == 1
    assert unwrap_total({}) == 0
