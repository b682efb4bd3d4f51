import json
import logging
import httpx
from typing import Any, Dict, List, Optional

from stockwatch.core.exceptions import InventoryAPIError
from stockwatch.core.config import Settings, get_settings

logger = logging.getLogger(__name__)


def unwrap_list(payload: Any) -> List[Dict]:
    """
    Extract the record list from a backend response.

    The backend wraps collections in a paginated envelope,
    ``{"data": {"data": [...], "total": n}}``. A flat ``{"data": [...]}``
    or a bare list are accepted too; anything else yields an empty list.
    """
    if isinstance(payload, list):
        return payload
    if not isinstance(payload, dict):
        return []

    data = payload.get("data")
    if isinstance(data, list):
        return data
    if isinstance(data, dict) and isinstance(data.get("data"), list):
        return data["data"]

    logger.warning(f"Unexpected response shape, keys: {sorted(payload.keys())}")
    return []


def unwrap_total(payload: Any) -> int:
    """Total from a paginated envelope, falling back to the number of records"""
    if isinstance(payload, dict) and isinstance(payload.get("data"), dict):
        total = payload["data"].get("total")
        if isinstance(total, int):
            return total
    return len(unwrap_list(payload))


class InventoryAPIClient:
    """
    Asynchronous client for the inventory dashboard REST API.

    Covers the endpoints the alert monitor and the stock reports read from:
        - Stock alerts: snapshot (get_stock_alerts) and acknowledgment (mark_alert_read).
        - Listings for reports: products, sales, categories, customers and stock movements.

    Every call goes through _make_request, which attaches the bearer token and the
    no-cache headers and turns HTTP and transport failures into InventoryAPIError.
    """

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        api_prefix: str = "/api/v1",
        timeout: float = 30.0
    ):
        """
        Args:
            base_url: Backend root, e.g. http://localhost:3000
            token: Session token sent as a bearer credential, if any
            api_prefix: Path prefix of the versioned API
            timeout: Per-request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.api_prefix = "/" + api_prefix.strip("/") if api_prefix.strip("/") else ""
        self.token = token
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "InventoryAPIClient":
        settings = settings or get_settings()
        return cls(
            base_url=settings.API_BASE_URL,
            token=settings.API_TOKEN or None,
            api_prefix=settings.API_PREFIX,
            timeout=settings.REQUEST_TIMEOUT,
        )

    def _get_headers(self) -> Dict[str, str]:
        """Get headers for API requests"""
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "Cache-Control": "no-cache",
            "Pragma": "no-cache",
            "Expires": "0",
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _build_url(self, endpoint: str) -> str:
        return f"{self.base_url}{self.api_prefix}/{endpoint.lstrip('/')}"

    async def _make_request(
        self,
        method: str,
        endpoint: str,
        data: Optional[Dict] = None,
        params: Optional[Dict] = None
    ) -> Dict:
        """
        Make a request to the inventory API

        Args:
            method: HTTP method (GET, POST, PATCH, DELETE)
            endpoint: API endpoint relative to the API prefix
            data: Request payload
            params: Query parameters

        Returns:
            Dict: Decoded JSON body ({} for 204 No Content)

        Raises:
            InventoryAPIError: If the request fails or returns a non-2xx status
        """
        url = self._build_url(endpoint)
        logger.debug(f"Making {method} request to {url}")
        if params:
            logger.debug(f"Params: {params}")
        if data:
            logger.debug(f"Data: {json.dumps(data)[:500]}...")

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.request(
                    method=method,
                    url=url,
                    headers=self._get_headers(),
                    json=data,
                    params=params
                )
        except httpx.TimeoutException as e:
            logger.error(f"Timeout error on {method} {url}: {str(e)}")
            raise InventoryAPIError(f"Request timed out: {str(e)}")
        except httpx.RequestError as e:
            logger.error(f"Network error on {method} {url}: {str(e)}")
            raise InventoryAPIError(f"Network error: {str(e)}")

        if not 200 <= response.status_code < 300:
            logger.error(f"Inventory API error {response.status_code} on {method} {url}: {response.text}")
            raise InventoryAPIError(
                f"Request failed ({response.status_code}): {response.text}",
                status_code=response.status_code,
            )

        if response.status_code == 204 or not response.content:
            return {}

        try:
            return response.json()
        except ValueError as e:
            raise InventoryAPIError(f"Invalid JSON in response from {url}: {str(e)}")

    # Stock alerts

    async def get_stock_alerts(self) -> List[Dict]:
        """
        Fetch the current stock-alert snapshot

        Returns:
            List[Dict]: Raw alert records, unwrapped from the list envelope

        Raises:
            InventoryAPIError: If the API request fails
        """
        response = await self._make_request("GET", "/stock-alerts")
        return unwrap_list(response)

    async def mark_alert_read(self, alert_id: str) -> Dict:
        """
        Acknowledge a stock alert so it is not shown again

        Args:
            alert_id: Identifier of the alert record

        Raises:
            InventoryAPIError: If the API request fails
        """
        return await self._make_request("PATCH", f"/stock-alerts/{alert_id}/read")

    # Listings used by reports

    async def get_products(self, params: Optional[Dict] = None) -> Dict:
        return await self._make_request("GET", "/products", params=params)

    async def get_sales(self, params: Optional[Dict] = None) -> Dict:
        return await self._make_request("GET", "/sales", params=params)

    async def get_categories(self, params: Optional[Dict] = None) -> Dict:
        return await self._make_request("GET", "/categories", params=params)

    async def get_customers(self, params: Optional[Dict] = None) -> Dict:
        return await self._make_request("GET", "/customers", params=params)

    async def get_stock_movements(self, params: Optional[Dict] = None) -> Dict:
        """Stock-in / stock-out statement"""
        return await self._make_request("GET", "/stocks", params=params)
