from fastapi import Depends

from stockwatch.core.config import Settings, get_settings
from stockwatch.services.inventory_api import InventoryAPIClient


def get_api_client(settings: Settings = Depends(get_settings)) -> InventoryAPIClient:
    """Dependency for the inventory backend client."""
    return InventoryAPIClient.from_settings(settings)
