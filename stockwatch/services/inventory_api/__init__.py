from .client import InventoryAPIClient, unwrap_list, unwrap_total

__all__ = ["InventoryAPIClient", "unwrap_list", "unwrap_total"]
