# stockwatch/core/config.py

import os
from functools import lru_cache
from typing import Optional
from pydantic import ConfigDict
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings.
    Loads values from environment variables (.env file)
    """
    # Inventory REST backend
    API_BASE_URL: str = "http://localhost:3000"
    API_PREFIX: str = "/api/v1"
    API_TOKEN: str = ""
    REQUEST_TIMEOUT: float = 30.0

    # Push channel (Socket.IO). Falls back to API_BASE_URL when unset.
    SOCKET_URL: Optional[str] = None
    PRODUCT_UPDATED_EVENT: str = "productUpdated"

    # Low-stock alerts
    ALERT_SESSION_DEDUP: bool = False  # Remember displayed alert ids until the monitor restarts
    WARNING_AUTO_CLOSE_MS: int = 5000
    WARNING_POSITION: str = "top-right"

    # Environment
    ENVIRONMENT: str = "development"
    DEBUG: bool = False

    model_config = ConfigDict(
        env_file=os.environ.get('ENV_FILE', '.env') if os.path.exists('.env') else None,
        case_sensitive=True,
        extra="ignore",
    )

    @property
    def socket_url(self) -> str:
        return self.SOCKET_URL or self.API_BASE_URL


@lru_cache()
def get_settings():
    """Cached settings to avoid loading .env file for every request"""
    return Settings()

def clear_settings_cache():
    """Clear the settings cache - useful when switching between environments"""
    get_settings.cache_clear()
