class BaseServiceError(Exception):
    """Base exception for all service-related errors."""
    pass

class InventoryAPIError(BaseServiceError):
    """Raised when inventory backend API calls fail."""

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.status_code = status_code

class PushChannelError(BaseServiceError):
    """Raised when the real-time push channel cannot be connected."""
    pass

class ValidationError(BaseServiceError):
    """Raised when data validation fails."""
    pass
