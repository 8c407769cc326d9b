from .client import ApiClient, RETRYABLE_STATUS_CODES
from ..exceptions import (
    ApiError,
    AuthenticationError,
    ServiceUnavailableError,
    ServiceTimeoutError,
)

__all__ = [
    "ApiClient",
    "RETRYABLE_STATUS_CODES",
    "ApiError",
    "AuthenticationError",
    "ServiceUnavailableError",
    "ServiceTimeoutError",
]
