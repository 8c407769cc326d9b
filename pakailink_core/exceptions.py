"""
PakaiLink Exceptions
====================
Exception hierarchy shared by the signing, auth, HTTP and callback layers.
"""

from typing import Any, Optional


class PakaiLinkError(Exception):
    """Base exception for all PakaiLink errors."""
    def __init__(self, message: str, status_code: Optional[int] = None, details: Any = None):
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(message)


# Signing layer

class SignatureError(PakaiLinkError):
    """Base class for signing failures. Never retried."""
    pass

class KeyLoadError(SignatureError):
    """Raised when the RSA key file is missing or cannot be parsed."""
    pass

class SigningError(SignatureError):
    """Raised when the signing primitive itself fails."""
    pass

class MalformedBodyError(SignatureError):
    """Raised when a non-empty request body is not valid JSON."""
    pass


# Outbound API

class AuthenticationError(PakaiLinkError):
    """Raised when the B2B token cannot be obtained or a refreshed call still gets 401."""
    pass

class ApiError(PakaiLinkError):
    """Raised for non-2xx provider responses."""
    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        provider_code: str = "UNKNOWN",
        provider_message: str = "Unknown error",
        details: Any = None,
    ):
        self.provider_code = provider_code
        self.provider_message = provider_message
        super().__init__(message, status_code=status_code, details=details)

class ServiceUnavailableError(ApiError):
    """Raised when the provider is unreachable after all retries."""
    pass

class ServiceTimeoutError(ServiceUnavailableError):
    """Raised specifically on timeouts."""
    pass

class TransactionError(PakaiLinkError):
    """Raised when a product operation (create VA, generate QRIS, ...) fails."""
    pass


# Inbound callbacks

class CallbackError(PakaiLinkError):
    """Base class for webhook rejections. Carries the provider-style response code."""
    response_code = "4000000"
    http_status = 400

    def __init__(self, message: str, details: Any = None):
        super().__init__(message, status_code=self.http_status, details=details)

class MissingHeaderError(CallbackError):
    """X-SIGNATURE or X-TIMESTAMP header absent."""
    response_code = "4010000"
    http_status = 401

class InvalidSignatureError(CallbackError):
    """Callback signature does not match the raw body."""
    response_code = "4010001"
    http_status = 401

class CallbackParseError(CallbackError):
    """Callback body is not a JSON object."""
    response_code = "4000000"
    http_status = 400
