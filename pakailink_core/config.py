"""
PakaiLink Configuration
=======================
Credentials, endpoints and client tuning loaded from the environment.
"""

import os
from dataclasses import dataclass, field


def _env(name: str, default: str = "") -> str:
    return os.environ.get(name, default)


@dataclass(frozen=True)
class Endpoints:
    """SNAP endpoint paths. Each can be overridden via PAKAILINK_ENDPOINT_*."""
    b2b_token: str = field(default_factory=lambda: _env("PAKAILINK_ENDPOINT_B2B_TOKEN", "/snap/v1.0/access-token/b2b"))

    va_create: str = field(default_factory=lambda: _env("PAKAILINK_ENDPOINT_VA_CREATE", "/snap/v1.0/transfer-va/create-va"))
    va_inquiry: str = field(default_factory=lambda: _env("PAKAILINK_ENDPOINT_VA_INQUIRY", "/snap/v1.0/transfer-va/create-va-status"))

    emoney_create: str = field(default_factory=lambda: _env("PAKAILINK_ENDPOINT_EMONEY_CREATE", "/snap/v1.0/payment/emoney"))
    emoney_inquiry: str = field(default_factory=lambda: _env("PAKAILINK_ENDPOINT_EMONEY_INQUIRY", "/snap/v1.0/payment/emoney-status"))

    qris_generate: str = field(default_factory=lambda: _env("PAKAILINK_ENDPOINT_QRIS_GENERATE", "/snap/v1.0/qr/qr-mpm-generate"))
    qris_inquiry: str = field(default_factory=lambda: _env("PAKAILINK_ENDPOINT_QRIS_INQUIRY", "/snap/v1.0/qr/qr-mpm-status"))

    transfer_inquiry: str = field(default_factory=lambda: _env("PAKAILINK_ENDPOINT_TRANSFER_INQUIRY", "/snap/v1.0/emoney/bank-account-inquiry"))
    transfer_bank: str = field(default_factory=lambda: _env("PAKAILINK_ENDPOINT_TRANSFER_BANK", "/snap/v1.0/emoney/transfer-bank"))
    transfer_status: str = field(default_factory=lambda: _env("PAKAILINK_ENDPOINT_TRANSFER_STATUS", "/snap/v1.0/emoney/transfer-bank/status"))

    balance_inquiry: str = field(default_factory=lambda: _env("PAKAILINK_ENDPOINT_BALANCE_INQUIRY", "/snap/v1.0/balance-inquiry"))
    balance_history: str = field(default_factory=lambda: _env("PAKAILINK_ENDPOINT_BALANCE_HISTORY", "/snap/v1.0/balance-history"))

    retail_create: str = field(default_factory=lambda: _env("PAKAILINK_ENDPOINT_RETAIL_CREATE", "/api/v1.0/retail/payment"))
    retail_inquiry: str = field(default_factory=lambda: _env("PAKAILINK_ENDPOINT_RETAIL_INQUIRY", "/api/v1.0/retail/status"))

    topup_inquiry: str = field(default_factory=lambda: _env("PAKAILINK_ENDPOINT_TOPUP_INQUIRY", "/api/v1.0/customer-topup/inquiry"))
    topup_payment: str = field(default_factory=lambda: _env("PAKAILINK_ENDPOINT_TOPUP_PAYMENT", "/api/v1.0/customer-topup/payment"))
    topup_status: str = field(default_factory=lambda: _env("PAKAILINK_ENDPOINT_TOPUP_STATUS", "/api/v1.0/customer-topup/status"))

    registration_qris: str = field(default_factory=lambda: _env("PAKAILINK_ENDPOINT_REGISTRATION_QRIS", "/snap/v1.0/registration/qris"))
    registration_dana: str = field(default_factory=lambda: _env("PAKAILINK_ENDPOINT_REGISTRATION_DANA", "/snap/v1.0/registration/dana"))


@dataclass(frozen=True)
class PakaiLinkConfig:
    """
    Process-wide PakaiLink configuration.

    Defaults are read from the environment when the instance is created,
    so tests can build one explicitly with keyword arguments.
    """
    base_url: str = field(default_factory=lambda: _env("PAKAILINK_BASE_URL", "https://rising-dev.pakailink.id"))

    # Credentials
    client_id: str = field(default_factory=lambda: _env("PAKAILINK_CLIENT_ID"))
    client_secret: str = field(default_factory=lambda: _env("PAKAILINK_CLIENT_SECRET"))
    partner_id: str = field(default_factory=lambda: _env("PAKAILINK_PARTNER_ID"))
    merchant_id: str = field(default_factory=lambda: _env("PAKAILINK_MERCHANT_ID"))
    channel_id: str = field(default_factory=lambda: _env("PAKAILINK_CHANNEL_ID"))
    account_no: str = field(default_factory=lambda: _env("PAKAILINK_ACCOUNT_NO"))

    # RSA keys
    private_key_path: str = field(default_factory=lambda: _env("PAKAILINK_PRIVATE_KEY_PATH", "storage/keys/pakailink_private.pem"))
    public_key_path: str = field(default_factory=lambda: _env("PAKAILINK_PUBLIC_KEY_PATH", "storage/keys/pakailink_public.pem"))

    # HTTP
    timeout: float = field(default_factory=lambda: float(_env("PAKAILINK_TIMEOUT", "30")))
    retry_times: int = field(default_factory=lambda: int(_env("PAKAILINK_RETRY_TIMES", "3")))
    retry_delay_ms: int = field(default_factory=lambda: int(_env("PAKAILINK_RETRY_DELAY", "1000")))

    # Token cache. Server tokens live 900s; cache for 840s.
    token_ttl: int = field(default_factory=lambda: int(_env("PAKAILINK_TOKEN_TTL", "840")))
    token_cache_key: str = field(default_factory=lambda: _env("PAKAILINK_TOKEN_CACHE_KEY", "pakailink:access_token"))
    redis_url: str = field(default_factory=lambda: _env("PAKAILINK_REDIS_URL"))

    callback_base_url: str = field(default_factory=lambda: _env("PAKAILINK_CALLBACK_BASE_URL", "http://localhost:8000/api/pakailink/callbacks"))

    endpoints: Endpoints = field(default_factory=Endpoints)

    @property
    def retry_delay(self) -> float:
        """Delay between retry attempts, in seconds."""
        return self.retry_delay_ms / 1000.0

    @classmethod
    def from_env(cls) -> "PakaiLinkConfig":
        return cls()

    def callback_url(self, suffix: str) -> str:
        return f"{self.callback_base_url.rstrip('/')}/{suffix.lstrip('/')}"
