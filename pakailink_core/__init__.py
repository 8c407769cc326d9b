"""
PakaiLink Core
==============
Async SDK and webhook receiver for the PakaiLink SNAP payment gateway.
"""

__version__ = "0.1.0"

# Configuration
from pakailink_core.config import PakaiLinkConfig, Endpoints

# Logging
from pakailink_core.logs import setup_logging

# Exceptions
from pakailink_core.exceptions import (
    PakaiLinkError,
    SignatureError,
    KeyLoadError,
    SigningError,
    MalformedBodyError,
    AuthenticationError,
    ApiError,
    ServiceUnavailableError,
    ServiceTimeoutError,
    TransactionError,
    CallbackError,
    MissingHeaderError,
    InvalidSignatureError,
    CallbackParseError,
)

# Signing
from pakailink_core.signature import (
    SignatureEngine,
    SignedRequest,
    CallbackEnvelope,
    snap_timestamp,
    ExternalIdGenerator,
)

# Auth
from pakailink_core.auth import (
    AuthClient,
    CachedToken,
    TokenStore,
    InMemoryTokenStore,
    RedisTokenStore,
)

# HTTP
from pakailink_core.http import ApiClient

# Callbacks
from pakailink_core.callbacks import (
    CallbackDispatcher,
    CallbackType,
    TransactionStatus,
    EventBus,
    CallbackReceived,
    PaymentEvent,
    VirtualAccountPaid,
    QrisPaymentReceived,
    EmoneyPaymentReceived,
    TransferCompleted,
    RetailPaymentReceived,
    TopupCompleted,
    create_callback_router,
)

# Products
from pakailink_core.services import (
    VirtualAccountService,
    QrisService,
    EmoneyService,
    TransferService,
    RetailService,
    TopupService,
    BalanceService,
    MerchantService,
    CreateVirtualAccount,
    GenerateQris,
    CreateEmoneyPayment,
    CreateRetailPayment,
    TransferToBank,
    TopupPayment,
    BankCode,
    TransactionType,
    MerchantTransactionStatus,
)

from pakailink_core.gateway import PakaiLink

__all__ = [
    "__version__",
    # Configuration
    "PakaiLinkConfig",
    "Endpoints",
    "setup_logging",
    # Exceptions
    "PakaiLinkError",
    "SignatureError",
    "KeyLoadError",
    "SigningError",
    "MalformedBodyError",
    "AuthenticationError",
    "ApiError",
    "ServiceUnavailableError",
    "ServiceTimeoutError",
    "TransactionError",
    "CallbackError",
    "MissingHeaderError",
    "InvalidSignatureError",
    "CallbackParseError",
    # Signing
    "SignatureEngine",
    "SignedRequest",
    "CallbackEnvelope",
    "snap_timestamp",
    "ExternalIdGenerator",
    # Auth
    "AuthClient",
    "CachedToken",
    "TokenStore",
    "InMemoryTokenStore",
    "RedisTokenStore",
    # HTTP
    "ApiClient",
    # Callbacks
    "CallbackDispatcher",
    "CallbackType",
    "TransactionStatus",
    "EventBus",
    "CallbackReceived",
    "PaymentEvent",
    "VirtualAccountPaid",
    "QrisPaymentReceived",
    "EmoneyPaymentReceived",
    "TransferCompleted",
    "RetailPaymentReceived",
    "TopupCompleted",
    "create_callback_router",
    # Products
    "VirtualAccountService",
    "QrisService",
    "EmoneyService",
    "TransferService",
    "RetailService",
    "TopupService",
    "BalanceService",
    "MerchantService",
    "CreateVirtualAccount",
    "GenerateQris",
    "CreateEmoneyPayment",
    "CreateRetailPayment",
    "TransferToBank",
    "TopupPayment",
    "BankCode",
    "TransactionType",
    "MerchantTransactionStatus",
    # Gateway
    "PakaiLink",
]
