from .dispatcher import CallbackDispatcher, build_response
from .events import (
    EVENT_TYPES,
    CallbackReceived,
    EmoneyPaymentReceived,
    EventBus,
    PaymentEvent,
    QrisPaymentReceived,
    RetailPaymentReceived,
    TopupCompleted,
    TransferCompleted,
    VirtualAccountPaid,
)
from .models import (
    CALLBACK_RECORDS,
    CallbackType,
    EmoneyCallback,
    QrisCallback,
    RetailCallback,
    TopupCallback,
    TransactionStatus,
    TransferCallback,
    VirtualAccountCallback,
)
from .router import CALLBACK_PATHS, create_callback_router

__all__ = [
    # Dispatch
    "CallbackDispatcher",
    "build_response",
    "create_callback_router",
    "CALLBACK_PATHS",
    # Events
    "EventBus",
    "CallbackReceived",
    "PaymentEvent",
    "VirtualAccountPaid",
    "QrisPaymentReceived",
    "EmoneyPaymentReceived",
    "TransferCompleted",
    "RetailPaymentReceived",
    "TopupCompleted",
    "EVENT_TYPES",
    # Records
    "CallbackType",
    "TransactionStatus",
    "VirtualAccountCallback",
    "QrisCallback",
    "EmoneyCallback",
    "TransferCallback",
    "RetailCallback",
    "TopupCallback",
    "CALLBACK_RECORDS",
]
