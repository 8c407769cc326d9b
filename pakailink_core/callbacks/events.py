"""
Callback Events
===============
Domain events raised from verified callbacks and the bus that delivers them.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Type, Union

import structlog

from .models import (
    CallbackType,
    EmoneyCallback,
    QrisCallback,
    RetailCallback,
    TopupCallback,
    TransferCallback,
    VirtualAccountCallback,
)

logger = structlog.get_logger(__name__)

CallbackRecord = Union[
    VirtualAccountCallback,
    QrisCallback,
    EmoneyCallback,
    TransferCallback,
    RetailCallback,
    TopupCallback,
]


@dataclass
class CallbackReceived:
    """Audit event raised for every callback that reached signature verification."""
    callback_type: CallbackType
    raw_body: bytes
    is_valid: bool
    signature: Optional[str] = None


@dataclass
class PaymentEvent:
    """A verified callback converted to a domain event."""
    data: CallbackRecord
    raw_body: bytes
    payload: Dict[str, Any]

    @property
    def callback_type(self) -> CallbackType:
        return self.data.callback_type

    @property
    def partner_reference_no(self) -> str:
        return self.data.reference_no

    @property
    def amount(self) -> float:
        return self.data.amount_value

    def is_success(self) -> bool:
        return self.data.is_success()

    def is_pending(self) -> bool:
        return self.data.is_pending()

    def is_failed(self) -> bool:
        return self.data.is_failed()


@dataclass
class VirtualAccountPaid(PaymentEvent):
    @property
    def virtual_account_no(self) -> str:
        return self.data.virtual_account_no

    @property
    def bank_code(self) -> Optional[str]:
        return self.data.bank_code


@dataclass
class QrisPaymentReceived(PaymentEvent):
    pass


@dataclass
class EmoneyPaymentReceived(PaymentEvent):
    @property
    def channel_name(self) -> str:
        return self.data.channel_name


@dataclass
class TransferCompleted(PaymentEvent):
    @property
    def beneficiary_bank_code(self) -> str:
        return self.data.beneficiary_bank_code


@dataclass
class RetailPaymentReceived(PaymentEvent):
    pass


@dataclass
class TopupCompleted(PaymentEvent):
    pass


EVENT_TYPES: Dict[CallbackType, Type[PaymentEvent]] = {
    CallbackType.VIRTUAL_ACCOUNT: VirtualAccountPaid,
    CallbackType.QRIS: QrisPaymentReceived,
    CallbackType.EMONEY: EmoneyPaymentReceived,
    CallbackType.TRANSFER: TransferCompleted,
    CallbackType.RETAIL: RetailPaymentReceived,
    CallbackType.TOPUP: TopupCompleted,
}


@dataclass
class EventBus:
    """
    In-process event bus for callback events.

    Handlers subscribe to an event class and receive instances of it or of
    its subclasses; subscribing to PaymentEvent receives every payment.
    Publishing never blocks on handlers: they run as tracked background
    tasks and their failures are logged.

    Example:
        bus = EventBus()

        async def on_va_paid(event: VirtualAccountPaid):
            ...

        bus.subscribe(VirtualAccountPaid, on_va_paid)
    """

    _subscribers: Dict[type, List[Callable]] = field(default_factory=dict)
    _background_tasks: set = field(default_factory=set)

    def subscribe(self, event_type: type, handler: Callable) -> None:
        handlers = self._subscribers.setdefault(event_type, [])
        if handler not in handlers:
            handlers.append(handler)
            logger.debug("Handler subscribed", handler=getattr(handler, "__name__", repr(handler)), event_type=event_type.__name__)

    def unsubscribe(self, event_type: type, handler: Callable) -> None:
        handlers = self._subscribers.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)
        if not handlers:
            self._subscribers.pop(event_type, None)

    def handlers_for(self, event: Any) -> List[Callable]:
        matching: List[Callable] = []
        for event_type, handlers in self._subscribers.items():
            if isinstance(event, event_type):
                matching.extend(handlers)
        return matching

    def publish(self, event: Any) -> None:
        """Schedule every matching handler; returns immediately."""
        handlers = self.handlers_for(event)
        if not handlers:
            return
        task = asyncio.get_running_loop().create_task(self._execute_handlers(event, handlers))
        self._background_tasks.add(task)
        task.add_done_callback(self._background_tasks.discard)

    async def _execute_handlers(self, event: Any, handlers: List[Callable]) -> None:
        for handler in handlers:
            try:
                result = handler(event)
                if asyncio.iscoroutine(result):
                    await result
            except Exception:
                logger.exception(
                    "Event handler failed",
                    handler=getattr(handler, "__name__", repr(handler)),
                    event_type=type(event).__name__,
                )

    async def wait_for_background_tasks(self, timeout: Optional[float] = None) -> None:
        """Wait for currently scheduled handlers to finish."""
        if not self._background_tasks:
            return
        pending = list(self._background_tasks)
        await asyncio.wait_for(asyncio.gather(*pending, return_exceptions=True), timeout=timeout)
