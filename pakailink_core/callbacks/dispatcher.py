"""
Callback Dispatcher
===================
Verifies PakaiLink webhooks and turns them into typed domain events.
"""

import json
from typing import Any, Dict, Optional, Tuple, Union

import structlog

from ..exceptions import (
    CallbackError,
    CallbackParseError,
    InvalidSignatureError,
    MissingHeaderError,
)
from ..signature import CallbackEnvelope, SignatureEngine
from .events import EVENT_TYPES, CallbackReceived, EventBus, PaymentEvent
from .models import CALLBACK_RECORDS, CallbackType, extract_reference_no

logger = structlog.get_logger(__name__)

SUCCESS_RESPONSE_CODE = "2000000"
INTERNAL_ERROR_RESPONSE_CODE = "5000000"

ERROR_MESSAGES = {
    MissingHeaderError: "Invalid signature or timestamp",
    InvalidSignatureError: "Signature verification failed",
}


def build_response(code: str, message: str, partner_reference_no: Optional[str] = None) -> Dict[str, Any]:
    """Provider-style response envelope."""
    return {
        "responseCode": code,
        "responseMessage": message,
        "partnerReferenceNo": partner_reference_no,
    }


def _parse_body(raw_body: bytes) -> Any:
    try:
        return json.loads(raw_body)
    except (TypeError, ValueError) as e:
        raise CallbackParseError("Callback body is not valid JSON", details=str(e)) from e


class CallbackDispatcher:
    """
    Verify -> parse -> classify -> publish, for every callback type.

    Signature verification always runs over the untouched request bytes;
    the parsed structure is never re-encoded for hashing.
    """

    def __init__(self, signature_engine: SignatureEngine, event_bus: Optional[EventBus] = None):
        self.signature_engine = signature_engine
        self.event_bus = event_bus or EventBus()

    def verify(self, envelope: CallbackEnvelope, callback_type: CallbackType) -> None:
        """
        Raises:
            MissingHeaderError: Signature or timestamp header absent
            InvalidSignatureError: Signature does not match
        """
        if not envelope.signature or not envelope.timestamp:
            logger.warning(
                "Missing callback signature headers",
                type=callback_type.value,
                has_signature=bool(envelope.signature),
                has_timestamp=bool(envelope.timestamp),
            )
            raise MissingHeaderError("Missing X-SIGNATURE or X-TIMESTAMP header")

        is_valid = self.signature_engine.verify_callback_signature(
            envelope.signature, envelope.raw_body, envelope.timestamp
        )
        self.event_bus.publish(CallbackReceived(
            callback_type=callback_type,
            raw_body=envelope.raw_body,
            is_valid=is_valid,
            signature=envelope.signature,
        ))

        if not is_valid:
            logger.error(
                "Invalid callback signature",
                type=callback_type.value,
                timestamp=envelope.timestamp,
            )
            raise InvalidSignatureError("Invalid callback signature")

        logger.info("Callback signature validated", type=callback_type.value)

    async def handle_callback(
        self,
        callback_type: Union[CallbackType, str],
        raw_body: bytes,
        signature: Optional[str],
        timestamp: Optional[str],
    ) -> PaymentEvent:
        """
        Verify a webhook and publish the resulting event.

        Returns:
            The published PaymentEvent subclass for this callback type

        Raises:
            MissingHeaderError, InvalidSignatureError, CallbackParseError
        """
        callback_type = CallbackType(callback_type)
        envelope = CallbackEnvelope(raw_body=raw_body, signature=signature or "", timestamp=timestamp or "")

        self.verify(envelope, callback_type)

        payload = _parse_body(raw_body)
        record = CALLBACK_RECORDS[callback_type].from_payload(payload)
        event = EVENT_TYPES[callback_type](data=record, raw_body=raw_body, payload=payload)

        self.event_bus.publish(event)

        logger.info(
            "Callback processed",
            type=callback_type.value,
            partner_reference_no=record.reference_no,
            amount=record.amount_value,
            status_code=record.status_code,
            status=record.status.value,
        )
        return event

    def acknowledge(self, event: PaymentEvent) -> Dict[str, Any]:
        return build_response(SUCCESS_RESPONSE_CODE, "Success", event.partner_reference_no)

    def error_response(
        self,
        exc: Exception,
        callback_type: Union[CallbackType, str],
        raw_body: bytes,
    ) -> Tuple[int, Dict[str, Any]]:
        """
        Map a failure from ``handle_callback`` to (http_status, envelope).
        """
        callback_type = CallbackType(callback_type)
        reference_no = None
        try:
            reference_no = extract_reference_no(callback_type, json.loads(raw_body))
        except (TypeError, ValueError):
            pass

        if isinstance(exc, CallbackError):
            message = ERROR_MESSAGES.get(type(exc), exc.message)
            logger.error("Callback rejected", type=callback_type.value, code=exc.response_code, error=exc.message)
            return exc.http_status, build_response(exc.response_code, message, reference_no)

        logger.error("Callback exception", type=callback_type.value, error=str(exc), exc_info=exc)
        return 500, build_response(INTERNAL_ERROR_RESPONSE_CODE, "Internal server error", reference_no)
