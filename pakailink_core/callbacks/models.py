"""
Callback Models
===============
Typed records for each PakaiLink callback payload.

Every record is built through ``from_payload`` which tolerates missing
keys by substituting defaults; nothing here is used for signature
verification, which always runs over the raw request bytes.
"""

from dataclasses import asdict, dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, ClassVar, Dict, Mapping, Optional

from ..exceptions import CallbackParseError


class CallbackType(str, Enum):
    """Webhook kinds, one inbound route each."""
    VIRTUAL_ACCOUNT = "virtual_account"
    QRIS = "qris"
    EMONEY = "emoney"
    TRANSFER = "transfer"
    RETAIL = "retail"
    TOPUP = "topup"


class TransactionStatus(str, Enum):
    """Status derived from the provider's two-digit status code."""
    SUCCESS = "success"
    PENDING = "pending"
    FAILED = "failed"

    @classmethod
    def from_code(cls, code: str) -> "TransactionStatus":
        if code == "00":
            return cls.SUCCESS
        if code == "01":
            return cls.PENDING
        return cls.FAILED


def _amount_value(amount: Mapping[str, Any]) -> float:
    try:
        return float(amount.get("value", 0) or 0)
    except (TypeError, ValueError):
        return 0.0


def _mapping(value: Any) -> Dict[str, Any]:
    return dict(value) if isinstance(value, Mapping) else {}


def _str(value: Any) -> str:
    return "" if value is None else str(value)


def _opt_str(value: Any) -> Optional[str]:
    return None if value is None else str(value)


def _require_mapping(data: Any) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise CallbackParseError("Callback payload must be a JSON object")
    return data


class StatusMixin:
    """Status classification shared by every callback record."""

    @property
    def status_code(self) -> str:
        raise NotImplementedError

    @property
    def status(self) -> TransactionStatus:
        return TransactionStatus.from_code(self.status_code)

    def is_success(self) -> bool:
        return self.status is TransactionStatus.SUCCESS

    def is_pending(self) -> bool:
        return self.status is TransactionStatus.PENDING

    def is_failed(self) -> bool:
        return self.status is TransactionStatus.FAILED

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class VirtualAccountCallback(StatusMixin):
    partner_service_id: str = ""
    customer_no: str = ""
    virtual_account_no: str = ""
    virtual_account_name: str = ""
    partner_reference_no: str = ""
    amount: Dict[str, Any] = field(default_factory=dict)
    latest_transaction_status: str = ""
    transaction_status_desc: str = ""
    inquiry_request_id: Optional[str] = None
    additional_info: Dict[str, Any] = field(default_factory=dict)
    trx_date_time: Optional[str] = None
    payment_flag_reason: Optional[Any] = None

    callback_type: ClassVar[CallbackType] = CallbackType.VIRTUAL_ACCOUNT

    @classmethod
    def from_payload(cls, data: Any) -> "VirtualAccountCallback":
        data = _require_mapping(data)
        return cls(
            partner_service_id=_str(data.get("partnerServiceId")),
            customer_no=_str(data.get("customerNo")),
            virtual_account_no=_str(data.get("virtualAccountNo")),
            virtual_account_name=_str(data.get("virtualAccountName")),
            partner_reference_no=_str(data.get("partnerReferenceNo")),
            amount=_mapping(data.get("amount")),
            latest_transaction_status=_str(data.get("latestTransactionStatus")),
            transaction_status_desc=_str(data.get("transactionStatusDesc")),
            inquiry_request_id=_opt_str(data.get("inquiryRequestId")),
            additional_info=_mapping(data.get("additionalInfo")),
            trx_date_time=_opt_str(data.get("trxDateTime")),
            payment_flag_reason=data.get("paymentFlagReason"),
        )

    @property
    def status_code(self) -> str:
        return self.latest_transaction_status

    @property
    def reference_no(self) -> str:
        return self.partner_reference_no

    @property
    def amount_value(self) -> float:
        return _amount_value(self.amount)

    @property
    def currency(self) -> str:
        return self.amount.get("currency", "IDR")

    @property
    def bank_code(self) -> Optional[str]:
        return self.additional_info.get("bankCd")

    @property
    def transaction_datetime(self) -> Optional[datetime]:
        if not self.trx_date_time:
            return None
        try:
            return datetime.fromisoformat(self.trx_date_time)
        except ValueError:
            return None


@dataclass
class QrisCallback(StatusMixin):
    original_partner_reference_no: str = ""
    original_reference_no: str = ""
    merchant_id: str = ""
    sub_merchant_id: str = ""
    external_store_id: str = ""
    amount: Dict[str, Any] = field(default_factory=dict)
    latest_transaction_status: str = ""
    transaction_status_desc: str = ""
    transaction_date: Optional[str] = None
    additional_info: Dict[str, Any] = field(default_factory=dict)

    callback_type: ClassVar[CallbackType] = CallbackType.QRIS

    @classmethod
    def from_payload(cls, data: Any) -> "QrisCallback":
        data = _require_mapping(data)
        return cls(
            original_partner_reference_no=_str(data.get("originalPartnerReferenceNo")),
            original_reference_no=_str(data.get("originalReferenceNo")),
            merchant_id=_str(data.get("merchantId")),
            sub_merchant_id=_str(data.get("subMerchantId")),
            external_store_id=_str(data.get("externalStoreId")),
            amount=_mapping(data.get("amount")),
            latest_transaction_status=_str(data.get("latestTransactionStatus")),
            transaction_status_desc=_str(data.get("transactionStatusDesc")),
            transaction_date=_opt_str(data.get("transactionDate")),
            additional_info=_mapping(data.get("additionalInfo")),
        )

    @property
    def status_code(self) -> str:
        return self.latest_transaction_status

    @property
    def reference_no(self) -> str:
        return self.original_partner_reference_no

    @property
    def amount_value(self) -> float:
        return _amount_value(self.amount)

    @property
    def qr_content(self) -> Optional[str]:
        return self.additional_info.get("qrContent")


EMONEY_CHANNEL_NAMES = {
    "GOPAY": "GoPay",
    "OVO": "OVO",
    "DANA": "DANA",
    "SHOPEEPAY": "ShopeePay",
    "LINKAJA": "LinkAja",
}


@dataclass
class EmoneyCallback(StatusMixin):
    original_partner_reference_no: str = ""
    original_reference_no: str = ""
    merchant_id: str = ""
    channel_id: str = ""
    amount: Dict[str, Any] = field(default_factory=dict)
    latest_transaction_status: str = ""
    transaction_status_desc: str = ""
    transaction_date: Optional[str] = None
    additional_info: Dict[str, Any] = field(default_factory=dict)

    callback_type: ClassVar[CallbackType] = CallbackType.EMONEY

    @classmethod
    def from_payload(cls, data: Any) -> "EmoneyCallback":
        data = _require_mapping(data)
        return cls(
            original_partner_reference_no=_str(data.get("originalPartnerReferenceNo")),
            original_reference_no=_str(data.get("originalReferenceNo")),
            merchant_id=_str(data.get("merchantId")),
            channel_id=_str(data.get("channelId")),
            amount=_mapping(data.get("amount")),
            latest_transaction_status=_str(data.get("latestTransactionStatus")),
            transaction_status_desc=_str(data.get("transactionStatusDesc")),
            transaction_date=_opt_str(data.get("transactionDate")),
            additional_info=_mapping(data.get("additionalInfo")),
        )

    @property
    def status_code(self) -> str:
        return self.latest_transaction_status

    @property
    def reference_no(self) -> str:
        return self.original_partner_reference_no

    @property
    def amount_value(self) -> float:
        return _amount_value(self.amount)

    @property
    def channel_name(self) -> str:
        return EMONEY_CHANNEL_NAMES.get(self.channel_id, self.channel_id)


@dataclass
class TransferCallback(StatusMixin):
    partner_reference_no: str = ""
    provider_reference_no: str = ""
    beneficiary_bank_code: str = ""
    beneficiary_account_no: str = ""
    beneficiary_account_name: str = ""
    amount: Dict[str, Any] = field(default_factory=dict)
    latest_transaction_status: str = ""
    transaction_status_desc: str = ""
    transaction_date: Optional[str] = None
    additional_info: Dict[str, Any] = field(default_factory=dict)

    callback_type: ClassVar[CallbackType] = CallbackType.TRANSFER

    @classmethod
    def from_payload(cls, data: Any) -> "TransferCallback":
        data = _require_mapping(data)
        return cls(
            partner_reference_no=_str(data.get("partnerReferenceNo")),
            provider_reference_no=_str(data.get("referenceNo")),
            beneficiary_bank_code=_str(data.get("beneficiaryBankCode")),
            beneficiary_account_no=_str(data.get("beneficiaryAccountNo")),
            beneficiary_account_name=_str(data.get("beneficiaryAccountName")),
            amount=_mapping(data.get("amount")),
            latest_transaction_status=_str(data.get("latestTransactionStatus")),
            transaction_status_desc=_str(data.get("transactionStatusDesc")),
            transaction_date=_opt_str(data.get("transactionDate")),
            additional_info=_mapping(data.get("additionalInfo")),
        )

    @property
    def status_code(self) -> str:
        return self.latest_transaction_status

    @property
    def reference_no(self) -> str:
        return self.partner_reference_no

    @property
    def amount_value(self) -> float:
        return _amount_value(self.amount)


def _transaction_data(data: Mapping[str, Any]) -> Mapping[str, Any]:
    """Retail and top-up payloads nest their fields under ``transactionData``."""
    nested = data.get("transactionData")
    return nested if isinstance(nested, Mapping) else data


@dataclass
class RetailCallback(StatusMixin):
    partner_reference_no: str = ""
    customer_no: str = ""
    customer_name: str = ""
    callback_type_name: str = "settlement"
    payment_flag_status: str = ""
    payment_flag_reason: Dict[str, Any] = field(default_factory=dict)
    paid_amount: Dict[str, Any] = field(default_factory=dict)
    fee_amount: Dict[str, Any] = field(default_factory=dict)
    credit_balance: Dict[str, Any] = field(default_factory=dict)
    additional_info: Dict[str, Any] = field(default_factory=dict)

    callback_type: ClassVar[CallbackType] = CallbackType.RETAIL

    @classmethod
    def from_payload(cls, data: Any) -> "RetailCallback":
        trx = _transaction_data(_require_mapping(data))
        return cls(
            partner_reference_no=_str(trx.get("partnerReferenceNo")),
            customer_no=_str(trx.get("customerNo")),
            customer_name=_str(trx.get("customerName")),
            callback_type_name=_str(trx.get("callbackType") or "settlement"),
            payment_flag_status=_str(trx.get("paymentFlagStatus")),
            payment_flag_reason=_mapping(trx.get("paymentFlagReason")),
            paid_amount=_mapping(trx.get("paidAmount")),
            fee_amount=_mapping(trx.get("feeAmount")),
            credit_balance=_mapping(trx.get("creditBalance")),
            additional_info=_mapping(trx.get("additionalInfo")),
        )

    @property
    def status_code(self) -> str:
        return self.payment_flag_status

    @property
    def reference_no(self) -> str:
        return self.partner_reference_no

    @property
    def amount_value(self) -> float:
        return _amount_value(self.paid_amount)

    @property
    def fee_value(self) -> float:
        return _amount_value(self.fee_amount)

    @property
    def credit_balance_value(self) -> float:
        return _amount_value(self.credit_balance)

    @property
    def balance(self) -> Optional[float]:
        balance = _mapping(self.additional_info.get("balance"))
        return _amount_value(balance) if "value" in balance else None


@dataclass
class TopupCallback(StatusMixin):
    partner_reference_no: str = ""
    account_number: str = ""
    account_name: str = ""
    provider_reference_no: str = ""
    payment_flag_status: str = ""
    payment_flag_reason: Dict[str, Any] = field(default_factory=dict)
    paid_amount: Dict[str, Any] = field(default_factory=dict)
    fee_amount: Dict[str, Any] = field(default_factory=dict)
    additional_info: Dict[str, Any] = field(default_factory=dict)

    callback_type: ClassVar[CallbackType] = CallbackType.TOPUP

    @classmethod
    def from_payload(cls, data: Any) -> "TopupCallback":
        trx = _transaction_data(_require_mapping(data))
        return cls(
            partner_reference_no=_str(trx.get("partnerReferenceNo")),
            account_number=_str(trx.get("accountNumber")),
            account_name=_str(trx.get("accountName")),
            provider_reference_no=_str(trx.get("referenceNo")),
            payment_flag_status=_str(trx.get("paymentFlagStatus")),
            payment_flag_reason=_mapping(trx.get("paymentFlagReason")),
            paid_amount=_mapping(trx.get("paidAmount")),
            fee_amount=_mapping(trx.get("feeAmount")),
            additional_info=_mapping(trx.get("additionalInfo")),
        )

    @property
    def status_code(self) -> str:
        return self.payment_flag_status

    @property
    def reference_no(self) -> str:
        return self.partner_reference_no

    @property
    def amount_value(self) -> float:
        return _amount_value(self.paid_amount)

    @property
    def fee_value(self) -> float:
        return _amount_value(self.fee_amount)

    @property
    def balance(self) -> Optional[float]:
        balance = _mapping(self.additional_info.get("balance"))
        return _amount_value(balance) if "value" in balance else None


CALLBACK_RECORDS = {
    CallbackType.VIRTUAL_ACCOUNT: VirtualAccountCallback,
    CallbackType.QRIS: QrisCallback,
    CallbackType.EMONEY: EmoneyCallback,
    CallbackType.TRANSFER: TransferCallback,
    CallbackType.RETAIL: RetailCallback,
    CallbackType.TOPUP: TopupCallback,
}


def extract_reference_no(callback_type: CallbackType, data: Any) -> Optional[str]:
    """Best-effort partner reference lookup for error envelopes."""
    if not isinstance(data, Mapping):
        return None
    if callback_type in (CallbackType.QRIS, CallbackType.EMONEY):
        value = data.get("originalPartnerReferenceNo")
    elif callback_type in (CallbackType.RETAIL, CallbackType.TOPUP):
        value = _transaction_data(data).get("partnerReferenceNo")
    else:
        value = data.get("partnerReferenceNo")
    return _opt_str(value)
